# Core Cryptography Module
"""
Feistel cipher engine built from scratch:
- Hash-chain key derivation (kdf.py)
- Round key schedule (key_schedule.py)
- 16-round Feistel block transform (feistel.py)
- ECB / CBC / CTR modes (modes.py)
- Block padding (padding.py)
- Password-based cipher and transport envelope (cipher.py)
"""

from .constants import BLOCK_SIZE, KEY_SIZE, ROUNDS, ROUND_KEY_SIZE, SALT_SIZE, KDF_ITERATIONS
from .exceptions import (
    CipherError,
    InvalidBlockSize,
    InvalidPadding,
    MalformedEnvelope,
    DecryptionError,
)
from .hashing import sha256, get_hash_function
from .kdf import (
    KeyDerivation,
    IteratedHashKDF,
    PBKDF2KDF,
    Argon2KDF,
    derive_key,
    derive_master_key,
    generate_salt,
)
from .key_schedule import generate_round_keys, reverse_schedule
from .feistel import transform_block, round_function, encrypt_block, decrypt_block
from .padding import pad, unpad
from .modes import CipherMode, encrypt_message, decrypt_message, increment_counter
from .cipher import FeistelCipher, pack_envelope, unpack_envelope, generate_iv

__all__ = [
    # Parameters
    'BLOCK_SIZE', 'KEY_SIZE', 'ROUNDS', 'ROUND_KEY_SIZE', 'SALT_SIZE', 'KDF_ITERATIONS',
    # Errors
    'CipherError', 'InvalidBlockSize', 'InvalidPadding', 'MalformedEnvelope', 'DecryptionError',
    # Hash
    'sha256', 'get_hash_function',
    # Key derivation
    'KeyDerivation', 'IteratedHashKDF', 'PBKDF2KDF', 'Argon2KDF',
    'derive_key', 'derive_master_key', 'generate_salt',
    # Engine
    'generate_round_keys', 'reverse_schedule',
    'transform_block', 'round_function', 'encrypt_block', 'decrypt_block',
    'pad', 'unpad',
    'CipherMode', 'encrypt_message', 'decrypt_message', 'increment_counter',
    # Facade
    'FeistelCipher', 'pack_envelope', 'unpack_envelope', 'generate_iv',
]
