"""
FeistelVault - an educational Feistel block cipher.

WARNING: For learning purposes only. Not a secure cipher.
"""

from .core_crypto import (
    FeistelCipher,
    CipherMode,
    derive_master_key,
    encrypt_message,
    decrypt_message,
)

__version__ = "0.1.0"

__all__ = [
    'FeistelCipher',
    'CipherMode',
    'derive_master_key',
    'encrypt_message',
    'decrypt_message',
]
