"""
Feistel Cipher Facade

Password-based message encryption built on the Feistel engine.

Envelope Format:
    base64( IV (16 bytes) | raw ciphertext )

The salt used for key derivation is NOT part of the envelope. It is
exposed as `FeistelCipher.salt` and must be stored or transmitted by the
caller; without it the key cannot be derived again from the password.

Thread safety:
    The master key and round-key schedule are derived once and never
    mutated, so one instance may encrypt and decrypt on several threads.
    Every call uses its own IV and counter buffer.
"""

import base64
import binascii
import logging
import secrets
from typing import Optional, Tuple, Union

from .constants import BLOCK_SIZE, KEY_SIZE
from .exceptions import DecryptionError, InvalidPadding, MalformedEnvelope
from .hashing import HashFunction, sha256
from .kdf import IteratedHashKDF, KeyDerivation, derive_master_key
from .key_schedule import RoundKeys, generate_round_keys
from .modes import CipherMode, decrypt_with_schedule, encrypt_with_schedule


logger = logging.getLogger("FeistelVault.Cipher")


def generate_iv() -> bytes:
    """
    Generate a fresh random IV / initial counter.

    CRITICAL: Never reuse an IV with the same key!
    """
    return secrets.token_bytes(BLOCK_SIZE)


def pack_envelope(iv: bytes, ciphertext: bytes) -> str:
    """Serialize IV and ciphertext into a base64 transport string."""
    return base64.b64encode(iv + ciphertext).decode('ascii')


def unpack_envelope(envelope: Union[str, bytes],
                    mode: CipherMode = CipherMode.CBC) -> Tuple[bytes, bytes]:
    """
    Parse a transport envelope into (iv, ciphertext).

    Args:
        envelope: base64 string produced by pack_envelope()
        mode: Mode the ciphertext was produced with

    Returns:
        Tuple of (iv, ciphertext)

    Raises:
        MalformedEnvelope: If the envelope is not valid base64, is shorter
                           than an IV, or (ECB/CBC) its ciphertext is not a
                           non-zero multiple of BLOCK_SIZE
    """
    try:
        raw = base64.b64decode(envelope, validate=True)
    except (binascii.Error, ValueError):
        raise MalformedEnvelope("Envelope is not valid base64") from None

    if len(raw) < BLOCK_SIZE:
        raise MalformedEnvelope(
            f"Envelope too short: {len(raw)} bytes, IV alone is {BLOCK_SIZE}"
        )

    iv, ciphertext = raw[:BLOCK_SIZE], raw[BLOCK_SIZE:]

    if mode.uses_padding and (not ciphertext or len(ciphertext) % BLOCK_SIZE):
        raise MalformedEnvelope(
            f"Ciphertext length {len(ciphertext)} is not a non-zero "
            f"multiple of {BLOCK_SIZE}"
        )

    return iv, ciphertext


class FeistelCipher:
    """
    Password-based Feistel cipher.

    Example:
        >>> cipher = FeistelCipher("MySecretPassword123", mode=CipherMode.CTR)
        >>> envelope = cipher.encrypt("Hello, Feistel!")
        >>> cipher.decrypt(envelope)
        'Hello, Feistel!'
        >>> len(cipher.salt)
        16

    WARNING: This is for educational purposes only!
    """

    def __init__(self, password: str,
                 mode: Union[CipherMode, str] = CipherMode.CBC,
                 salt: Optional[bytes] = None,
                 kdf: Optional[KeyDerivation] = None,
                 hash_fn: HashFunction = sha256):
        """
        Derive the key and round-key schedule.

        Args:
            password: Password to derive the master key from
            mode: Mode of operation for every message of this instance
            salt: Salt to re-derive an existing key (random if None)
            kdf: Key derivation (iterated-hash KDF if None)
            hash_fn: Hash primitive for the KDF default, schedule and rounds
        """
        kdf = kdf or IteratedHashKDF(hash_fn=hash_fn)
        key, salt = derive_master_key(password, salt, kdf)
        self._setup(key, mode, hash_fn)
        self._salt = salt

    @classmethod
    def from_key(cls, key: bytes,
                 mode: Union[CipherMode, str] = CipherMode.CBC,
                 hash_fn: HashFunction = sha256) -> 'FeistelCipher':
        """
        Create a cipher from raw key material instead of a password.

        Raises:
            ValueError: If key is not KEY_SIZE bytes
        """
        cipher = cls.__new__(cls)
        cipher._setup(key, mode, hash_fn)
        cipher._salt = None
        return cipher

    def _setup(self, key: bytes, mode: Union[CipherMode, str],
               hash_fn: HashFunction) -> None:
        if len(key) != KEY_SIZE:
            raise ValueError(f"Key must be {KEY_SIZE} bytes")
        if isinstance(mode, str):
            mode = CipherMode.from_name(mode)
        self._key = bytes(key)
        self._mode = mode
        self._hash = hash_fn
        self._round_keys = generate_round_keys(self._key, hash_fn=hash_fn)
        logger.debug("Cipher ready: mode=%s rounds=%d", mode.value,
                     len(self._round_keys))

    @property
    def key(self) -> bytes:
        """Derived master key."""
        return self._key

    @property
    def salt(self) -> Optional[bytes]:
        """Salt used to derive the key (None for from_key instances)."""
        return self._salt

    @property
    def mode(self) -> CipherMode:
        return self._mode

    @property
    def round_keys(self) -> RoundKeys:
        """Forward round-key schedule."""
        return self._round_keys

    def encrypt_bytes(self, plaintext: bytes, iv: Optional[bytes] = None) -> str:
        """
        Encrypt bytes into a transport envelope.

        Args:
            plaintext: Data to encrypt
            iv: Explicit IV (fresh random IV if None)

        Returns:
            base64 envelope (IV || ciphertext)
        """
        iv = generate_iv() if iv is None else bytes(iv)
        ciphertext = encrypt_with_schedule(
            plaintext, self._round_keys, iv, self._mode, self._hash
        )
        logger.debug("Encrypted %d bytes (%s)", len(plaintext), self._mode.value)
        return pack_envelope(iv, ciphertext)

    def encrypt(self, plaintext: Union[str, bytes],
                iv: Optional[bytes] = None) -> str:
        """Encrypt a UTF-8 string (or bytes) into a transport envelope."""
        if isinstance(plaintext, str):
            plaintext = plaintext.encode('utf-8')
        return self.encrypt_bytes(plaintext, iv)

    def decrypt_bytes(self, envelope: Union[str, bytes]) -> bytes:
        """
        Decrypt a transport envelope to bytes.

        Raises:
            MalformedEnvelope: If the envelope cannot be parsed
            DecryptionError: If decryption fails
        """
        iv, ciphertext = unpack_envelope(envelope, self._mode)
        try:
            return decrypt_with_schedule(
                ciphertext, self._round_keys, iv, self._mode, self._hash
            )
        except InvalidPadding:
            raise DecryptionError("Decryption failed") from None

    def decrypt(self, envelope: Union[str, bytes]) -> str:
        """
        Decrypt a transport envelope to a string.

        Raises:
            MalformedEnvelope: If the envelope cannot be parsed
            DecryptionError: If decryption fails or the result is not UTF-8
        """
        plaintext = self.decrypt_bytes(envelope)
        try:
            return plaintext.decode('utf-8')
        except UnicodeDecodeError:
            raise DecryptionError("Decryption failed") from None

    def __repr__(self) -> str:
        return f"FeistelCipher(mode={self._mode.value}, rounds={len(self._round_keys)})"
