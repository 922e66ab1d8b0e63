"""
Password-Based Key Derivation

Turns a password and a random salt into a fixed-size master key.

Components:
- IteratedHashKDF: hash(password || salt), re-hashed 10,000 times
- PBKDF2KDF: PBKDF2-HMAC-SHA256 (cryptography)
- Argon2KDF: Argon2id (argon2-cffi)
- fit_key_length: truncate or tile a digest to KEY_SIZE bytes

Security Note:
    The iterated-hash construction is the cipher's reference KDF. It is a
    plain hash chain with no per-iteration salting and no memory hardness,
    so it is weak against offline brute force. The two library-backed KDFs
    implement the same interface and can be substituted without touching
    the cipher core, but they produce different keys.
"""

import logging
import secrets
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from argon2.low_level import Type, hash_secret_raw
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .constants import KDF_ITERATIONS, KEY_SIZE, SALT_SIZE
from .hashing import HashFunction, sha256


logger = logging.getLogger("FeistelVault.KDF")


# PBKDF2 configuration
PBKDF2_ITERATIONS = 100_000

# Argon2id configuration
# - time_cost: number of passes
# - memory_cost: memory usage in KiB
# - parallelism: number of lanes
ARGON2_CONFIG = {
    'time_cost': 3,
    'memory_cost': 65536,    # 64 MiB
    'parallelism': 4,
}


def generate_salt(length: int = SALT_SIZE) -> bytes:
    """Generate a cryptographically secure random salt."""
    return secrets.token_bytes(length)


def fit_key_length(material: bytes, length: int = KEY_SIZE) -> bytes:
    """
    Resize key material to exactly `length` bytes.

    Longer input is truncated; shorter input is repeated cyclically.

    Example:
        >>> fit_key_length(b"abc", 7)
        b'abcabca'
    """
    if not material:
        raise ValueError("Key material cannot be empty")
    if len(material) >= length:
        return material[:length]
    repeats = -(-length // len(material))
    return (material * repeats)[:length]


def _check_salt(salt: bytes) -> None:
    if len(salt) != SALT_SIZE:
        raise ValueError(f"Salt must be {SALT_SIZE} bytes, got {len(salt)}")


class KeyDerivation(ABC):
    """
    Interface for password-based key derivation.

    Implementations map (password, salt) to a KEY_SIZE-byte master key
    deterministically.
    """

    name = "abstract"

    @abstractmethod
    def derive(self, password: str, salt: bytes) -> bytes:
        """Derive a KEY_SIZE-byte key from password and salt."""


class IteratedHashKDF(KeyDerivation):
    """
    Chained-hash key derivation.

    key = H^(iterations)(H(utf8(password) || salt)), resized to KEY_SIZE.

    Example:
        >>> kdf = IteratedHashKDF()
        >>> len(kdf.derive("MySecretPassword123", bytes(16)))
        32
    """

    name = "iterated-hash"

    def __init__(self, iterations: int = KDF_ITERATIONS,
                 hash_fn: HashFunction = sha256):
        if iterations < 0:
            raise ValueError("Iteration count cannot be negative")
        self._iterations = iterations
        self._hash = hash_fn

    @property
    def iterations(self) -> int:
        return self._iterations

    def derive(self, password: str, salt: bytes) -> bytes:
        _check_salt(salt)
        digest = self._hash(password.encode('utf-8') + salt)
        for _ in range(self._iterations):
            digest = self._hash(digest)
        return fit_key_length(digest, KEY_SIZE)


class PBKDF2KDF(KeyDerivation):
    """PBKDF2-HMAC-SHA256 key derivation backed by `cryptography`."""

    name = "pbkdf2-sha256"

    def __init__(self, iterations: int = PBKDF2_ITERATIONS):
        self._iterations = iterations

    def derive(self, password: str, salt: bytes) -> bytes:
        _check_salt(salt)
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_SIZE,
            salt=salt,
            iterations=self._iterations,
            backend=default_backend()
        )
        return kdf.derive(password.encode('utf-8'))


class Argon2KDF(KeyDerivation):
    """
    Argon2id key derivation backed by `argon2-cffi`.

    Args:
        **kwargs: Override entries of ARGON2_CONFIG
    """

    name = "argon2id"

    def __init__(self, **kwargs):
        unknown = set(kwargs) - set(ARGON2_CONFIG)
        if unknown:
            raise ValueError(f"Unknown Argon2 parameters: {sorted(unknown)}")
        self._config = ARGON2_CONFIG.copy()
        self._config.update(kwargs)

    def derive(self, password: str, salt: bytes) -> bytes:
        _check_salt(salt)
        return hash_secret_raw(
            secret=password.encode('utf-8'),
            salt=salt,
            time_cost=self._config['time_cost'],
            memory_cost=self._config['memory_cost'],
            parallelism=self._config['parallelism'],
            hash_len=KEY_SIZE,
            type=Type.ID,
        )


def derive_key(password: str, salt: bytes,
               hash_fn: HashFunction = sha256) -> bytes:
    """
    Derive the master key with the reference iterated-hash KDF.

    Args:
        password: Arbitrary password string
        salt: 16-byte salt
        hash_fn: Hash primitive

    Returns:
        32-byte master key
    """
    return IteratedHashKDF(hash_fn=hash_fn).derive(password, salt)


def derive_master_key(password: str, salt: Optional[bytes] = None,
                      kdf: Optional[KeyDerivation] = None) -> Tuple[bytes, bytes]:
    """
    Derive a master key, generating a salt if none is supplied.

    The salt is returned with the key because it must travel with the
    ciphertext: without it the key cannot be derived again.

    Returns:
        Tuple of (key, salt)
    """
    if salt is None:
        salt = generate_salt()
    kdf = kdf or IteratedHashKDF()
    logger.debug("Deriving master key with %s", kdf.name)
    return kdf.derive(password, salt), salt
