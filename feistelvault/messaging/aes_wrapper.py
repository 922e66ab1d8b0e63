"""
AES-CBC Wrapper

A thin convenience layer over the `cryptography` library's AES in CBC
mode with PKCS7 padding. Used as a reference point next to the Feistel
cipher; no AES logic is implemented here.

Output:
    (base64 IV, base64 ciphertext)
"""

import base64
import secrets
from typing import Optional, Tuple

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import padding as sym_padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes


AES_KEY_SIZES = (16, 24, 32)
AES_BLOCK_SIZE = 16          # bytes
DEFAULT_KEY_SIZE = 32        # AES-256


class AESCipher:
    """
    AES-CBC encryption of UTF-8 strings.

    Example:
        >>> aes = AESCipher()
        >>> iv, ct = aes.encrypt("Hello, AES!")
        >>> aes.decrypt(iv, ct)
        'Hello, AES!'
    """

    def __init__(self, key: Optional[bytes] = None):
        """
        Args:
            key: 16, 24 or 32-byte AES key (random 32-byte key if None)

        Raises:
            ValueError: If the key length is not a valid AES key size
        """
        if key is None:
            key = secrets.token_bytes(DEFAULT_KEY_SIZE)
        if len(key) not in AES_KEY_SIZES:
            raise ValueError(f"Key must be one of {AES_KEY_SIZES} bytes")
        self._key = key

    @property
    def key(self) -> bytes:
        return self._key

    def _cipher(self, iv: bytes) -> Cipher:
        return Cipher(algorithms.AES(self._key), modes.CBC(iv), backend=default_backend())

    def encrypt(self, plaintext: str) -> Tuple[str, str]:
        """
        Encrypt a string with a fresh random IV.

        Returns:
            Tuple of (base64 IV, base64 ciphertext)
        """
        iv = secrets.token_bytes(AES_BLOCK_SIZE)
        padder = sym_padding.PKCS7(AES_BLOCK_SIZE * 8).padder()
        padded = padder.update(plaintext.encode('utf-8')) + padder.finalize()

        encryptor = self._cipher(iv).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()

        return (
            base64.b64encode(iv).decode('ascii'),
            base64.b64encode(ciphertext).decode('ascii'),
        )

    def decrypt(self, iv_b64: str, ciphertext_b64: str) -> str:
        """
        Decrypt a (base64 IV, base64 ciphertext) pair.

        Raises:
            ValueError: If the IV, ciphertext or padding is invalid
        """
        iv = base64.b64decode(iv_b64)
        ciphertext = base64.b64decode(ciphertext_b64)
        if len(iv) != AES_BLOCK_SIZE:
            raise ValueError(f"IV must be {AES_BLOCK_SIZE} bytes")
        if not ciphertext or len(ciphertext) % AES_BLOCK_SIZE:
            raise ValueError("Ciphertext is not a multiple of the AES block size")

        decryptor = self._cipher(iv).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()

        unpadder = sym_padding.PKCS7(AES_BLOCK_SIZE * 8).unpadder()
        plaintext = unpadder.update(padded) + unpadder.finalize()
        return plaintext.decode('utf-8')
