"""
Hybrid Encryption Envelope

Encrypts a message with a one-time AES-256-GCM session key and wraps the
session key with the recipient's RSA public key (OAEP, SHA-256). Both
primitives come from the `cryptography` library; this module only
defines the key handling and the wire format.

Wire Format (four length-prefixed fields, fixed order):
    [len (4) | ciphertext]
    [len (4) | RSA-wrapped session key]
    [len (4) | IV / nonce]
    [len (4) | GCM tag]

Lengths are unsigned 32-bit big-endian integers.
"""

import secrets
import struct
from dataclasses import dataclass
from typing import List, Optional

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..core_crypto.exceptions import MalformedEnvelope


# Constants
RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537
SESSION_KEY_SIZE = 32   # AES-256
NONCE_SIZE = 12         # 96 bits for GCM
TAG_SIZE = 16           # 128-bit GCM tag
LENGTH_PREFIX = struct.Struct('>I')

OAEP_PADDING = padding.OAEP(
    mgf=padding.MGF1(algorithm=hashes.SHA256()),
    algorithm=hashes.SHA256(),
    label=None,
)


@dataclass
class RSAKeyPair:
    """RSA key pair container."""
    private_key: Optional[rsa.RSAPrivateKey]
    public_key: rsa.RSAPublicKey

    @classmethod
    def generate(cls, bits: int = RSA_KEY_SIZE) -> 'RSAKeyPair':
        """Generate a new RSA key pair."""
        private_key = rsa.generate_private_key(
            public_exponent=RSA_PUBLIC_EXPONENT,
            key_size=bits,
            backend=default_backend()
        )
        return cls(private_key, private_key.public_key())

    def public_pem(self) -> bytes:
        """Public key as PEM (SubjectPublicKeyInfo)."""
        return self.public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo
        )

    @classmethod
    def from_public_pem(cls, data: bytes) -> 'RSAKeyPair':
        """Create a public-only key pair from PEM bytes."""
        public_key = serialization.load_pem_public_key(data, backend=default_backend())
        return cls(None, public_key)


@dataclass
class HybridEnvelope:
    """
    Container for the four hybrid envelope fields.

    Format: [ciphertext | encrypted_key | iv | tag], each length-prefixed
    """
    ciphertext: bytes
    encrypted_key: bytes
    iv: bytes
    tag: bytes

    def fields(self) -> List[bytes]:
        return [self.ciphertext, self.encrypted_key, self.iv, self.tag]

    def to_bytes(self) -> bytes:
        """Serialize with a 4-byte big-endian length before each field."""
        return b"".join(LENGTH_PREFIX.pack(len(f)) + f for f in self.fields())

    @classmethod
    def from_bytes(cls, data: bytes) -> 'HybridEnvelope':
        """
        Deserialize from bytes.

        Raises:
            MalformedEnvelope: If a field is truncated or bytes remain
        """
        offset = 0
        parts = []

        for name in ("ciphertext", "encrypted_key", "iv", "tag"):
            if offset + LENGTH_PREFIX.size > len(data):
                raise MalformedEnvelope(f"Truncated length prefix for {name}")
            (length,) = LENGTH_PREFIX.unpack_from(data, offset)
            offset += LENGTH_PREFIX.size

            if offset + length > len(data):
                raise MalformedEnvelope(f"Truncated {name}: need {length} bytes")
            parts.append(data[offset:offset + length])
            offset += length

        if offset != len(data):
            raise MalformedEnvelope(f"{len(data) - offset} trailing bytes after envelope")

        return cls(*parts)


class HybridEncryptor:
    """
    RSA-OAEP + AES-256-GCM hybrid encryption.

    Example:
        >>> alice = HybridEncryptor()
        >>> blob = HybridEncryptor.seal(b"Hello Alice", alice.public_key)
        >>> alice.decrypt(blob)
        b'Hello Alice'
    """

    def __init__(self, key_pair: Optional[RSAKeyPair] = None):
        """
        Args:
            key_pair: Recipient key pair (generated if None)
        """
        self._key_pair = key_pair or RSAKeyPair.generate()

    @property
    def public_key(self) -> rsa.RSAPublicKey:
        return self._key_pair.public_key

    @property
    def key_pair(self) -> RSAKeyPair:
        return self._key_pair

    @staticmethod
    def seal(plaintext: bytes, recipient_public_key: rsa.RSAPublicKey) -> bytes:
        """
        Encrypt plaintext for the holder of recipient_public_key.

        Returns:
            Serialized HybridEnvelope
        """
        session_key = secrets.token_bytes(SESSION_KEY_SIZE)
        nonce = secrets.token_bytes(NONCE_SIZE)

        ciphertext_with_tag = AESGCM(session_key).encrypt(nonce, plaintext, None)
        encrypted_key = recipient_public_key.encrypt(session_key, OAEP_PADDING)

        return HybridEnvelope(
            ciphertext=ciphertext_with_tag[:-TAG_SIZE],
            encrypted_key=encrypted_key,
            iv=nonce,
            tag=ciphertext_with_tag[-TAG_SIZE:],
        ).to_bytes()

    def encrypt(self, plaintext: bytes,
                recipient_public_key: Optional[rsa.RSAPublicKey] = None) -> bytes:
        """Encrypt for a recipient (this instance's own key if None)."""
        return self.seal(plaintext, recipient_public_key or self.public_key)

    def decrypt(self, data: bytes) -> bytes:
        """
        Decrypt a serialized HybridEnvelope with this instance's private key.

        Raises:
            MalformedEnvelope: If the framing is invalid
            ValueError: If the session key cannot be unwrapped or no private key
            InvalidTag: If the ciphertext or tag was modified
        """
        if self._key_pair.private_key is None:
            raise ValueError("Private key required for decryption")

        envelope = HybridEnvelope.from_bytes(data)
        session_key = self._key_pair.private_key.decrypt(envelope.encrypted_key, OAEP_PADDING)

        return AESGCM(session_key).decrypt(
            envelope.iv, envelope.ciphertext + envelope.tag, None
        )
