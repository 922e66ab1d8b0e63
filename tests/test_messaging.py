"""
Unit tests for Messaging module.

Tests:
- AES-CBC wrapper
- Hybrid envelope framing
- RSA-OAEP + AES-GCM hybrid encryption
- Modified ciphertext detection
"""

import base64
import struct

import pytest
from cryptography.exceptions import InvalidTag

from feistelvault.core_crypto.exceptions import MalformedEnvelope
from feistelvault.messaging.aes_wrapper import AESCipher
from feistelvault.messaging.hybrid import (
    HybridEncryptor, HybridEnvelope, RSAKeyPair, NONCE_SIZE, TAG_SIZE
)


@pytest.fixture(scope="module")
def recipient():
    """One RSA key pair for the module (generation is slow)."""
    return HybridEncryptor(RSAKeyPair.generate())


class TestAESCipher:
    """Tests for the AES-CBC wrapper."""

    def test_encrypt_decrypt(self):
        aes = AESCipher()
        iv, ct = aes.encrypt("Hello, AES!")
        assert aes.decrypt(iv, ct) == "Hello, AES!"

    def test_output_is_base64(self):
        iv, ct = AESCipher().encrypt("abc")
        assert len(base64.b64decode(iv)) == 16
        assert len(base64.b64decode(ct)) == 16

    def test_fresh_iv(self):
        aes = AESCipher()
        assert aes.encrypt("same")[0] != aes.encrypt("same")[0]

    def test_unicode(self):
        aes = AESCipher(bytes(32))
        text = "ünïcödé ✓"
        assert aes.decrypt(*aes.encrypt(text)) == text

    @pytest.mark.parametrize("size", [16, 24, 32])
    def test_key_sizes(self, size):
        aes = AESCipher(bytes(size))
        assert aes.decrypt(*aes.encrypt("key size")) == "key size"

    def test_invalid_key_size(self):
        with pytest.raises(ValueError):
            AESCipher(bytes(20))

    def test_invalid_iv(self):
        aes = AESCipher()
        _, ct = aes.encrypt("data")
        with pytest.raises(ValueError):
            aes.decrypt(base64.b64encode(bytes(8)).decode(), ct)

    def test_wrong_key_fails(self):
        iv, ct = AESCipher(bytes(32)).encrypt("secret message")
        with pytest.raises(ValueError):
            AESCipher(b"\x01" * 32).decrypt(iv, ct)


class TestHybridEnvelope:
    """Tests for the four-field length-prefixed format."""

    def test_serialization_layout(self):
        env = HybridEnvelope(b"CT", b"KEY", b"IV", b"TAG")
        expected = (
            struct.pack('>I', 2) + b"CT" +
            struct.pack('>I', 3) + b"KEY" +
            struct.pack('>I', 2) + b"IV" +
            struct.pack('>I', 3) + b"TAG"
        )
        assert env.to_bytes() == expected

    def test_parse(self):
        env = HybridEnvelope(b"ciphertext", b"wrapped", b"n" * 12, b"t" * 16)
        assert HybridEnvelope.from_bytes(env.to_bytes()) == env

    def test_empty_fields(self):
        env = HybridEnvelope(b"", b"", b"", b"")
        assert env.to_bytes() == bytes(16)
        assert HybridEnvelope.from_bytes(bytes(16)) == env

    def test_truncated_prefix(self):
        data = HybridEnvelope(b"a", b"b", b"c", b"d").to_bytes()
        with pytest.raises(MalformedEnvelope):
            HybridEnvelope.from_bytes(data[:-3])

    def test_truncated_payload(self):
        data = struct.pack('>I', 100) + b"short"
        with pytest.raises(MalformedEnvelope):
            HybridEnvelope.from_bytes(data)

    def test_trailing_bytes(self):
        data = HybridEnvelope(b"a", b"b", b"c", b"d").to_bytes() + b"extra"
        with pytest.raises(MalformedEnvelope):
            HybridEnvelope.from_bytes(data)


class TestHybridEncryptor:
    """Tests for RSA-OAEP + AES-GCM."""

    def test_encrypt_decrypt(self, recipient):
        blob = recipient.encrypt(b"Hello hybrid world")
        assert recipient.decrypt(blob) == b"Hello hybrid world"

    def test_field_sizes(self, recipient):
        plaintext = b"x" * 50
        env = HybridEnvelope.from_bytes(recipient.encrypt(plaintext))
        assert len(env.ciphertext) == len(plaintext)
        assert len(env.encrypted_key) == 256   # 2048-bit RSA
        assert len(env.iv) == NONCE_SIZE
        assert len(env.tag) == TAG_SIZE

    def test_seal_for_public_key_only(self, recipient):
        public_only = RSAKeyPair.from_public_pem(recipient.key_pair.public_pem())
        blob = HybridEncryptor.seal(b"for you", public_only.public_key)
        assert recipient.decrypt(blob) == b"for you"

    def test_public_only_cannot_decrypt(self, recipient):
        public_only = HybridEncryptor(RSAKeyPair.from_public_pem(recipient.key_pair.public_pem()))
        blob = public_only.encrypt(b"data")
        with pytest.raises(ValueError):
            public_only.decrypt(blob)

    def test_tampered_ciphertext_detected(self, recipient):
        env = HybridEnvelope.from_bytes(recipient.encrypt(b"do not modify"))
        modified = HybridEnvelope(
            bytes([env.ciphertext[0] ^ 1]) + env.ciphertext[1:],
            env.encrypted_key, env.iv, env.tag
        )
        with pytest.raises(InvalidTag):
            recipient.decrypt(modified.to_bytes())

    def test_tampered_tag_detected(self, recipient):
        env = HybridEnvelope.from_bytes(recipient.encrypt(b"do not modify"))
        modified = HybridEnvelope(
            env.ciphertext, env.encrypted_key, env.iv, bytes(TAG_SIZE)
        )
        with pytest.raises(InvalidTag):
            recipient.decrypt(modified.to_bytes())

    def test_fresh_session_key(self, recipient):
        a = HybridEnvelope.from_bytes(recipient.encrypt(b"same"))
        b = HybridEnvelope.from_bytes(recipient.encrypt(b"same"))
        assert a.encrypted_key != b.encrypted_key
        assert a.iv != b.iv
