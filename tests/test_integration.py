"""
Integration tests for FeistelVault.

Tests the password-based cipher end to end:
- Key derivation -> schedule -> mode -> envelope
- Salt retention
- Alternative KDFs and hash primitives
"""

import base64

import pytest

from feistelvault import FeistelCipher, CipherMode, derive_master_key
from feistelvault.core_crypto.cipher import unpack_envelope
from feistelvault.core_crypto.hashing import get_hash_function
from feistelvault.core_crypto.kdf import PBKDF2KDF, derive_key
from feistelvault.core_crypto.modes import decrypt_message


PASSWORD = "MySecretPassword123"
MESSAGE = "This is a test message for our custom Feistel cipher implementation."
FIXED_SALT = bytes.fromhex("00112233445566778899aabbccddeeff")
FIXED_IV = bytes.fromhex("0f0e0d0c0b0a09080706050403020100")


class TestScenario:
    """The reference password/message scenario."""

    def test_key_is_32_bytes(self):
        key = derive_key(PASSWORD, FIXED_SALT)
        assert len(key) == 32

    def test_cbc_round_trip_fixed_iv(self):
        cipher = FeistelCipher(PASSWORD, mode=CipherMode.CBC, salt=FIXED_SALT)
        envelope = cipher.encrypt(MESSAGE, iv=FIXED_IV)
        assert cipher.decrypt(envelope) == MESSAGE

    def test_envelope_layout(self):
        """Envelope is base64(IV || ciphertext) and decrypts with the raw API."""
        cipher = FeistelCipher(PASSWORD, mode=CipherMode.CBC, salt=FIXED_SALT)
        envelope = cipher.encrypt(MESSAGE, iv=FIXED_IV)

        raw = base64.b64decode(envelope)
        assert raw[:16] == FIXED_IV
        assert (len(raw) - 16) % 16 == 0

        iv, ciphertext = unpack_envelope(envelope, CipherMode.CBC)
        key = derive_key(PASSWORD, FIXED_SALT)
        plaintext = decrypt_message(ciphertext, key, iv, CipherMode.CBC)
        assert plaintext.decode('utf-8') == MESSAGE

    def test_fixed_inputs_deterministic(self):
        c1 = FeistelCipher(PASSWORD, salt=FIXED_SALT)
        c2 = FeistelCipher(PASSWORD, salt=FIXED_SALT)
        assert c1.encrypt(MESSAGE, iv=FIXED_IV) == c2.encrypt(MESSAGE, iv=FIXED_IV)

    def test_key_not_rederivable_without_salt(self):
        """A fresh salt yields a different key: the salt must be kept."""
        original = FeistelCipher(PASSWORD)
        rederived = FeistelCipher(PASSWORD)
        assert original.key != rederived.key
        assert original.salt != rederived.salt

    def test_key_rederivable_with_salt(self):
        """Keeping the salt lets another instance decrypt."""
        sender = FeistelCipher(PASSWORD, mode=CipherMode.CTR)
        envelope = sender.encrypt(MESSAGE)

        receiver = FeistelCipher(PASSWORD, mode=CipherMode.CTR, salt=sender.salt)
        assert receiver.key == sender.key
        assert receiver.decrypt(envelope) == MESSAGE


class TestFeistelCipher:
    """Facade behaviour."""

    @pytest.mark.parametrize("mode", list(CipherMode))
    @pytest.mark.parametrize("text", ["", "a", "exactly 16 bytes", "ünïcödé ✓ text", MESSAGE * 3])
    def test_round_trip(self, mode, text):
        cipher = FeistelCipher.from_key(bytes(range(32)), mode)
        assert cipher.decrypt(cipher.encrypt(text)) == text

    def test_bytes_plaintext(self):
        cipher = FeistelCipher.from_key(bytes(32))
        assert cipher.decrypt_bytes(cipher.encrypt(b"\x00\x01binary")) == b"\x00\x01binary"

    def test_mode_as_string(self):
        cipher = FeistelCipher.from_key(bytes(32), "ctr")
        assert cipher.mode is CipherMode.CTR

    def test_from_key_has_no_salt(self):
        cipher = FeistelCipher.from_key(bytes(32))
        assert cipher.salt is None
        assert cipher.key == bytes(32)

    def test_password_cipher_exposes_salt(self):
        cipher = FeistelCipher(PASSWORD)
        assert len(cipher.salt) == 16
        assert cipher.key == derive_key(PASSWORD, cipher.salt)

    def test_ctr_envelope_not_padded(self):
        cipher = FeistelCipher.from_key(bytes(32), CipherMode.CTR)
        raw = base64.b64decode(cipher.encrypt("12345"))
        assert len(raw) == 16 + 5

    def test_wrong_password_does_not_recover_plaintext(self):
        """CTR under another key yields different bytes (no padding to fail)."""
        good = FeistelCipher(PASSWORD, mode=CipherMode.CTR, salt=FIXED_SALT)
        bad = FeistelCipher("WrongPassword", mode=CipherMode.CTR, salt=FIXED_SALT)
        envelope = good.encrypt(MESSAGE)
        assert bad.decrypt_bytes(envelope) != MESSAGE.encode()

    def test_repr(self):
        assert repr(FeistelCipher.from_key(bytes(32), "ECB")) == "FeistelCipher(mode=ECB, rounds=16)"


class TestPluggableComponents:
    """KDF and hash primitive can be swapped."""

    def test_custom_kdf(self):
        kdf = PBKDF2KDF(iterations=1000)
        cipher = FeistelCipher(PASSWORD, salt=FIXED_SALT, kdf=kdf)
        assert cipher.key == kdf.derive(PASSWORD, FIXED_SALT)
        assert cipher.key != derive_key(PASSWORD, FIXED_SALT)
        assert cipher.decrypt(cipher.encrypt(MESSAGE)) == MESSAGE

    def test_derive_master_key_with_kdf(self):
        key, salt = derive_master_key(PASSWORD, FIXED_SALT, PBKDF2KDF(iterations=1000))
        assert salt == FIXED_SALT
        assert len(key) == 32

    @pytest.mark.parametrize("name", ["sha512", "sha3_256", "blake2b"])
    def test_alternative_hash(self, name):
        hash_fn = get_hash_function(name)
        cipher = FeistelCipher(PASSWORD, salt=FIXED_SALT, hash_fn=hash_fn)
        assert cipher.decrypt(cipher.encrypt(MESSAGE)) == MESSAGE

    def test_hash_changes_ciphertext(self):
        default = FeistelCipher.from_key(bytes(32))
        other = FeistelCipher.from_key(bytes(32), hash_fn=get_hash_function("sha512"))
        assert default.encrypt(MESSAGE, iv=FIXED_IV) != other.encrypt(MESSAGE, iv=FIXED_IV)


class TestDemo:
    """The command-line demonstration runs end to end."""

    def test_main_runs(self, capsys):
        from feistelvault.main import main
        assert main(["--mode", "ctr"]) == 0
        out = capsys.readouterr().out
        assert "Match: True" in out
        assert "ECB: identical blocks -> identical ciphertext: True" in out
