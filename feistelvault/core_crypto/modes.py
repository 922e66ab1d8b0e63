"""
Modes of Operation

Extends the single-block Feistel transform to messages of any length.

Modes:
- ECB: every block transformed independently. Identical plaintext blocks
       give identical ciphertext blocks (kept as a known weakness).
- CBC: each plaintext block is XORed with the previous ciphertext block
       (the IV for the first) before encryption.
- CTR: a big-endian counter seeded from the IV is encrypted to produce a
       keystream. No padding; the same operation encrypts and decrypts,
       and the round keys are never reversed.

The IV/counter is copied into a buffer owned by the call, so concurrent
calls never share chaining state. Never reuse an IV under the same key.
"""

from enum import Enum
from typing import Sequence

from .constants import BLOCK_SIZE, KEY_SIZE
from .exceptions import InvalidBlockSize
from .feistel import transform_block, xor_bytes
from .hashing import HashFunction, sha256
from .key_schedule import generate_round_keys, reverse_schedule
from .padding import pad, unpad


class CipherMode(Enum):
    """Supported modes of operation."""
    ECB = "ECB"
    CBC = "CBC"
    CTR = "CTR"

    @classmethod
    def from_name(cls, name: str) -> 'CipherMode':
        """Parse a mode name case-insensitively."""
        try:
            return cls(name.strip().upper())
        except ValueError:
            raise ValueError(
                f"Unknown mode: {name!r}. Available: {[m.value for m in cls]}"
            ) from None

    @property
    def uses_padding(self) -> bool:
        return self is not CipherMode.CTR


def increment_counter(counter: bytearray) -> None:
    """
    Increment a big-endian counter in place.

    The last byte is incremented; on overflow the carry moves left until
    a byte does not overflow. An all-0xFF counter wraps to all zeros.

    Example:
        >>> c = bytearray(b"\\x00\\xff")
        >>> increment_counter(c)
        >>> bytes(c)
        b'\\x01\\x00'
    """
    for i in range(len(counter) - 1, -1, -1):
        counter[i] = (counter[i] + 1) & 0xFF
        if counter[i] != 0:
            break


def split_blocks(data: bytes, block_size: int = BLOCK_SIZE):
    """Yield consecutive block_size windows of data (last may be short)."""
    for i in range(0, len(data), block_size):
        yield data[i:i + block_size]


def _check_iv(iv: bytes) -> None:
    if len(iv) != BLOCK_SIZE:
        raise InvalidBlockSize(f"IV must be {BLOCK_SIZE} bytes, got {len(iv)}")


def _check_aligned(ciphertext: bytes) -> None:
    if not ciphertext or len(ciphertext) % BLOCK_SIZE:
        raise InvalidBlockSize(
            f"Ciphertext length must be a non-zero multiple of {BLOCK_SIZE}, "
            f"got {len(ciphertext)}"
        )


def _check_key(master_key: bytes) -> None:
    if len(master_key) != KEY_SIZE:
        raise ValueError(f"Key must be {KEY_SIZE} bytes")


# ----------------------------------------------------------------------
# Mode primitives (take a forward round-key schedule)
# ----------------------------------------------------------------------

def ecb_encrypt(plaintext: bytes, round_keys: Sequence[bytes],
                hash_fn: HashFunction = sha256) -> bytes:
    """Pad and encrypt each block independently."""
    return b"".join(
        transform_block(block, round_keys, hash_fn)
        for block in split_blocks(pad(plaintext))
    )


def ecb_decrypt(ciphertext: bytes, round_keys: Sequence[bytes],
                hash_fn: HashFunction = sha256) -> bytes:
    """Decrypt each block independently and remove padding."""
    _check_aligned(ciphertext)
    inverse = reverse_schedule(round_keys)
    padded = b"".join(
        transform_block(block, inverse, hash_fn)
        for block in split_blocks(ciphertext)
    )
    return unpad(padded)


def cbc_encrypt(plaintext: bytes, round_keys: Sequence[bytes], iv: bytes,
                hash_fn: HashFunction = sha256) -> bytes:
    """Pad and encrypt with cipher block chaining."""
    _check_iv(iv)
    previous = bytes(iv)
    out = []
    for block in split_blocks(pad(plaintext)):
        encrypted = transform_block(xor_bytes(block, previous), round_keys, hash_fn)
        out.append(encrypted)
        previous = encrypted
    return b"".join(out)


def cbc_decrypt(ciphertext: bytes, round_keys: Sequence[bytes], iv: bytes,
                hash_fn: HashFunction = sha256) -> bytes:
    """Decrypt cipher block chaining and remove padding."""
    _check_iv(iv)
    _check_aligned(ciphertext)
    inverse = reverse_schedule(round_keys)
    previous = bytes(iv)
    out = []
    for block in split_blocks(ciphertext):
        decrypted = transform_block(block, inverse, hash_fn)
        out.append(xor_bytes(decrypted, previous))
        # Chain on the ciphertext block, not the recovered plaintext
        previous = block
    return unpad(b"".join(out))


def ctr_transform(data: bytes, round_keys: Sequence[bytes], iv: bytes,
                  hash_fn: HashFunction = sha256) -> bytes:
    """
    Encrypt or decrypt in counter mode.

    The keystream is always produced with the forward schedule. A short
    final block consumes only as many keystream bytes as it needs.
    """
    _check_iv(iv)
    counter = bytearray(iv)
    out = []
    for chunk in split_blocks(data):
        keystream = transform_block(bytes(counter), round_keys, hash_fn)
        out.append(xor_bytes(chunk, keystream))
        increment_counter(counter)
    return b"".join(out)


# ----------------------------------------------------------------------
# Message-level API
# ----------------------------------------------------------------------

def encrypt_message(plaintext: bytes, master_key: bytes, iv: bytes,
                    mode: CipherMode, hash_fn: HashFunction = sha256) -> bytes:
    """
    Encrypt a message of any length.

    Args:
        plaintext: Data to encrypt
        master_key: KEY_SIZE-byte key
        iv: BLOCK_SIZE-byte IV (ignored by ECB)
        mode: Mode of operation
        hash_fn: Hash primitive

    Returns:
        Raw ciphertext (without IV)
    """
    _check_key(master_key)
    round_keys = generate_round_keys(master_key, hash_fn=hash_fn)
    return encrypt_with_schedule(plaintext, round_keys, iv, mode, hash_fn)


def decrypt_message(ciphertext: bytes, master_key: bytes, iv: bytes,
                    mode: CipherMode, hash_fn: HashFunction = sha256) -> bytes:
    """
    Decrypt a message produced by encrypt_message().

    Raises:
        InvalidBlockSize: If the IV or block-mode ciphertext is misaligned
        InvalidPadding: If padding is corrupt (ECB/CBC)
    """
    _check_key(master_key)
    round_keys = generate_round_keys(master_key, hash_fn=hash_fn)
    return decrypt_with_schedule(ciphertext, round_keys, iv, mode, hash_fn)


def encrypt_with_schedule(plaintext: bytes, round_keys: Sequence[bytes],
                          iv: bytes, mode: CipherMode,
                          hash_fn: HashFunction = sha256) -> bytes:
    """encrypt_message() for a precomputed forward schedule."""
    if mode is CipherMode.ECB:
        return ecb_encrypt(plaintext, round_keys, hash_fn)
    if mode is CipherMode.CBC:
        return cbc_encrypt(plaintext, round_keys, iv, hash_fn)
    if mode is CipherMode.CTR:
        return ctr_transform(plaintext, round_keys, iv, hash_fn)
    raise ValueError(f"Unsupported mode: {mode}")


def decrypt_with_schedule(ciphertext: bytes, round_keys: Sequence[bytes],
                          iv: bytes, mode: CipherMode,
                          hash_fn: HashFunction = sha256) -> bytes:
    """decrypt_message() for a precomputed forward schedule."""
    if mode is CipherMode.ECB:
        return ecb_decrypt(ciphertext, round_keys, hash_fn)
    if mode is CipherMode.CBC:
        return cbc_decrypt(ciphertext, round_keys, iv, hash_fn)
    if mode is CipherMode.CTR:
        return ctr_transform(ciphertext, round_keys, iv, hash_fn)
    raise ValueError(f"Unsupported mode: {mode}")
