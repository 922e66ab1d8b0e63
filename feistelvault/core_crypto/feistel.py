"""
Feistel Block Cipher Core

A 16-round balanced Feistel network over 16-byte blocks, with a round
function built from a one-way hash.

Round structure:
    F(R, K)     = H(R || K)[:8]
    L', R'      = R, L xor F(R, K)
    output      = R_final || L_final     (halves swapped after the last round)

Because of the final swap, running the same transform with the round keys
in reverse order computes the inverse permutation. There is one transform
for both directions; the caller picks the direction through key order.

This is a teaching construction and is NOT a secure cipher.
"""

from typing import Sequence

from .constants import BLOCK_SIZE, HALF_BLOCK_SIZE
from .exceptions import InvalidBlockSize
from .hashing import HashFunction, sha256
from .key_schedule import generate_round_keys, reverse_schedule


def xor_bytes(a: bytes, b: bytes) -> bytes:
    """XOR two byte strings, truncating to the shorter one."""
    return bytes(x ^ y for x, y in zip(a, b))


def round_function(right: bytes, round_key: bytes,
                   hash_fn: HashFunction = sha256) -> bytes:
    """
    Keyed, non-invertible Feistel round function.
    
    Args:
        right: Right half-block (8 bytes)
        round_key: Round key for this round
        hash_fn: Hash primitive
        
    Returns:
        8-byte mixing value
    """
    return hash_fn(right + round_key)[:HALF_BLOCK_SIZE]


def transform_block(block: bytes, round_keys: Sequence[bytes],
                    hash_fn: HashFunction = sha256) -> bytes:
    """
    Run one block through the Feistel network.
    
    Pass the schedule in forward order to encrypt and in reverse order
    to decrypt.
    
    Args:
        block: Exactly BLOCK_SIZE bytes
        round_keys: Round keys in the order they are applied
        hash_fn: Hash primitive
        
    Returns:
        Transformed block (BLOCK_SIZE bytes)
        
    Raises:
        InvalidBlockSize: If block is not BLOCK_SIZE bytes long
    """
    if len(block) != BLOCK_SIZE:
        raise InvalidBlockSize(
            f"Block must be {BLOCK_SIZE} bytes, got {len(block)}"
        )
    
    left = bytes(block[:HALF_BLOCK_SIZE])
    right = bytes(block[HALF_BLOCK_SIZE:])
    
    for round_key in round_keys:
        f = round_function(right, round_key, hash_fn)
        left, right = right, xor_bytes(left, f)
    
    return right + left


def encrypt_block(block: bytes, master_key: bytes,
                  hash_fn: HashFunction = sha256) -> bytes:
    """Encrypt a single block under a master key."""
    return transform_block(block, generate_round_keys(master_key, hash_fn=hash_fn), hash_fn)


def decrypt_block(block: bytes, master_key: bytes,
                  hash_fn: HashFunction = sha256) -> bytes:
    """Decrypt a single block under a master key."""
    round_keys = reverse_schedule(generate_round_keys(master_key, hash_fn=hash_fn))
    return transform_block(block, round_keys, hash_fn)
