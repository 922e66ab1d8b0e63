"""
Hash Primitive Boundary

The cipher engine treats its hash function as an opaque capability: a
callable mapping bytes to a fixed-size digest. SHA-256 from hashlib is
the default; any other fixed-length hashlib algorithm whose digest is at
least half a block long can be swapped in.
"""

import hashlib
from typing import Callable

from .constants import HALF_BLOCK_SIZE


HashFunction = Callable[[bytes], bytes]


def sha256(data: bytes) -> bytes:
    """Return the 32-byte SHA-256 digest of data."""
    return hashlib.sha256(data).digest()


def get_hash_function(name: str) -> HashFunction:
    """
    Look up a hashlib algorithm by name and wrap it as a HashFunction.
    
    Args:
        name: hashlib algorithm name, e.g. "sha256", "sha3_512", "blake2b"
        
    Returns:
        Callable returning the digest of its argument
        
    Raises:
        ValueError: If the algorithm is unknown, has a variable-length
                    digest (SHAKE), or its digest is too short for the
                    Feistel round function
    """
    name = name.lower()
    if name == "sha256":
        return sha256
    
    try:
        probe = hashlib.new(name)
    except ValueError:
        raise ValueError(f"Unknown hash algorithm: {name}") from None
    
    if name.startswith("shake"):
        raise ValueError(f"Variable-length hash {name} is not supported")
    
    if probe.digest_size < HALF_BLOCK_SIZE:
        raise ValueError(
            f"Digest of {name} is {probe.digest_size} bytes; "
            f"at least {HALF_BLOCK_SIZE} required"
        )
    
    def _digest(data: bytes) -> bytes:
        return hashlib.new(name, data).digest()
    
    _digest.__name__ = name
    return _digest
