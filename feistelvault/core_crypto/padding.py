"""
Block Padding

Pads data to a multiple of the block size: n bytes of value n are
appended, where n = block_size - len(data) % block_size. Aligned input
receives a full extra block, so the padding is always removable.

Unpadding validates every padding byte. Callers must not reveal whether
a decryption failed because of padding or for another reason, otherwise
the check becomes a padding oracle.
"""

from .constants import BLOCK_SIZE
from .exceptions import InvalidPadding


def pad(data: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    """
    Pad data to a multiple of block_size.
    
    Args:
        data: Bytes to pad
        block_size: Alignment in bytes (1-255)
        
    Returns:
        Padded bytes (always longer than data)
    """
    if not 0 < block_size < 256:
        raise ValueError("Block size must be between 1 and 255")
    pad_len = block_size - (len(data) % block_size)
    return data + bytes([pad_len]) * pad_len


def unpad(padded: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    """
    Remove and verify padding added by pad().
    
    Args:
        padded: Padded bytes
        block_size: Alignment used when padding
        
    Returns:
        Original data
        
    Raises:
        InvalidPadding: If the trailing bytes do not form valid padding
    """
    if not padded:
        raise InvalidPadding("Cannot unpad empty data")
    
    pad_len = padded[-1]
    if pad_len == 0 or pad_len > len(padded):
        raise InvalidPadding("Invalid padding length")
    
    if padded[-pad_len:] != bytes([pad_len]) * pad_len:
        raise InvalidPadding("Invalid padding bytes")
    
    return padded[:-pad_len]
