"""
Round Key Schedule (Hash Chain)

Expands the 32-byte master key into ROUNDS round keys.

Algorithm:
    chain = master_key
    for r in 0..ROUNDS-1:
        digest  = H(chain || r as 4-byte big-endian)
        key[r]  = digest[:KEY_SIZE // ROUNDS]
        chain   = digest                # full digest, not the slice

Each round key therefore depends on every earlier round and on its own
index, so no two rounds share derivation input.

Decryption uses the same schedule in reverse order. CTR mode never
reverses it because the block transform only runs forward there.

Known weakness: with a 32-byte key over 16 rounds each round key is only
2 bytes long. This is part of the cipher definition and must not be
widened, since doing so changes every ciphertext.
"""

from typing import Sequence, Tuple

from .constants import KEY_SIZE, ROUND_INDEX_BYTES, ROUND_KEY_SIZE, ROUNDS
from .hashing import HashFunction, sha256


RoundKeys = Tuple[bytes, ...]


def round_index_bytes(index: int) -> bytes:
    """Encode a round index as a 4-byte big-endian integer."""
    return index.to_bytes(ROUND_INDEX_BYTES, 'big')


def generate_round_keys(master_key: bytes,
                        rounds: int = ROUNDS,
                        hash_fn: HashFunction = sha256) -> RoundKeys:
    """
    Derive the ordered round keys from a master key.

    Args:
        master_key: Key material (normally KEY_SIZE bytes)
        rounds: Number of round keys to produce
        hash_fn: Hash primitive

    Returns:
        Tuple of `rounds` round keys, each KEY_SIZE // ROUNDS bytes

    Raises:
        ValueError: If the master key is empty or rounds is out of range
    """
    if not master_key:
        raise ValueError("Master key cannot be empty")
    if not 1 <= rounds <= KEY_SIZE:
        raise ValueError(f"Rounds must be between 1 and {KEY_SIZE}")

    key_len = KEY_SIZE // rounds
    round_keys = []
    chain_key = bytes(master_key)

    for r in range(rounds):
        digest = hash_fn(chain_key + round_index_bytes(r))
        round_keys.append(digest[:key_len])
        chain_key = digest

    return tuple(round_keys)


def reverse_schedule(round_keys: Sequence[bytes]) -> RoundKeys:
    """Return the round keys in decryption order (last round first)."""
    return tuple(reversed(round_keys))


def print_schedule(round_keys: Sequence[bytes]) -> None:
    """Print round keys in a readable table (debugging aid)."""
    for i, rk in enumerate(round_keys):
        print(f"  Round {i:2d}: {rk.hex()}")


# Self-test when run directly
if __name__ == "__main__":
    print("Hash-Chain Round Key Schedule")
    print("=" * 60)

    key = bytes(range(KEY_SIZE))
    schedule = generate_round_keys(key)
    print(f"\nMaster key: {key.hex()}")
    print(f"Round keys ({len(schedule)} x {ROUND_KEY_SIZE} bytes):")
    print_schedule(schedule)

    print("\nDecryption order:")
    print_schedule(reverse_schedule(schedule))
