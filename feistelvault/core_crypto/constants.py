"""
Shared parameters for the Feistel cipher engine.

Changing any of these changes the cipher's output, so ciphertexts produced
under one set of values cannot be decrypted under another.
"""

# Block geometry
BLOCK_SIZE = 16                     # 128-bit blocks
HALF_BLOCK_SIZE = BLOCK_SIZE // 2   # Feistel half (left / right)

# Key material
KEY_SIZE = 32                       # 256-bit master key
ROUNDS = 16                         # Feistel rounds
ROUND_KEY_SIZE = KEY_SIZE // ROUNDS # 2 bytes injected per round (known weakness)

# Key derivation
SALT_SIZE = 16                      # 128-bit salt
KDF_ITERATIONS = 10_000             # Re-hash count after the initial digest

# Counter encoding for the round-key schedule
ROUND_INDEX_BYTES = 4               # Big-endian round index appended to chain key

# Default hash primitive name (any hashlib algorithm with digest >= HALF_BLOCK_SIZE)
DEFAULT_HASH = "sha256"

# Logging
LOG_LEVEL = "INFO"
