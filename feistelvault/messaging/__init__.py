# Messaging Module
"""
Library-backed encryption shipped next to the Feistel cipher:
- AES-256-CBC wrapper (aes_wrapper.py)
- RSA-OAEP + AES-256-GCM hybrid envelope (hybrid.py)

Hybrid wire format: four (4-byte length, payload) fields in the order
ciphertext, wrapped session key, IV, tag.
"""

from .aes_wrapper import AESCipher
from .hybrid import RSAKeyPair, HybridEnvelope, HybridEncryptor

__all__ = [
    'AESCipher',
    'RSAKeyPair',
    'HybridEnvelope',
    'HybridEncryptor',
]
