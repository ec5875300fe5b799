"""
SecurePad crypto engine — key records and hashing primitives.
"""

from .hash_crypto import HashCrypto
from .rsa_key     import RSAKey

__all__ = ["HashCrypto", "RSAKey"]
