from .crypto_engine import HashCrypto, RSAKey

__all__ = ["HashCrypto", "RSAKey"]
