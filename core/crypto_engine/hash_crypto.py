"""
Hashing helpers used for content-addressed file names.
"""

from cryptography.hazmat.primitives import hashes


class HashCrypto:
    """Static helpers for SHA-256 digests."""

    # ── hashes ───────────────────────────────────────────────────
    @staticmethod
    def sha256(data: bytes) -> bytes:
        d = hashes.Hash(hashes.SHA256())
        d.update(data)
        return d.finalize()

    @staticmethod
    def sha256_text(text: str) -> str:
        """Upper-case hex SHA-256 of the UTF-8 encoding of *text*."""
        return HashCrypto.sha256(text.encode("utf-8")).hex().upper()
