"""
Administrative restriction policy carried by machine-wide settings.

Only loading, attaching and stripping happen here; enforcing the policy
is up to whoever encrypts content.
"""

import xml.etree.ElementTree as ET
from enum import Enum

from core.crypto_engine import RSAKey
from utils.markup import (MarkupError, child_bool, child_int, is_nil,
                          sub_text)


class CryptoMode(Enum):
    PASSWORD      = "Password"
    KEYFILE       = "Keyfile"
    RSA           = "RSA"
    CRYPT_USER    = "CryptUser"
    CRYPT_MACHINE = "CryptMachine"

    @classmethod
    def parse(cls, text: str) -> "CryptoMode":
        for mode in cls:
            if mode.value.lower() == text.lower() or mode.name == text.upper():
                return mode
        raise MarkupError(f"Unknown crypto mode {text!r}")


class Restrictions:
    """Minimum RSA size, blocked modes, portable lock and auto-attached keys."""

    XML_TAG = "Restrictions"

    def __init__(self, minimum_rsa_size: int = 0,
                 blocked_modes=(),
                 block_portable: bool = False,
                 auto_rsa_keys=()):
        self.minimum_rsa_size = minimum_rsa_size
        self.blocked_modes    = list(blocked_modes)
        self.block_portable   = block_portable
        self.auto_rsa_keys    = list(auto_rsa_keys)

    def is_mode_blocked(self, mode: CryptoMode) -> bool:
        return mode in self.blocked_modes

    def allows_key(self, key: RSAKey) -> bool:
        return key.size >= self.minimum_rsa_size

    def __eq__(self, other):
        if not isinstance(other, Restrictions):
            return NotImplemented
        return (self.minimum_rsa_size == other.minimum_rsa_size
                and self.blocked_modes == other.blocked_modes
                and self.block_portable == other.block_portable
                and self.auto_rsa_keys == other.auto_rsa_keys)

    def __repr__(self):
        return (f"Restrictions(minimum_rsa_size={self.minimum_rsa_size}, "
                f"blocked_modes={[m.value for m in self.blocked_modes]}, "
                f"block_portable={self.block_portable}, "
                f"auto_rsa_keys={len(self.auto_rsa_keys)})")

    # ── serialisation ────────────────────────────────────────────
    def to_element(self, tag: str = XML_TAG) -> ET.Element:
        root = ET.Element(tag)
        sub_text(root, "MinimumRsaSize", self.minimum_rsa_size)
        modes = ET.SubElement(root, "BlockedModes")
        for mode in self.blocked_modes:
            sub_text(modes, "CryptoMode", mode.value)
        sub_text(root, "BlockPortable", self.block_portable)
        keys = ET.SubElement(root, "AutoRsaKeys")
        for key in self.auto_rsa_keys:
            keys.append(key.to_element())
        return root

    @classmethod
    def from_element(cls, el: ET.Element) -> "Restrictions | None":
        if is_nil(el):
            return None
        blocked = []
        modes = el.find("BlockedModes")
        if modes is not None:
            blocked = [CryptoMode.parse((m.text or "").strip())
                       for m in modes.findall("CryptoMode")]
        keys = []
        auto = el.find("AutoRsaKeys")
        if auto is not None:
            keys = [RSAKey.from_element(k) for k in auto.findall(RSAKey.XML_TAG)]
        return cls(
            minimum_rsa_size=child_int(el, "MinimumRsaSize", 0),
            blocked_modes=blocked,
            block_portable=child_bool(el, "BlockPortable", False),
            auto_rsa_keys=keys,
        )
