"""
Named RSA key records: generation, validation and XML serialisation.
"""

import base64
import binascii
import xml.etree.ElementTree as ET

from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives import serialization

from utils.markup import MarkupError, child_int, child_text, sub_text

_PRIVATE_FIELDS = ("P", "Q", "DP", "DQ", "InverseQ", "D")


def _int_to_b64(value: int) -> str:
    raw = value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")
    return base64.b64encode(raw).decode("ascii")


def _b64_to_int(text: str, field: str) -> int:
    try:
        raw = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError):
        raise MarkupError(f"<{field}> is not valid base64") from None
    if not raw:
        raise MarkupError(f"<{field}> is empty")
    return int.from_bytes(raw, "big")


class RSAKey:
    """
    A named RSA key.  The public half is always present; the private
    half only on the machine that generated or imported it.

    Instances are treated as immutable values: two records are equal when
    their names and key numbers match, wherever they were loaded from.
    """

    XML_TAG = "RSAKey"

    def __init__(self, name: str,
                 public_numbers: rsa.RSAPublicNumbers,
                 private_numbers: rsa.RSAPrivateNumbers | None = None):
        self._name    = name
        self._public  = public_numbers
        self._private = private_numbers

    # ── construction ─────────────────────────────────────────────
    @classmethod
    def generate(cls, name: str, key_size: int = 4096,
                 public_exponent: int = 65537) -> "RSAKey":
        private_key = rsa.generate_private_key(
            public_exponent=public_exponent,
            key_size=key_size,
        )
        return cls.from_private_key(name, private_key)

    @classmethod
    def from_private_key(cls, name: str, private_key) -> "RSAKey":
        numbers = private_key.private_numbers()
        return cls(name, numbers.public_numbers, numbers)

    @classmethod
    def from_public_key(cls, name: str, public_key) -> "RSAKey":
        return cls(name, public_key.public_numbers())

    def public_only(self) -> "RSAKey":
        return RSAKey(self._name, self._public)

    # ── properties ───────────────────────────────────────────────
    @property
    def name(self) -> str:
        return self._name

    @property
    def size(self) -> int:
        return self._public.n.bit_length()

    @property
    def has_private_key(self) -> bool:
        return self._private is not None

    @property
    def public_numbers(self) -> rsa.RSAPublicNumbers:
        return self._public

    # ── validation ───────────────────────────────────────────────
    def is_valid(self) -> bool:
        if not isinstance(self._name, str) or not self._name.strip():
            return False
        try:
            self._public.public_key()
            if self._private is not None:
                if self._private.public_numbers != self._public:
                    return False
                self._private.private_key()
        except (ValueError, TypeError):
            return False
        return True

    # ── value semantics ──────────────────────────────────────────
    def __eq__(self, other):
        if not isinstance(other, RSAKey):
            return NotImplemented
        return (self._name == other._name
                and self._public == other._public
                and self._private == other._private)

    def __hash__(self):
        return hash((self._name, self._public.n, self._public.e))

    def __repr__(self):
        kind = "private" if self.has_private_key else "public"
        return f"RSAKey(name={self._name!r}, size={self.size}, {kind})"

    # ── serialisation ────────────────────────────────────────────
    def export_public_key(self) -> bytes:
        return self._public.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    def to_element(self) -> ET.Element:
        root = ET.Element(self.XML_TAG)
        sub_text(root, "Name", self._name)
        sub_text(root, "Size", self.size)
        key = ET.SubElement(root, "Key")
        sub_text(key, "Modulus", _int_to_b64(self._public.n))
        sub_text(key, "Exponent", _int_to_b64(self._public.e))
        if self._private is not None:
            p = self._private
            values = (p.p, p.q, p.dmp1, p.dmq1, p.iqmp, p.d)
            for field, value in zip(_PRIVATE_FIELDS, values):
                sub_text(key, field, _int_to_b64(value))
        return root

    @classmethod
    def from_element(cls, el: ET.Element) -> "RSAKey":
        name = child_text(el, "Name")
        if name is None:
            raise MarkupError("<RSAKey> has no <Name>")
        key = el.find("Key")
        if key is None:
            raise MarkupError("<RSAKey> has no <Key>")

        fields = {}
        for field in ("Modulus", "Exponent") + _PRIVATE_FIELDS:
            text = child_text(key, field)
            if text:
                fields[field] = _b64_to_int(text, field)
        if "Modulus" not in fields or "Exponent" not in fields:
            raise MarkupError("<Key> needs both <Modulus> and <Exponent>")

        public = rsa.RSAPublicNumbers(fields["Exponent"], fields["Modulus"])
        declared = child_int(el, "Size")
        if declared is not None and declared != public.n.bit_length():
            raise MarkupError(
                f"Declared size {declared} does not match the modulus")

        present = [f for f in _PRIVATE_FIELDS if f in fields]
        if not present:
            return cls(name, public)
        if len(present) != len(_PRIVATE_FIELDS):
            raise MarkupError("Incomplete private key components")
        private = rsa.RSAPrivateNumbers(
            p=fields["P"], q=fields["Q"], d=fields["D"],
            dmp1=fields["DP"], dmq1=fields["DQ"], iqmp=fields["InverseQ"],
            public_numbers=public,
        )
        return cls(name, public, private)
