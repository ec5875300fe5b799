"""
Editor colour preference: a colour name and a packed ARGB value kept in step.

The known-colour table is Qt's SVG colour name list.
"""

import xml.etree.ElementTree as ET

from PyQt6.QtGui import QColor

from utils.markup import MarkupError

OPAQUE = 0xFF << 24
_MASK  = 0xFFFFFFFF

_known_colors: dict[str, int] | None = None


def known_colors() -> dict[str, int]:
    """Name → packed ARGB for every colour name Qt knows, in Qt's order."""
    global _known_colors
    if _known_colors is None:
        _known_colors = {n: QColor(n).rgba() for n in QColor.colorNames()}
    return _known_colors


class ColorCode:
    """
    Named-or-numeric colour.

    Setting a name derives the value from the known-colour table.  Setting
    a value forces full opacity and derives the name by reverse lookup,
    unless the value is unchanged (so ``cyan`` is not renamed ``aqua``).
    """

    XML_TAG = "ColorCode"

    def __init__(self, name: str | None = None, value: int | None = None):
        self._name  = None
        self._value = 0
        if name:
            self.name = name
        else:
            self.value = OPAQUE if value is None else value

    # ── construction ─────────────────────────────────────────────
    @classmethod
    def from_name(cls, name: str) -> "ColorCode":
        return cls(name=name)

    @classmethod
    def from_argb(cls, argb: int) -> "ColorCode":
        return cls(value=argb)

    @classmethod
    def from_color(cls, color: QColor) -> "ColorCode":
        return cls(value=color.rgba())

    # ── slots ────────────────────────────────────────────────────
    @property
    def name(self) -> str | None:
        return self._name

    @name.setter
    def name(self, value: str | None):
        if value:
            key = value.strip().lower()
            table = known_colors()
            if key not in table:
                raise ValueError(f"Unknown color name {value!r}")
            self._value = table[key]
            self._name  = key
        else:
            self._name = None

    @property
    def value(self) -> int:
        return self._value

    @value.setter
    def value(self, value: int):
        v = (value | OPAQUE) & _MASK
        if v != self._value:
            self._name  = self.find_color_name(v)
            self._value = v

    # ── lookups ──────────────────────────────────────────────────
    @staticmethod
    def find_color_name(value: int) -> str | None:
        value &= _MASK
        for name, argb in known_colors().items():
            if argb == value:
                return name
        return None

    def get_color(self) -> QColor:
        if self._name:
            return QColor(self._name)
        return QColor.fromRgba(self._value)

    # ── value semantics ──────────────────────────────────────────
    def __eq__(self, other):
        if not isinstance(other, ColorCode):
            return NotImplemented
        return self._name == other._name and self._value == other._value

    def __hash__(self):
        return hash((self._name, self._value))

    def __repr__(self):
        return f"ColorCode(name={self._name!r}, value=0x{self._value:08X})"

    def __str__(self):
        if self._name:
            return f"Color: {self._name}"
        c = self.get_color()
        return f"Color: {c.alpha()},{c.red()},{c.green()},{c.blue()}"

    # ── serialisation ────────────────────────────────────────────
    def to_element(self, tag: str = XML_TAG) -> ET.Element:
        el = ET.Element(tag)
        if self._name:
            el.set("Name", self._name)
        el.set("Value", str(self._value))
        return el

    @classmethod
    def from_element(cls, el: ET.Element) -> "ColorCode":
        name = el.get("Name")
        if name and name.strip().lower() in known_colors():
            return cls(name=name)
        raw = el.get("Value")
        if raw is None:
            raise MarkupError(f"<{el.tag}> has neither a known Name nor a Value")
        try:
            return cls(value=int(raw))
        except ValueError:
            raise MarkupError(f"<{el.tag}> Value is not an integer: {raw!r}") from None
