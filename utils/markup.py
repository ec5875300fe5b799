"""
Canonical XML markup for settings documents and key records.

Objects take part by exposing ``to_element()`` and a
``from_element(element)`` classmethod; this module only turns elements
into text and back.
"""

import xml.etree.ElementTree as ET

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'
XSI_NIL = "{http://www.w3.org/2001/XMLSchema-instance}nil"


class MarkupError(ValueError):
    """Malformed markup, or markup of the wrong document type."""


# ── text ↔ object ───────────────────────────────────────────────
def to_xml(obj) -> str:
    return element_to_xml(obj.to_element())


def element_to_xml(root: ET.Element) -> str:
    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    return f"{XML_DECLARATION}\n{body}\n"


def from_xml(cls, text: str):
    try:
        root = ET.fromstring(text.strip())
    except ET.ParseError as exc:
        raise MarkupError(f"Malformed XML: {exc}") from exc
    expected = getattr(cls, "XML_TAG", cls.__name__)
    if root.tag != expected:
        raise MarkupError(f"Expected <{expected}> document, got <{root.tag}>")
    return cls.from_element(root)


# ── element helpers ─────────────────────────────────────────────
def sub_text(parent: ET.Element, tag: str, value) -> ET.Element:
    el = ET.SubElement(parent, tag)
    if isinstance(value, bool):
        el.text = "true" if value else "false"
    else:
        el.text = str(value)
    return el


def is_nil(el: ET.Element) -> bool:
    return el.get(XSI_NIL, "").lower() == "true"


def child_text(parent: ET.Element, tag: str, default=None):
    el = parent.find(tag)
    if el is None or is_nil(el):
        return default
    return (el.text or "").strip()


def child_int(parent: ET.Element, tag: str, default=None):
    text = child_text(parent, tag)
    if text is None:
        return default
    try:
        return int(text)
    except ValueError:
        raise MarkupError(f"<{tag}> is not an integer: {text!r}") from None


def child_float(parent: ET.Element, tag: str, default=None):
    text = child_text(parent, tag)
    if text is None:
        return default
    try:
        return float(text)
    except ValueError:
        raise MarkupError(f"<{tag}> is not a number: {text!r}") from None


def child_bool(parent: ET.Element, tag: str, default=None):
    text = child_text(parent, tag)
    if text is None:
        return default
    lowered = text.lower()
    if lowered in ("true", "1"):
        return True
    if lowered in ("false", "0"):
        return False
    raise MarkupError(f"<{tag}> is not a boolean: {text!r}")


def child_enum(parent: ET.Element, tag: str, enum_cls, default=None):
    """Read an enum member stored by name."""
    text = child_text(parent, tag)
    if text is None:
        return default
    try:
        return enum_cls[text.upper()]
    except KeyError:
        raise MarkupError(
            f"<{tag}> is not a {enum_cls.__name__}: {text!r}") from None
