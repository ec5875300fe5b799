import xml.etree.ElementTree as ET

import pytest
from PyQt6.QtGui import QColor

from config.color_code import OPAQUE, ColorCode, known_colors
from utils.markup import MarkupError


def test_name_sets_packed_value():
    c = ColorCode.from_name("red")
    assert c.name == "red"
    assert c.value == 0xFFFF0000
    assert c.value == known_colors()["red"]


def test_name_lookup_is_case_insensitive():
    c = ColorCode("DarkBlue")
    assert c.name == "darkblue"
    assert c.value == QColor("darkblue").rgba()


def test_unknown_name_rejected():
    with pytest.raises(ValueError):
        ColorCode.from_name("not-a-colour")


def test_value_forces_full_opacity():
    c = ColorCode.from_argb(0x00FF0000)
    assert c.value == 0xFFFF0000
    assert c.name == "red"


def test_negative_signed_argb_is_normalised():
    # signed 32-bit opaque black as some serialisers write it
    c = ColorCode.from_argb(-16777216)
    assert c.value == 0xFF000000
    assert c.name == "black"


def test_value_without_known_name():
    c = ColorCode.from_argb(0x12345678)
    assert c.value == 0xFF345678
    assert c.name is None


def test_same_value_keeps_existing_name():
    c = ColorCode.from_name("cyan")
    c.value = 0x0000FFFF
    assert c.name == "cyan"


def test_new_value_replaces_name():
    c = ColorCode.from_name("red")
    c.value = 0xFF345678
    assert c.name is None
    assert c.value == 0xFF345678


def test_default_is_opaque_black():
    c = ColorCode()
    assert c.value == OPAQUE
    assert c.name == "black"


def test_from_existing_color():
    c = ColorCode.from_color(QColor(255, 255, 255))
    assert c.name == "white"
    assert c.value == 0xFFFFFFFF


def test_get_color_prefers_name():
    assert ColorCode("lime").get_color() == QColor("lime")
    assert ColorCode(value=0xFF345678).get_color().rgba() == 0xFF345678


def test_find_color_name():
    assert ColorCode.find_color_name(0xFF008000) == "green"
    assert ColorCode.find_color_name(0xFF345678) is None


def test_display_form():
    assert str(ColorCode("navy")) == "Color: navy"
    assert str(ColorCode(value=0x00345678)) == "Color: 255,52,86,120"


def test_element_round_trip_by_name():
    el = ColorCode("orange").to_element("EditorForegroundColor")
    assert el.tag == "EditorForegroundColor"
    assert el.get("Name") == "orange"
    assert ColorCode.from_element(el) == ColorCode("orange")


def test_element_with_unknown_name_falls_back_to_value():
    el = ET.Element("ColorCode", Name="WindowText", Value="-16777216")
    assert ColorCode.from_element(el) == ColorCode("black")


def test_element_without_name_or_value():
    with pytest.raises(MarkupError):
        ColorCode.from_element(ET.Element("ColorCode"))
