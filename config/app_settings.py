"""
The resolved application settings object and its persistence.

``key_storage`` and ``type`` are never stored in the document: they are
derived from the settings file the object was loaded from or last saved
to.
"""

import logging
import os
import xml.etree.ElementTree as ET
from enum import Enum, IntFlag

from config import paths
from config.color_code import ColorCode
from config.modes import SettingsType, apply_restriction_policy, coerce_mode
from config.restrictions import Restrictions
from config.settings import Settings
from utils.key_store import KeyStore
from utils.markup import (MarkupError, child_enum, child_float, child_int,
                          child_text, element_to_xml, sub_text)

logger = logging.getLogger("SecurePad.Settings")


class WindowState(Enum):
    NORMAL    = "Normal"
    MINIMIZED = "Minimized"
    MAXIMIZED = "Maximized"


class FontStyle(IntFlag):
    REGULAR   = 0
    BOLD      = 1
    ITALIC    = 2
    UNDERLINE = 4
    STRIKEOUT = 8


def style_to_text(style: FontStyle) -> str:
    names = [f.name.capitalize() for f in FontStyle
             if f.value and f in style]
    return ", ".join(names) or "Regular"


def style_from_text(text: str) -> FontStyle:
    style = FontStyle.REGULAR
    for part in text.replace(",", " ").split():
        try:
            style |= FontStyle[part.upper()]
        except KeyError:
            raise MarkupError(f"Unknown font style {part!r}") from None
    return style


class AppSettings:
    XML_TAG = "AppSettings"

    def __init__(self):
        self.window_size = Settings.WINDOW_SIZE
        self.window_startup_state = WindowState.NORMAL

        self.editor_foreground_color = ColorCode(Settings.FOREGROUND_COLOR)
        self.editor_background_color = ColorCode(Settings.BACKGROUND_COLOR)

        self.font_name  = Settings.FONT_NAME
        self.font_size  = Settings.FONT_SIZE
        self.font_style = FontStyle.REGULAR

        self.restrictions: Restrictions | None = None

        self._settings_file = paths.user_settings_file()
        self._type = SettingsType.LOCAL

    # ── derived location ─────────────────────────────────────────
    @property
    def key_storage(self) -> str:
        return paths.key_storage_for(self._settings_file)

    @property
    def type(self) -> SettingsType:
        return self._type

    @property
    def settings_file(self) -> str:
        return self._settings_file

    def bind_location(self, mode: SettingsType, settings_file: str):
        """Adopt *mode* and its file, applying that mode's restriction rule."""
        self.restrictions = apply_restriction_policy(mode, self.restrictions)
        self._type = mode
        self._settings_file = settings_file

    # ── font ─────────────────────────────────────────────────────
    def get_font(self) -> tuple[str, float, FontStyle]:
        return self.font_name, self.font_size, self.font_style

    def set_font(self, name: str, size: float,
                 style: FontStyle = FontStyle.REGULAR):
        self.font_name  = name
        self.font_size  = float(size)
        self.font_style = FontStyle(style)
        return self.get_font()

    # ── keys ─────────────────────────────────────────────────────
    def key_store(self) -> KeyStore:
        return KeyStore(self.key_storage)

    def load_rsa_keys(self):
        return self.key_store().load()

    def save_rsa_keys(self, keys, purge: bool = False):
        return self.key_store().save(keys, purge=purge)

    # ── persistence ──────────────────────────────────────────────
    def save_settings(self, mode=SettingsType.AUTO) -> "AppSettings":
        """
        Write the settings to the location of *mode* and adopt that mode.

        AUTO writes to the portable file if one already exists, otherwise
        to the per-user file.  Raises UnsupportedModeError for anything
        that is not a known mode; write errors propagate.
        """
        mode = coerce_mode(mode)
        if mode == SettingsType.AUTO:
            if os.path.isfile(paths.portable_settings_file()):
                mode = SettingsType.PORTABLE
            else:
                mode = SettingsType.LOCAL
                try:
                    os.makedirs(paths.user_settings_dir(), exist_ok=True)
                except OSError as exc:
                    logger.debug("Cannot create %s: %s",
                                 paths.user_settings_dir(), exc)

        target = paths.settings_file_for(mode)
        restrictions = apply_restriction_policy(mode, self.restrictions)
        snapshot = element_to_xml(self._to_element(restrictions))
        with open(target, "w", encoding="utf-8", newline="") as f:
            f.write(snapshot)
        self.restrictions = restrictions
        self._type = mode
        self._settings_file = target
        logger.info("Saved %s settings to %s", mode.name.lower(), target)
        return self

    # ── serialisation ────────────────────────────────────────────
    def to_element(self) -> ET.Element:
        return self._to_element(self.restrictions)

    def _to_element(self, restrictions) -> ET.Element:
        root = ET.Element(self.XML_TAG)
        size = ET.SubElement(root, "WindowSize")
        sub_text(size, "Width", self.window_size[0])
        sub_text(size, "Height", self.window_size[1])
        sub_text(root, "WindowStartupState", self.window_startup_state.value)
        root.append(self.editor_foreground_color.to_element(
            "EditorForegroundColor"))
        root.append(self.editor_background_color.to_element(
            "EditorBackgroundColor"))
        sub_text(root, "FontName", self.font_name)
        sub_text(root, "FontSize", repr(float(self.font_size)))
        sub_text(root, "FontStyle", style_to_text(self.font_style))
        if restrictions is not None:
            root.append(restrictions.to_element())
        return root

    @classmethod
    def from_element(cls, el: ET.Element) -> "AppSettings":
        s = cls()
        size = el.find("WindowSize")
        if size is not None:
            s.window_size = (child_int(size, "Width", s.window_size[0]),
                             child_int(size, "Height", s.window_size[1]))

        state = child_text(el, "WindowStartupState")
        if state is not None:
            try:
                s.window_startup_state = WindowState(state)
            except ValueError:
                s.window_startup_state = child_enum(
                    el, "WindowStartupState", WindowState)

        for tag, attr in (("EditorForegroundColor", "editor_foreground_color"),
                          ("EditorBackgroundColor", "editor_background_color")):
            color = el.find(tag)
            if color is not None:
                setattr(s, attr, ColorCode.from_element(color))

        style = child_text(el, "FontStyle")
        s.set_font(child_text(el, "FontName", s.font_name),
                   child_float(el, "FontSize", s.font_size),
                   style_from_text(style) if style is not None
                   else s.font_style)

        restrictions = el.find(Restrictions.XML_TAG)
        if restrictions is not None:
            s.restrictions = Restrictions.from_element(restrictions)
        return s
