"""
Pick the effective settings from the portable, global and per-user files.

Precedence:
    1. portable file next to the program: wins outright, the other two
       locations are not read
    2. machine-wide file: wins over the per-user file and always carries
       restrictions
    3. per-user file
    4. fresh defaults bound to the per-user location (first run)

Failing to read any one file is logged and treated as "not present";
resolution itself never fails.
"""

import logging
import xml.etree.ElementTree as ET

from config import paths
from config.app_settings import AppSettings
from config.modes import SettingsType
from utils.markup import MarkupError, from_xml

logger = logging.getLogger("SecurePad.Resolver")

_LOAD_ERRORS = (OSError, UnicodeDecodeError, MarkupError, ET.ParseError)


def load_settings_file(settings_file: str,
                       mode: SettingsType) -> AppSettings | None:
    """Load one settings file as *mode*, or return None if it is unusable."""
    try:
        with open(settings_file, "r", encoding="utf-8-sig") as f:
            settings = from_xml(AppSettings, f.read())
    except FileNotFoundError:
        logger.debug("No %s settings file at %s",
                     mode.name.lower(), settings_file)
        return None
    except _LOAD_ERRORS as exc:
        logger.warning("Unable to deserialize %s settings file %s: %s",
                       mode.name.lower(), settings_file, exc)
        return None
    settings.bind_location(mode, settings_file)
    logger.debug("Loaded %s settings from %s", mode.name.lower(), settings_file)
    return settings


def get_settings() -> AppSettings:
    portable = load_settings_file(paths.portable_settings_file(),
                                  SettingsType.PORTABLE)
    if portable is not None:
        return portable

    global_ = load_settings_file(paths.global_settings_file(),
                                 SettingsType.GLOBAL)
    local = load_settings_file(paths.user_settings_file(),
                               SettingsType.LOCAL)
    if global_ is not None:
        if local is not None:
            logger.info("Machine-wide settings override %s",
                        local.settings_file)
        return global_
    if local is not None:
        return local

    logger.info("No settings present. Probably first run")
    settings = AppSettings()
    settings.bind_location(SettingsType.LOCAL, paths.user_settings_file())
    return settings


def global_settings() -> AppSettings | None:
    """The machine-wide settings alone, for editing the policy."""
    return load_settings_file(paths.global_settings_file(),
                              SettingsType.GLOBAL)
