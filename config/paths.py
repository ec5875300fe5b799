"""
Locations of the portable, machine-wide and per-user settings files.

Every helper recomputes its answer from the environment on each call so
relocating a location (tests, packagers) never needs a restart.
"""

import os
import sys

from config.settings import Settings
from config.modes import SettingsType, UnsupportedModeError


def _app_dir_name() -> str:
    if sys.platform == "win32":
        return Settings.APP_NAME
    return Settings.APP_NAME.lower()


def portable_settings_dir() -> str:
    override = os.environ.get(Settings.ENV_PORTABLE_DIR)
    if override:
        return override
    return Settings.BASE_DIR


def global_settings_dir() -> str:
    override = os.environ.get(Settings.ENV_GLOBAL_DIR)
    if override:
        return override
    if sys.platform == "win32":
        root = os.environ.get("ProgramData", r"C:\ProgramData")
        return os.path.join(root, _app_dir_name())
    return os.path.join("/etc", _app_dir_name())


def user_settings_dir() -> str:
    override = os.environ.get(Settings.ENV_LOCAL_DIR)
    if override:
        return override
    if sys.platform == "win32":
        root = os.environ.get("APPDATA",
                              os.path.join(os.path.expanduser("~"),
                                           "AppData", "Roaming"))
        return os.path.join(root, _app_dir_name())
    root = os.environ.get("XDG_CONFIG_HOME") or os.path.join(
        os.path.expanduser("~"), ".config")
    return os.path.join(root, _app_dir_name())


def portable_settings_file() -> str:
    return os.path.join(portable_settings_dir(), Settings.SETTINGS_FILE_NAME)


def global_settings_file() -> str:
    return os.path.join(global_settings_dir(), Settings.SETTINGS_FILE_NAME)


def user_settings_file() -> str:
    return os.path.join(user_settings_dir(), Settings.SETTINGS_FILE_NAME)


def settings_file_for(mode: SettingsType) -> str:
    """Return the settings file of a concrete (non-AUTO) mode."""
    if mode == SettingsType.GLOBAL:
        return global_settings_file()
    if mode == SettingsType.LOCAL:
        return user_settings_file()
    if mode == SettingsType.PORTABLE:
        return portable_settings_file()
    raise UnsupportedModeError(f"No settings location for mode {mode!r}")


def key_storage_for(settings_file: str) -> str:
    """The key directory lives beside whichever settings file is in use."""
    return os.path.join(os.path.dirname(settings_file),
                        Settings.KEYS_DIR_NAME)
