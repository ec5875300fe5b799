import os
import sys


class Settings:
    """Centralised application constants."""

    # ── application ──────────────────────────────────────────────
    APP_NAME    = "SecurePad"
    APP_VERSION = "1.0.0"

    # ── paths ────────────────────────────────────────────────────
    if getattr(sys, "frozen", False):
        BASE_DIR = os.path.dirname(os.path.abspath(sys.executable))
    else:
        BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    SETTINGS_FILE_NAME = "settings.xml"
    KEYS_DIR_NAME      = "Keys"
    KEY_FILE_PATTERN   = "*.xml"
    INVALID_SUFFIX     = ".invalid"

    # environment overrides for the three settings locations
    ENV_PORTABLE_DIR = "SECUREPAD_PORTABLE_DIR"
    ENV_GLOBAL_DIR   = "SECUREPAD_GLOBAL_DIR"
    ENV_LOCAL_DIR    = "SECUREPAD_LOCAL_DIR"

    # ── editor defaults ──────────────────────────────────────────
    WINDOW_SIZE      = (600, 600)
    FOREGROUND_COLOR = "black"
    BACKGROUND_COLOR = "white"
    FONT_NAME        = "Monospace"
    FONT_SIZE        = 10.0

    # ── crypto defaults ──────────────────────────────────────────
    RSA_KEY_SIZE     = 4096
    RSA_EXPONENT     = 65537

    # ── logging ──────────────────────────────────────────────────
    LOG_LEVEL   = "INFO"
    LOG_FORMAT  = "[%(asctime)s] [%(levelname)-8s] %(name)-28s — %(message)s"
    LOG_DATEFMT = "%H:%M:%S"
