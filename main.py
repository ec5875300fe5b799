"""
SecurePad — settings and key storage command line

Commands
────────
show                      resolved mode, settings file, key storage
save [--mode MODE]        write the resolved settings (auto/global/local/portable)
keys list                 list stored RSA keys
keys generate NAME        generate and store a new RSA key pair
keys verify               report key files whose name is not their hash
keys purge                delete every file in the key storage
"""

import argparse
import logging
import sys

from config.settings import Settings
from config.app_settings import style_to_text
from config.modes import SettingsType, UnsupportedModeError
from config.resolver import get_settings
from core.crypto_engine import RSAKey

logger = logging.getLogger("SecurePad.Main")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Logging
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def setup_logging(verbose: bool = False):
    root_logger = logging.getLogger()
    level = logging.DEBUG if verbose else getattr(logging, Settings.LOG_LEVEL)
    root_logger.setLevel(level)
    if root_logger.handlers:
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        Settings.LOG_FORMAT, datefmt=Settings.LOG_DATEFMT,
    ))
    root_logger.addHandler(console_handler)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Commands
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def cmd_show(args) -> int:
    s = get_settings()
    print(f"Mode:          {s.type.name.lower()}")
    print(f"Settings file: {s.settings_file}")
    print(f"Key storage:   {s.key_storage}")
    print(f"Window:        {s.window_size[0]}x{s.window_size[1]} "
          f"({s.window_startup_state.value})")
    print(f"Font:          {s.font_name} {s.font_size:g}pt "
          f"{style_to_text(s.font_style)}")
    print(f"Foreground:    {s.editor_foreground_color}")
    print(f"Background:    {s.editor_background_color}")
    if s.restrictions is not None:
        print(f"Restrictions:  {s.restrictions!r}")
    return 0


def cmd_save(args) -> int:
    s = get_settings()
    try:
        s.save_settings(args.mode)
    except UnsupportedModeError as exc:
        logger.error("%s", exc)
        return 2
    except OSError as exc:
        logger.error("Cannot write settings: %s", exc)
        return 1
    print(f"Saved {s.type.name.lower()} settings to {s.settings_file}")
    return 0


def cmd_keys_list(args) -> int:
    keys = get_settings().load_rsa_keys()
    for key in sorted(keys, key=lambda k: k.name):
        kind = "private" if key.has_private_key else "public"
        print(f"{key.name:<30s} {key.size:>5d} bit  {kind}")
    if not keys:
        print("No keys stored.")
    return 0


def cmd_keys_generate(args) -> int:
    s = get_settings()
    if s.restrictions is not None and args.size < s.restrictions.minimum_rsa_size:
        logger.error("Key size %d is below the required minimum of %d bits",
                     args.size, s.restrictions.minimum_rsa_size)
        return 2
    key = RSAKey.generate(args.name, key_size=args.size,
                          public_exponent=Settings.RSA_EXPONENT)
    report = s.save_rsa_keys([key])
    for item in report.failed:
        logger.error("%s %s failed: %s", item.action, item.path, item.error)
    print(f"Stored {key!r} in {s.key_storage}")
    return 0 if report.ok else 1


def cmd_keys_verify(args) -> int:
    mismatched = get_settings().key_store().verify()
    for path in mismatched:
        print(f"MISMATCH  {path}")
    if not mismatched:
        print("All key files match their content hash.")
    return 1 if mismatched else 0


def cmd_keys_purge(args) -> int:
    report = get_settings().key_store().purge()
    print(f"Deleted {len(report.succeeded)} file(s), "
          f"{len(report.failed)} failure(s)")
    return 0 if report.ok else 1


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Entry Point
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog=Settings.APP_NAME.lower(),
        description=f"{Settings.APP_NAME} settings and key storage",
    )
    ap.add_argument("-v", "--verbose", action="store_true",
                    help="log debug output")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("show", help="show the resolved settings")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("save", help="write the resolved settings")
    p.add_argument("--mode", default="auto",
                   choices=[m.name.lower() for m in SettingsType])
    p.set_defaults(func=cmd_save)

    keys = sub.add_parser("keys", help="manage stored RSA keys")
    ksub = keys.add_subparsers(dest="keys_command", required=True)

    p = ksub.add_parser("list", help="list stored keys")
    p.set_defaults(func=cmd_keys_list)

    p = ksub.add_parser("generate", help="generate and store a key pair")
    p.add_argument("name")
    p.add_argument("--size", type=int, default=Settings.RSA_KEY_SIZE)
    p.set_defaults(func=cmd_keys_generate)

    p = ksub.add_parser("verify", help="check key file names")
    p.set_defaults(func=cmd_keys_verify)

    p = ksub.add_parser("purge", help="delete every stored key file")
    p.set_defaults(func=cmd_keys_purge)
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    logger.debug("%s v%s", Settings.APP_NAME, Settings.APP_VERSION)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
