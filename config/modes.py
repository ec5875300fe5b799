"""
Settings modes and the per-mode restriction policy.

The same table is applied after a load and before a save, so a file that
did not win as GLOBAL can never carry restrictions in memory or on disk.
"""

from enum import IntEnum

from config.restrictions import Restrictions


class UnsupportedModeError(ValueError):
    """Raised for a save mode that does not name a settings location."""


class SettingsType(IntEnum):
    AUTO     = 0
    GLOBAL   = 1
    LOCAL    = 2
    PORTABLE = 3


def coerce_mode(value) -> SettingsType:
    """Accept a SettingsType, its integer value or its (case-insensitive) name."""
    if isinstance(value, SettingsType):
        return value
    if isinstance(value, str):
        try:
            return SettingsType[value.strip().upper()]
        except KeyError:
            raise UnsupportedModeError(
                f"The given settings mode {value!r} is invalid") from None
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return SettingsType(value)
        except ValueError:
            raise UnsupportedModeError(
                f"The given settings mode {value!r} is invalid") from None
    raise UnsupportedModeError(f"The given settings mode {value!r} is invalid")


def _keep_or_default(restrictions):
    return restrictions if restrictions is not None else Restrictions()


def _clear(restrictions):
    return None


RESTRICTION_POLICY = {
    SettingsType.GLOBAL:   _keep_or_default,
    SettingsType.LOCAL:    _clear,
    SettingsType.PORTABLE: _clear,
}


def apply_restriction_policy(mode: SettingsType, restrictions):
    try:
        policy = RESTRICTION_POLICY[mode]
    except KeyError:
        raise UnsupportedModeError(
            f"No restriction policy for mode {mode!r}") from None
    return policy(restrictions)
