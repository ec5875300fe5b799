import os

import pytest

from config import resolver
from config.app_settings import AppSettings, FontStyle, WindowState
from config.modes import (RESTRICTION_POLICY, SettingsType,
                          UnsupportedModeError, apply_restriction_policy,
                          coerce_mode)
from config.restrictions import CryptoMode, Restrictions
from utils.markup import from_xml, to_xml


def _policy(rsa_key=None):
    return Restrictions(minimum_rsa_size=2048,
                        blocked_modes=[CryptoMode.KEYFILE, CryptoMode.CRYPT_USER],
                        block_portable=True,
                        auto_rsa_keys=[rsa_key] if rsa_key else [])


def test_defaults():
    s = AppSettings()
    assert s.window_size == (600, 600)
    assert s.window_startup_state == WindowState.NORMAL
    assert s.restrictions is None
    assert s.type == SettingsType.LOCAL


def test_font_is_set_as_a_triple():
    s = AppSettings()
    assert s.set_font("Fira Code", 14, FontStyle.BOLD | FontStyle.ITALIC) == \
        ("Fira Code", 14.0, FontStyle.BOLD | FontStyle.ITALIC)
    assert s.get_font() == ("Fira Code", 14.0, FontStyle.BOLD | FontStyle.ITALIC)


def test_document_round_trip():
    s = AppSettings()
    s.window_size = (1024, 768)
    s.window_startup_state = WindowState.MAXIMIZED
    s.set_font("Fira Code", 11.5, FontStyle.UNDERLINE)

    back = from_xml(AppSettings, to_xml(s))

    assert back.window_size == (1024, 768)
    assert back.window_startup_state == WindowState.MAXIMIZED
    assert back.get_font() == ("Fira Code", 11.5, FontStyle.UNDERLINE)


def test_derived_fields_are_not_persisted(locations):
    s = AppSettings()
    text = to_xml(s)
    assert "Keys" not in text
    assert "Local" not in text


def test_save_global_round_trip(locations, rsa_key):
    s = AppSettings()
    s.restrictions = _policy(rsa_key.public_only())
    s.save_settings(SettingsType.GLOBAL)

    assert s.type == SettingsType.GLOBAL
    assert s.settings_file == locations.file("global_")
    assert s.key_storage == os.path.join(str(locations.global_), "Keys")

    loaded = resolver.get_settings()
    assert loaded.type == SettingsType.GLOBAL
    assert loaded.restrictions == _policy(rsa_key.public_only())


@pytest.mark.parametrize("mode, which", [
    (SettingsType.LOCAL, "local"),
    (SettingsType.PORTABLE, "portable"),
])
def test_save_clears_restrictions(locations, mode, which):
    getattr(locations, which).mkdir(parents=True)
    s = AppSettings()
    s.restrictions = _policy()

    s.save_settings(mode)

    assert s.restrictions is None
    assert s.type == mode
    assert s.key_storage == os.path.join(str(getattr(locations, which)), "Keys")
    with open(locations.file(which), encoding="utf-8") as f:
        assert "Restrictions" not in f.read()

    loaded = resolver.get_settings()
    assert loaded.type == mode
    assert loaded.restrictions is None


def test_auto_save_creates_local_directory(locations):
    s = AppSettings()
    s.restrictions = _policy()
    s.save_settings()

    assert os.path.isfile(locations.file("local"))
    assert s.type == SettingsType.LOCAL
    assert s.restrictions is None


def test_auto_save_prefers_existing_portable_file(locations):
    locations.write("portable", "")
    s = AppSettings()
    s.save_settings(SettingsType.AUTO)

    assert s.type == SettingsType.PORTABLE
    assert s.key_storage == os.path.join(str(locations.portable), "Keys")
    assert not os.path.exists(locations.file("local"))
    assert resolver.get_settings().type == SettingsType.PORTABLE


def test_save_recomputes_location_after_load(locations):
    locations.write("local", to_xml(AppSettings()))
    s = resolver.get_settings()
    assert s.type == SettingsType.LOCAL

    locations.global_.mkdir()
    s.save_settings("global")

    assert s.type == SettingsType.GLOBAL
    assert s.restrictions == Restrictions()
    assert s.key_storage == os.path.join(str(locations.global_), "Keys")


def test_write_failure_propagates(locations):
    # global directory does not exist and explicit modes do not create it
    with pytest.raises(OSError):
        AppSettings().save_settings(SettingsType.GLOBAL)


def test_auto_save_ignores_directory_failure_but_not_write_failure(
        locations, monkeypatch):
    locations.write("global_", to_xml(AppSettings()))
    s = resolver.get_settings()
    assert s.type == SettingsType.GLOBAL
    before = (s.type, s.settings_file, s.restrictions)

    def deny(*args, **kwargs):
        raise PermissionError("cannot create settings directory")

    monkeypatch.setattr(os, "makedirs", deny)
    with pytest.raises(OSError) as excinfo:
        s.save_settings()

    # the write to the missing per-user directory fails, not makedirs
    assert isinstance(excinfo.value, FileNotFoundError)
    assert (s.type, s.settings_file, s.restrictions) == before
    assert s.restrictions == Restrictions()


@pytest.mark.parametrize("bad", [7, -1, "roaming", 2.5, None])
def test_unsupported_mode(locations, bad):
    s = AppSettings()
    with pytest.raises(UnsupportedModeError):
        s.save_settings(bad)
    assert not os.path.exists(locations.file("local"))


def test_coerce_mode():
    assert coerce_mode(3) is SettingsType.PORTABLE
    assert coerce_mode("Global") is SettingsType.GLOBAL
    assert coerce_mode(SettingsType.AUTO) is SettingsType.AUTO


def test_restriction_policy_table():
    policy = _policy()
    assert set(RESTRICTION_POLICY) == {SettingsType.GLOBAL, SettingsType.LOCAL,
                                       SettingsType.PORTABLE}
    assert apply_restriction_policy(SettingsType.GLOBAL, policy) is policy
    assert apply_restriction_policy(SettingsType.GLOBAL, None) == Restrictions()
    assert apply_restriction_policy(SettingsType.LOCAL, policy) is None
    assert apply_restriction_policy(SettingsType.PORTABLE, policy) is None
    with pytest.raises(UnsupportedModeError):
        apply_restriction_policy(SettingsType.AUTO, policy)


def test_keys_follow_settings_location(locations, rsa_key):
    s = resolver.get_settings()
    s.save_rsa_keys([rsa_key])

    assert os.path.isdir(os.path.join(str(locations.local), "Keys"))
    assert resolver.get_settings().load_rsa_keys() == [rsa_key]


def test_restrictions_allow_key(rsa_key):
    assert Restrictions(minimum_rsa_size=2048).allows_key(rsa_key)
    assert not Restrictions(minimum_rsa_size=4096).allows_key(rsa_key)
