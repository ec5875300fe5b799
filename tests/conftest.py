import os

import pytest

from config.settings import Settings
from core.crypto_engine import RSAKey


class Locations:
    def __init__(self, root):
        self.portable = root / "portable"
        self.global_ = root / "global"
        self.local = root / "local"

    def file(self, which) -> str:
        return os.path.join(str(getattr(self, which)),
                            Settings.SETTINGS_FILE_NAME)

    def write(self, which, text: str) -> str:
        directory = getattr(self, which)
        directory.mkdir(parents=True, exist_ok=True)
        path = self.file(which)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path


@pytest.fixture
def locations(tmp_path, monkeypatch):
    loc = Locations(tmp_path)
    monkeypatch.setenv(Settings.ENV_PORTABLE_DIR, str(loc.portable))
    monkeypatch.setenv(Settings.ENV_GLOBAL_DIR, str(loc.global_))
    monkeypatch.setenv(Settings.ENV_LOCAL_DIR, str(loc.local))
    return loc


@pytest.fixture(scope="session")
def rsa_keys():
    return [RSAKey.generate(f"key-{i}", key_size=2048) for i in range(3)]


@pytest.fixture
def rsa_key(rsa_keys):
    return rsa_keys[0]
