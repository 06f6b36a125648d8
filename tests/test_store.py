import json

import keyring
import pytest

from config.store import KeyringSettingsStore, MemorySettingsStore, settings_from_env
from schemas.settings import Settings


@pytest.fixture
def fake_keyring(monkeypatch):
    vault = {}
    monkeypatch.setattr(keyring, "get_password", lambda s, u: vault.get((s, u)))
    monkeypatch.setattr(keyring, "set_password", lambda s, u, p: vault.__setitem__((s, u), p))
    monkeypatch.setattr(keyring, "delete_password", lambda s, u: vault.pop((s, u)))
    return vault


@pytest.fixture
def broken_keyring(monkeypatch):
    def fail(*args):
        raise RuntimeError("No recommended backend was available")

    monkeypatch.setattr(keyring, "get_password", fail)
    monkeypatch.setattr(keyring, "set_password", fail)
    monkeypatch.setattr(keyring, "delete_password", fail)


def test_round_trip_through_keyring(fake_keyring, tmp_path):
    store = KeyringSettingsStore(fallback_path=tmp_path / "settings.json")
    store.save(Settings(api_key="sk-1", ai_model="claude-3-haiku", auto_save=False))

    loaded = store.load()

    assert loaded.api_key == "sk-1"
    assert loaded.ai_model == "claude-3-haiku"
    assert loaded.auto_save is False
    assert ("ResumeAI", "resumeai-settings") in fake_keyring
    assert not (tmp_path / "settings.json").exists()


def test_falls_back_to_file_without_keyring(broken_keyring, tmp_path):
    path = tmp_path / "settings.json"
    store = KeyringSettingsStore(fallback_path=path)

    store.save(Settings(api_key="sk-2", temperature=1.1))

    assert json.loads(path.read_text())["api_key"] == "sk-2"
    assert store.load().temperature == 1.1

    store.clear()
    assert not path.exists()


def test_missing_or_invalid_record_loads_defaults(broken_keyring, tmp_path):
    path = tmp_path / "settings.json"
    store = KeyringSettingsStore(fallback_path=path)

    assert store.load() == Settings()

    path.write_text('{"temperature": 9}')
    assert store.load() == Settings()

    path.write_text("not json")
    assert store.load() == Settings()


def test_memory_store_counts_saves():
    store = MemorySettingsStore()
    store.save(Settings(api_key="x"))

    assert store.load().api_key == "x"
    assert store.saves == 1


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("RESUMEAI_API_KEY", " sk-env ")
    monkeypatch.setenv("RESUMEAI_MODEL", "gpt-4-turbo")

    settings = settings_from_env()

    assert settings.api_key == "sk-env"
    assert settings.ai_model == "gpt-4-turbo"
