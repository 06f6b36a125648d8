from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional, Protocol

from pydantic import ValidationError

from schemas.settings import Settings

logger = logging.getLogger(__name__)

KEYRING_SERVICE = "ResumeAI"
SETTINGS_RECORD = "resumeai-settings"
LOCAL_SETTINGS_PATH = Path.home() / ".resumeai_settings.json"


class SettingsStore(Protocol):
    def load(self) -> Settings: ...

    def save(self, settings: Settings) -> None: ...


class MemorySettingsStore:
    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or Settings()
        self.saves = 0

    def load(self) -> Settings:
        return self._settings.copy()

    def save(self, settings: Settings) -> None:
        self._settings = settings.copy()
        self.saves += 1


class KeyringSettingsStore:
    """Keeps the settings record in the OS keyring, or a local file without one.

    The record holds the API key, so the keyring is preferred.
    """

    def __init__(
        self,
        service: str = KEYRING_SERVICE,
        record: str = SETTINGS_RECORD,
        fallback_path: Path = LOCAL_SETTINGS_PATH,
    ):
        self.service = service
        self.record = record
        self.fallback_path = fallback_path

    def load(self) -> Settings:
        raw = self._read()
        if not raw:
            return Settings()
        try:
            return Settings.parse_obj(json.loads(raw))
        except (ValueError, ValidationError) as exc:
            logger.warning("Ignoring unreadable settings record %s: %s", self.record, exc)
            return Settings()

    def save(self, settings: Settings) -> None:
        payload = settings.json()
        try:
            import keyring  # type: ignore

            keyring.set_password(self.service, self.record, payload)
            return
        except Exception as exc:
            logger.info("keyring unavailable, saving settings to %s: %s", self.fallback_path, exc)
        self.fallback_path.write_text(payload, encoding="utf-8")

    def clear(self) -> None:
        try:
            import keyring  # type: ignore

            keyring.delete_password(self.service, self.record)
        except Exception as exc:
            logger.info("No keyring record removed: %s", exc)
        if self.fallback_path.exists():
            self.fallback_path.unlink()

    def _read(self) -> Optional[str]:
        try:
            import keyring  # type: ignore

            stored = keyring.get_password(self.service, self.record)
            if stored:
                return stored
        except Exception as exc:
            logger.info("keyring unavailable, reading %s: %s", self.fallback_path, exc)
        if self.fallback_path.exists():
            try:
                return self.fallback_path.read_text(encoding="utf-8")
            except OSError as exc:
                logger.warning("Could not read %s: %s", self.fallback_path, exc)
        return None


def settings_from_env(base: Optional[Settings] = None) -> Settings:
    """Overlay RESUMEAI_API_KEY / RESUMEAI_MODEL onto ``base`` (or defaults)."""
    data = (base or Settings()).dict()
    if os.getenv("RESUMEAI_API_KEY"):
        data["api_key"] = os.environ["RESUMEAI_API_KEY"]
    if os.getenv("RESUMEAI_MODEL"):
        data["ai_model"] = os.environ["RESUMEAI_MODEL"]
    return Settings.parse_obj(data)
