"""Shared fixtures: a throw-away SQLite database and recording transports."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_SECRET_KEY = "test-secret-key"
os.environ.setdefault("SECRET_KEY", TEST_SECRET_KEY)

from teamhub.bootstrap import NotificationSystem, build_notification_system  # noqa: E402
from teamhub.config import Settings, reset_settings_cache  # noqa: E402


class RecordingTransport:
    """Transport that remembers every emitted event."""

    def __init__(self) -> None:
        self.emitted: list[tuple[str, str, dict[str, Any]]] = []

    async def emit(self, group: str, event: str, payload: dict[str, Any]) -> None:
        self.emitted.append((group, event, payload))

    def for_group(self, group: str) -> list[dict[str, Any]]:
        return [payload for emitted_group, _, payload in self.emitted if emitted_group == group]


class FailingTransport:
    async def emit(self, group: str, event: str, payload: dict[str, Any]) -> None:
        raise ConnectionError("socket server unavailable")


@pytest.fixture(autouse=True)
def fresh_settings_cache():
    """Make every test read the environment again."""

    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        secret_key=TEST_SECRET_KEY,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'teamhub.db'}",
        app_timezone="America/Sao_Paulo",
    )


@pytest_asyncio.fixture()
async def system(settings: Settings):
    notification_system: NotificationSystem = await build_notification_system(settings)
    yield notification_system
    await notification_system.aclose()


@pytest.fixture()
def transport(system: NotificationSystem) -> RecordingTransport:
    recording = RecordingTransport()
    system.publisher.bind_transport(recording)
    return recording


@pytest.fixture()
def service(system: NotificationSystem):
    return system.service
