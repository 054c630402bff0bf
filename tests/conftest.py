"""Pytest configuration and fixtures for bridge tests."""

from typing import Callable
from unittest.mock import MagicMock

import pytest

from voip_bridge.config.settings import Settings
from voip_bridge.core.audio import AudioSessionCoordinator
from voip_bridge.core.controller import CallLifecycleController

METADATA_CALL_ID = "6f1c9a2e-3b4d-4e5f-8a6b-7c8d9e0f1a2b"


class RecordingScheduler:
    """Scheduler that holds deferred callbacks until the test runs them."""

    def __init__(self) -> None:
        self.scheduled: list[tuple[float, Callable[[], None]]] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> None:
        self.scheduled.append((delay, callback))

    def run_all(self) -> None:
        pending, self.scheduled = self.scheduled, []
        for _, callback in pending:
            callback()


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        completion_delay_seconds=1.0,
        unknown_caller_name="Unknown",
        registration_url=None,
        log_level="DEBUG",
        log_format="console",
    )


@pytest.fixture
def presenter() -> MagicMock:
    """Create mock call UI."""
    return MagicMock(spec=["present_incoming_call", "dismiss_call"])


@pytest.fixture
def audio_session() -> MagicMock:
    """Create mock audio session."""
    return MagicMock(spec=["set_manual_audio_mode", "activate", "deactivate"])


@pytest.fixture
def token_sink() -> MagicMock:
    """Create mock registration collaborator."""
    return MagicMock(spec=["report_push_token"])


@pytest.fixture
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture
def audio(audio_session: MagicMock) -> AudioSessionCoordinator:
    """Create a started audio coordinator."""
    coordinator = AudioSessionCoordinator(audio_session)
    coordinator.start()
    return coordinator


@pytest.fixture
def controller(
    presenter: MagicMock,
    audio: AudioSessionCoordinator,
    scheduler: RecordingScheduler,
) -> CallLifecycleController:
    """Create a controller wired to mock collaborators."""
    return CallLifecycleController(
        presenter,
        audio,
        completion_delay=1.0,
        scheduler=scheduler,
    )


@pytest.fixture
def push_payload() -> dict:
    """Push announcing a call with a server-side id and no metadata id."""
    return {
        "metadata": {
            "call_id": "",
            "caller_name": "Alice",
            "caller_number": "+1555",
            "isVideo": False,
        },
        "call_id": "abc-123",
    }
