"""Audio session coordination driven by call lifecycle transitions."""

import threading

from voip_bridge.core.ports import AudioSession
from voip_bridge.core.state_machine import FINAL_STATES, CallState
from voip_bridge.utils.logging import get_logger

logger = get_logger(__name__)


class AudioSessionCoordinator:
    """Keeps the device audio session in step with the active call.

    Audio management is switched to manual once on ``start()``; from then on
    only lifecycle transitions (and the system's own session callbacks)
    enable or disable audio.
    """

    def __init__(self, session: AudioSession):
        self._session = session
        self._lock = threading.Lock()
        self._started = False
        self._enabled = False

    @property
    def is_enabled(self) -> bool:
        """Whether audio was last activated rather than deactivated."""
        return self._enabled

    @property
    def is_started(self) -> bool:
        return self._started

    def start(self) -> None:
        """Take manual control of audio routing. Later calls are no-ops."""
        with self._lock:
            if self._started:
                return
            self._session.set_manual_audio_mode(True)
            self._started = True
            self._enabled = False
        logger.info("audio_manual_mode_enabled")

    def activate(self) -> None:
        with self._lock:
            self._session.activate()
            self._enabled = True
        logger.info("audio_activated")

    def deactivate(self) -> None:
        """Release audio. Safe to call when audio was never activated."""
        with self._lock:
            self._session.deactivate()
            self._enabled = False
        logger.info("audio_deactivated")

    def on_transition(self, old_state: CallState, new_state: CallState) -> None:
        """State machine listener mirroring call state into audio state."""
        if new_state == CallState.ANSWERED:
            self.activate()
        elif new_state in FINAL_STATES:
            self.deactivate()

    def did_activate(self) -> None:
        """System activated the audio session on the call UI's behalf."""
        logger.debug("system_audio_session_activated")
        if not self._enabled:
            self.activate()

    def did_deactivate(self) -> None:
        """System deactivated the audio session."""
        logger.debug("system_audio_session_deactivated")
        if self._enabled:
            self.deactivate()
