"""Assembly of the bridge components behind one object."""

from typing import Any

from voip_bridge.config.settings import Settings
from voip_bridge.core.audio import AudioSessionCoordinator
from voip_bridge.core.controller import CallLifecycleController, Completion, PushOutcome, Scheduler
from voip_bridge.core.ports import AudioSession, CallAction, CallPresenter, EncryptedHandle, TokenSink
from voip_bridge.core.token import TokenForwarder
from voip_bridge.utils.logging import get_logger

logger = get_logger(__name__)


class VoipBridge:
    """Process-wide bridge between push delivery, call UI and audio.

    Construct once at startup and hand the same instance to every entry
    point. Manual audio control is taken during construction.
    """

    def __init__(
        self,
        settings: Settings,
        presenter: CallPresenter,
        audio_session: AudioSession,
        token_sink: TokenSink,
        scheduler: Scheduler | None = None,
    ):
        self.settings = settings
        self.audio = AudioSessionCoordinator(audio_session)
        self.controller = CallLifecycleController(
            presenter,
            self.audio,
            completion_delay=settings.completion_delay_seconds,
            unknown_caller=settings.unknown_caller_name,
            accepted_push_types=settings.accepted_push_types,
            scheduler=scheduler,
        )
        self.tokens = TokenForwarder(token_sink)
        self._token_sink = token_sink

        self.audio.start()
        logger.info(
            "bridge_initialized",
            completion_delay=settings.completion_delay_seconds,
            accepted_push_types=settings.accepted_push_types,
        )

    # Entry points, so platform glue only needs the bridge instance

    def on_incoming_push(
        self,
        payload: Any,
        completion: Completion | None = None,
        push_type: str = "voip",
    ) -> PushOutcome:
        return self.controller.on_incoming_push(payload, completion, push_type)

    def on_resume_activity(self, handle: EncryptedHandle | None, is_video: Any) -> bool:
        return self.controller.on_resume_activity(handle, is_video)

    def on_accept(self, call_id: str, action: CallAction | None = None) -> bool:
        return self.controller.on_accept(call_id, action)

    def on_decline(self, call_id: str, action: CallAction | None = None) -> bool:
        return self.controller.on_decline(call_id, action)

    def on_end(self, call_id: str, action: CallAction | None = None) -> bool:
        return self.controller.on_end(call_id, action)

    def on_timeout(self, call_id: str) -> bool:
        return self.controller.on_timeout(call_id)

    def on_token_updated(self, token: bytes | str) -> None:
        self.tokens.on_token_updated(token)

    def on_token_invalidated(self) -> None:
        self.tokens.on_token_invalidated()

    def did_activate_audio_session(self) -> None:
        self.audio.did_activate()

    def did_deactivate_audio_session(self) -> None:
        self.audio.did_deactivate()

    def close(self) -> None:
        """Release adapters that hold connections, such as the HTTP token sink."""
        close = getattr(self._token_sink, "close", None)
        if close is not None:
            close()
        logger.info("bridge_closed")
