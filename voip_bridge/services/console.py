"""Log-only adapters for running the bridge without a device."""

from voip_bridge.core.models import CallRecord
from voip_bridge.utils.logging import get_logger

logger = get_logger(__name__)


class LoggingCallPresenter:
    """Call UI stand-in that records what would be shown."""

    def __init__(self) -> None:
        self.presented: list[CallRecord] = []
        self.dismissed: list[str] = []

    def present_incoming_call(self, record: CallRecord) -> None:
        self.presented.append(record)
        logger.info(
            "call_ui_presented",
            call_id=record.id,
            caller_name=record.caller_name,
            handle=record.caller_number,
            call_type=record.call_type,
            from_push=record.from_push,
        )

    def dismiss_call(self, call_id: str) -> None:
        self.dismissed.append(call_id)
        logger.info("call_ui_dismissed", call_id=call_id)


class LoggingAudioSession:
    """Audio session stand-in tracking manual mode and activation."""

    def __init__(self) -> None:
        self.manual = False
        self.enabled = False

    def set_manual_audio_mode(self, enabled: bool) -> None:
        self.manual = enabled
        logger.info("audio_session_manual_mode", enabled=enabled)

    def activate(self) -> None:
        self.enabled = True
        logger.info("audio_session_enabled")

    def deactivate(self) -> None:
        self.enabled = False
        logger.info("audio_session_disabled")


class LoggingTokenSink:
    """Registration stand-in keeping the last reported token."""

    def __init__(self) -> None:
        self.last_token: str | None = None

    def report_push_token(self, token: str) -> None:
        self.last_token = token
        logger.info("push_token_reported", token_length=len(token))
