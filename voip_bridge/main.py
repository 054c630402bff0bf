"""Main entrypoint: replay bridge events from newline-delimited JSON.

Each stdin line is one event object, for example::

    {"event": "push", "payload": {"metadata": {"caller_name": "Alice"}, "call_id": "abc-123"}}
    {"event": "decline", "call_id": "abc-123"}
    {"event": "resume", "nameCaller": "Bob", "handle": "+1555", "isVideo": false}
    {"event": "token", "token": "a1b2c3"}
"""

import json
import sys
import threading
from typing import Any, Iterable, TextIO

from voip_bridge import __version__
from voip_bridge.bridge import VoipBridge
from voip_bridge.config.settings import Settings, get_settings
from voip_bridge.core.ports import TokenSink
from voip_bridge.services.console import (
    LoggingAudioSession,
    LoggingCallPresenter,
    LoggingTokenSink,
)
from voip_bridge.services.registration import HttpTokenSink
from voip_bridge.utils.exceptions import TokenForwardError
from voip_bridge.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


class ReplayHandle:
    """Resume handle whose contents arrive already in clear text."""

    def __init__(self, name_caller: Any, handle: Any):
        self._data = {"nameCaller": name_caller, "handle": handle}

    def decrypt(self) -> dict[str, Any]:
        return self._data


def build_bridge(settings: Settings) -> VoipBridge:
    """Create a bridge backed by console adapters."""
    sink: TokenSink
    if settings.registration_url:
        sink = HttpTokenSink(settings.registration_url, timeout=settings.registration_timeout)
    else:
        sink = LoggingTokenSink()

    return VoipBridge(
        settings,
        presenter=LoggingCallPresenter(),
        audio_session=LoggingAudioSession(),
        token_sink=sink,
    )


def dispatch(bridge: VoipBridge, event: dict[str, Any], pending: list[threading.Event]) -> Any:
    """Apply one replayed event to the bridge and return its result."""
    kind = event.get("event")
    call_id = event.get("call_id", "")

    if kind == "push":
        done = threading.Event()
        pending.append(done)
        outcome = bridge.on_incoming_push(
            event.get("payload"),
            done.set,
            event.get("push_type", "voip"),
        )
        return outcome.value
    if kind == "resume":
        handle = ReplayHandle(event.get("nameCaller"), event.get("handle"))
        return bridge.on_resume_activity(handle, event.get("isVideo"))
    if kind == "accept":
        return bridge.on_accept(call_id)
    if kind == "decline":
        return bridge.on_decline(call_id)
    if kind == "end":
        return bridge.on_end(call_id)
    if kind == "timeout":
        return bridge.on_timeout(call_id)
    if kind == "hang_up":
        return bridge.controller.hang_up(call_id)
    if kind == "token":
        bridge.on_token_updated(event.get("token", ""))
        return bridge.tokens.token
    if kind == "token_invalidated":
        bridge.on_token_invalidated()
        return bridge.tokens.token

    raise ValueError(f"unknown event: {kind!r}")


def replay(bridge: VoipBridge, lines: Iterable[str]) -> int:
    """Replay events, returning the number of lines that failed."""
    failures = 0
    pending: list[threading.Event] = []

    for number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            event = json.loads(line)
            if not isinstance(event, dict):
                raise ValueError("event must be a JSON object")
            result = dispatch(bridge, event, pending)
        except (ValueError, TypeError, TokenForwardError) as e:
            failures += 1
            logger.error("replay_event_failed", line=number, error=str(e))
            continue

        logger.info(
            "replay_event_applied",
            line=number,
            kind=event.get("event"),
            result=result,
            state=bridge.controller.state.value if bridge.controller.state else None,
        )

    # Deferred push completions fire on timer threads
    for done in pending:
        done.wait(bridge.settings.completion_delay_seconds + 1.0)

    return failures


def main(stream: TextIO | None = None) -> int:
    """Main application entrypoint."""
    settings = get_settings()

    setup_logging(
        level=settings.log_level,
        format=settings.log_format,
    )

    logger.info("voip_bridge_starting", version=__version__)

    bridge = build_bridge(settings)
    try:
        failures = replay(bridge, stream or sys.stdin)
    finally:
        bridge.close()

    logger.info("voip_bridge_stopped", failures=failures)
    return 1 if failures else 0


def run() -> None:
    """Run the application."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
