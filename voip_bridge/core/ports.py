"""Interfaces the bridge uses to talk to platform collaborators.

Concrete adapters are injected at the edge; the controller only ever
sees these protocols.
"""

from typing import Any, Mapping, Protocol

from voip_bridge.core.models import CallRecord


class CallPresenter(Protocol):
    """Native incoming-call UI."""

    def present_incoming_call(self, record: CallRecord) -> None: ...

    def dismiss_call(self, call_id: str) -> None: ...


class CallAction(Protocol):
    """A pending UI transaction that must be acknowledged."""

    def fulfill(self) -> None: ...


class AudioSession(Protocol):
    """Device audio routing."""

    def set_manual_audio_mode(self, enabled: bool) -> None: ...

    def activate(self) -> None: ...

    def deactivate(self) -> None: ...


class TokenSink(Protocol):
    """Server-side registration of the device push token."""

    def report_push_token(self, token: str) -> None: ...


class EncryptedHandle(Protocol):
    """Contact handle attached to a resumed call activity."""

    def decrypt(self) -> Mapping[str, Any]: ...
