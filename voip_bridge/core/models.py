"""Canonical call data shared by the bridge components."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class CallSource(Enum):
    """Where an incoming call was announced from."""

    PUSHKIT = "pushkit"
    RESUMED_ACTIVITY = "resumed_activity"


@dataclass(frozen=True)
class CallRecord:
    """One incoming call, normalized from a push or resumed activity."""

    id: str
    caller_name: str
    caller_number: str
    is_video: bool
    source: CallSource
    raw_payload: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Downstream consumers only get a read-only view of the payload
        object.__setattr__(self, "raw_payload", MappingProxyType(dict(self.raw_payload)))

    @property
    def call_type(self) -> int:
        """Call UI media type: 0 for audio, 1 for video."""
        return 1 if self.is_video else 0

    @property
    def from_push(self) -> bool:
        """True when the call was announced by a VoIP push."""
        return self.source is CallSource.PUSHKIT
