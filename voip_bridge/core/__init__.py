"""Call handling core: normalization, lifecycle and audio coordination."""

from voip_bridge.core.controller import CallLifecycleController, PushOutcome
from voip_bridge.core.models import CallRecord, CallSource
from voip_bridge.core.state_machine import CallState

__all__ = ["CallLifecycleController", "PushOutcome", "CallRecord", "CallSource", "CallState"]
