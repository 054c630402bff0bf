"""Lifecycle state machine for a single incoming call."""

from enum import Enum
from typing import Callable

from voip_bridge.utils.logging import get_logger

logger = get_logger(__name__)


class CallState(Enum):
    """States of an incoming call."""

    PENDING = "pending"  # Record built, UI not shown yet
    RINGING = "ringing"  # UI presentation requested
    ANSWERED = "answered"  # User accepted, audio live
    DECLINED = "declined"  # User rejected while ringing
    ENDED = "ended"  # Hung up, or presentation failed
    TIMED_OUT = "timed_out"  # Call UI gave up ringing


FINAL_STATES: frozenset[CallState] = frozenset(
    {CallState.DECLINED, CallState.ENDED, CallState.TIMED_OUT}
)

# Valid state transitions
VALID_TRANSITIONS: dict[CallState, set[CallState]] = {
    CallState.PENDING: {CallState.RINGING, CallState.ENDED},
    CallState.RINGING: {
        CallState.ANSWERED,
        CallState.DECLINED,
        CallState.ENDED,
        CallState.TIMED_OUT,
    },
    CallState.ANSWERED: {CallState.ENDED},
    CallState.DECLINED: set(),
    CallState.ENDED: set(),
    CallState.TIMED_OUT: set(),
}

TransitionListener = Callable[[CallState, CallState], None]


class CallStateMachine:
    """Tracks the lifecycle of one call.

    Rejects transitions the lifecycle does not allow and notifies
    listeners after every accepted transition.
    """

    def __init__(self, call_id: str):
        """Initialize state machine.

        Args:
            call_id: Identifier of the tracked call
        """
        self.call_id = call_id
        self._state = CallState.PENDING
        self._listeners: list[TransitionListener] = []

        logger.debug("state_machine_initialized", call_id=call_id, state=self._state.value)

    @property
    def state(self) -> CallState:
        """Current state of the call."""
        return self._state

    def transition(self, new_state: CallState) -> bool:
        """Attempt to transition to a new state.

        Args:
            new_state: Target state

        Returns:
            True if transition was successful, False otherwise
        """
        if new_state not in VALID_TRANSITIONS[self._state]:
            logger.warning(
                "invalid_state_transition",
                call_id=self.call_id,
                from_state=self._state.value,
                to_state=new_state.value,
            )
            return False

        old_state = self._state
        self._state = new_state

        logger.info(
            "state_transition",
            call_id=self.call_id,
            from_state=old_state.value,
            to_state=new_state.value,
        )

        for listener in self._listeners:
            try:
                listener(old_state, new_state)
            except Exception as e:
                logger.error(
                    "state_listener_error",
                    call_id=self.call_id,
                    to_state=new_state.value,
                    error=str(e),
                )

        return True

    def add_listener(self, listener: TransitionListener) -> None:
        """Add a state change listener.

        Args:
            listener: Callback function(old_state, new_state)
        """
        self._listeners.append(listener)

    def is_final(self) -> bool:
        """Check if nothing more can happen to the call."""
        return self._state in FINAL_STATES

    def ring(self) -> bool:
        """Mark the call UI as requested."""
        return self.transition(CallState.RINGING)

    def answer(self) -> bool:
        return self.transition(CallState.ANSWERED)

    def decline(self) -> bool:
        return self.transition(CallState.DECLINED)

    def end(self) -> bool:
        """End the call from ringing, answered, or a failed presentation."""
        return self.transition(CallState.ENDED)

    def time_out(self) -> bool:
        return self.transition(CallState.TIMED_OUT)
