"""Call lifecycle controller coupling push, UI and audio events."""

import threading
from enum import Enum
from typing import Any, Callable, Iterable

from voip_bridge.core.audio import AudioSessionCoordinator
from voip_bridge.core.models import CallRecord
from voip_bridge.core.payload import DEFAULT_UNKNOWN_CALLER, normalize_push, normalize_resume
from voip_bridge.core.ports import CallAction, CallPresenter, EncryptedHandle
from voip_bridge.core.state_machine import CallState, CallStateMachine
from voip_bridge.utils.exceptions import (
    InvalidCallIdentifierError,
    MalformedPayloadError,
    UnresumableActivityError,
)
from voip_bridge.utils.logging import call_context, get_logger

logger = get_logger(__name__)

Completion = Callable[[], None]
Scheduler = Callable[[float, Completion], Any]


class PushOutcome(Enum):
    """What the controller did with an incoming push."""

    PRESENTED = "presented"  # Call UI requested
    IGNORED = "ignored"  # Not a call push
    DUPLICATE = "duplicate"  # Same call already tracked
    BUSY = "busy"  # Another call is in progress
    DROPPED = "dropped"  # Malformed, bad identifier, or presentation failed


def timer_scheduler(delay: float, callback: Completion) -> threading.Timer:
    """Run ``callback`` once after ``delay`` seconds on a daemon timer thread."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


class CallLifecycleController:
    """Drives one incoming call at a time from push to hang-up.

    Every entry point may be called from a different thread (push delivery,
    call UI, timers); all of them serialize on a single re-entrant lock so
    collaborators may call back into the controller synchronously.

    Only one call is tracked. While it is ringing or answered, pushes for a
    different call are rejected as busy. The tracked call is replaced by the
    next distinct call once it reaches a final state.
    """

    def __init__(
        self,
        presenter: CallPresenter,
        audio: AudioSessionCoordinator,
        *,
        completion_delay: float = 1.0,
        unknown_caller: str = DEFAULT_UNKNOWN_CALLER,
        accepted_push_types: Iterable[str] = ("voip",),
        scheduler: Scheduler | None = None,
    ):
        """Initialize the controller.

        Args:
            presenter: Call UI adapter
            audio: Audio coordinator mirroring call state
            completion_delay: Seconds between presenting a call and signalling
                push-delivery completion
            unknown_caller: Display name used when the caller is unknown
            accepted_push_types: Push types that may announce calls
            scheduler: Fire-and-forget delayed executor, a daemon timer by default
        """
        self._presenter = presenter
        self._audio = audio
        self._completion_delay = completion_delay
        self._unknown_caller = unknown_caller
        self._accepted_push_types = frozenset(accepted_push_types)
        self._schedule = scheduler or timer_scheduler

        self._lock = threading.RLock()
        self._call: CallStateMachine | None = None
        self._record: CallRecord | None = None

    @property
    def state(self) -> CallState | None:
        """State of the tracked call, None before the first call."""
        with self._lock:
            return self._call.state if self._call else None

    @property
    def active_call_id(self) -> str | None:
        """Identifier of the tracked call, kept after it finishes until replaced."""
        with self._lock:
            return self._call.call_id if self._call else None

    @property
    def active_call(self) -> CallRecord | None:
        """Record of the tracked call while it is still in progress."""
        with self._lock:
            return self._record

    # -------------------------------------------------------------------------
    # Call arrival
    # -------------------------------------------------------------------------

    def on_incoming_push(
        self,
        payload: Any,
        completion: Completion | None = None,
        push_type: str = "voip",
    ) -> PushOutcome:
        """Handle a push delivered by the push subsystem.

        ``completion`` is signalled immediately when no call UI is shown, and
        after the completion delay when one is.
        """
        logger.debug("incoming_push_received", push_type=push_type)

        if push_type not in self._accepted_push_types:
            logger.info("push_type_ignored", push_type=push_type)
            return self._complete_now(PushOutcome.IGNORED, completion)

        try:
            record = normalize_push(payload, unknown_caller=self._unknown_caller)
        except MalformedPayloadError as e:
            logger.warning("malformed_push_dropped", error=e.message, **e.details)
            return self._complete_now(PushOutcome.DROPPED, completion)
        except InvalidCallIdentifierError as e:
            logger.error("invalid_call_identifier", error=e.message, **e.details)
            return self._complete_now(PushOutcome.DROPPED, completion)

        if record is None:
            logger.info("push_without_metadata_ignored")
            return self._complete_now(PushOutcome.IGNORED, completion)

        outcome = self._start_call(record)
        if outcome is PushOutcome.PRESENTED:
            if completion is not None:
                self._schedule(self._completion_delay, self._completion_for(record.id, completion))
            return outcome
        return self._complete_now(outcome, completion)

    def on_resume_activity(self, handle: EncryptedHandle | None, is_video: Any) -> bool:
        """Restart a call picked from the recents list.

        Returns:
            True if the call UI was requested
        """
        try:
            record = normalize_resume(handle, is_video, unknown_caller=self._unknown_caller)
        except UnresumableActivityError as e:
            logger.warning("resume_refused", error=e.message, **e.details)
            return False

        return self._start_call(record) is PushOutcome.PRESENTED

    def _start_call(self, record: CallRecord) -> PushOutcome:
        with self._lock, call_context(record.id, source=record.source.value):
            current = self._call
            if current is not None and current.call_id == record.id:
                logger.info("duplicate_call_ignored", state=current.state.value)
                return PushOutcome.DUPLICATE

            if current is not None and not current.is_final():
                logger.warning(
                    "call_rejected_busy",
                    active_call_id=current.call_id,
                    active_state=current.state.value,
                )
                return PushOutcome.BUSY

            machine = CallStateMachine(record.id)
            machine.add_listener(self._audio.on_transition)
            self._call = machine
            self._record = record

            # Ringing before presenting, so synchronous UI callbacks find the call
            machine.ring()
            try:
                self._presenter.present_incoming_call(record)
            except Exception as e:
                logger.error("call_presentation_failed", error=str(e))
                machine.end()
                self._release()
                return PushOutcome.DROPPED

            logger.info(
                "incoming_call_presented",
                caller_name=record.caller_name,
                is_video=record.is_video,
            )
            return PushOutcome.PRESENTED

    def _completion_for(self, call_id: str, completion: Completion) -> Completion:
        def signal() -> None:
            # Delivery bookkeeping only; call state is left untouched
            logger.debug("push_completion_signalled", call_id=call_id)
            completion()

        return signal

    def _complete_now(self, outcome: PushOutcome, completion: Completion | None) -> PushOutcome:
        if completion is not None:
            completion()
        return outcome

    # -------------------------------------------------------------------------
    # Call UI events
    # -------------------------------------------------------------------------

    def on_accept(self, call_id: str, action: CallAction | None = None) -> bool:
        """User answered the call."""
        return self._handle_event("accept", call_id, CallStateMachine.answer, action)

    def on_decline(self, call_id: str, action: CallAction | None = None) -> bool:
        """User declined the ringing call."""
        return self._handle_event("decline", call_id, CallStateMachine.decline, action)

    def on_end(self, call_id: str, action: CallAction | None = None) -> bool:
        """User ended the call, ringing or answered."""
        return self._handle_event("end", call_id, CallStateMachine.end, action)

    def on_timeout(self, call_id: str) -> bool:
        """Call UI stopped ringing without a user decision."""
        return self._handle_event("timeout", call_id, CallStateMachine.time_out, None)

    def hang_up(self, call_id: str) -> bool:
        """End the call from the app side and dismiss its UI."""
        with self._lock, call_context(call_id, call_event="hang_up"):
            machine = self._matching_call(call_id)
            if machine is None:
                return False

            try:
                self._presenter.dismiss_call(call_id)
            except Exception as e:
                logger.error("call_dismiss_failed", error=str(e))

            # The UI may have reported the end synchronously while dismissing
            if machine.is_final():
                return True

            acted = machine.end()
            if acted:
                self._release()
            return acted

    def _handle_event(
        self,
        event: str,
        call_id: str,
        transition: Callable[[CallStateMachine], bool],
        action: CallAction | None,
    ) -> bool:
        with self._lock, call_context(call_id, call_event=event):
            if action is not None:
                self._acknowledge(action)

            machine = self._matching_call(call_id)
            if machine is None:
                return False

            acted = transition(machine)
            if acted and machine.is_final():
                self._release()
            return acted

    def _acknowledge(self, action: CallAction) -> None:
        try:
            action.fulfill()
        except Exception as e:
            logger.error("call_action_fulfill_failed", error=str(e))

    def _matching_call(self, call_id: str) -> CallStateMachine | None:
        machine = self._call
        if machine is None or machine.call_id != call_id or machine.is_final():
            logger.info(
                "stale_event_ignored",
                active_call_id=machine.call_id if machine else None,
                active_state=machine.state.value if machine else None,
            )
            return None
        return machine

    def _release(self) -> None:
        logger.debug("call_record_released")
        self._record = None
