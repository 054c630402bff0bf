"""Normalization of push and resumed-activity payloads into call records."""

from collections.abc import Mapping
from typing import Any

from voip_bridge.core.identity import generate_call_id, resolve_call_id
from voip_bridge.core.models import CallRecord, CallSource
from voip_bridge.core.ports import EncryptedHandle
from voip_bridge.utils.exceptions import MalformedPayloadError, UnresumableActivityError

DEFAULT_UNKNOWN_CALLER = "Unknown"


def _string_field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _bool_field(data: Mapping[str, Any], key: str) -> bool | None:
    value = data.get(key)
    return value if isinstance(value, bool) else None


def display_caller(caller_name: str, caller_number: str, unknown: str = DEFAULT_UNKNOWN_CALLER) -> str:
    """Name shown on the call UI: name, else number, else the unknown sentinel."""
    return caller_name or caller_number or unknown


def normalize_push(
    payload: Any,
    *,
    unknown_caller: str = DEFAULT_UNKNOWN_CALLER,
) -> CallRecord | None:
    """Turn a VoIP push payload into a call record.

    Pushes without a ``metadata`` entry are not calls and yield None.

    Args:
        payload: Dictionary payload as delivered by the push subsystem
        unknown_caller: Display name used when neither name nor number is known

    Returns:
        The normalized record, or None when the push carries no call

    Raises:
        MalformedPayloadError: If the payload or its metadata is not a mapping
        InvalidCallIdentifierError: If a supplied call identifier is unusable
    """
    if not isinstance(payload, Mapping):
        raise MalformedPayloadError(
            "push payload is not a mapping",
            details={"type": type(payload).__name__},
        )

    if "metadata" not in payload:
        return None

    metadata = payload["metadata"]
    if not isinstance(metadata, Mapping):
        raise MalformedPayloadError(
            "push metadata is not a mapping",
            details={"type": type(metadata).__name__},
        )

    call_id = resolve_call_id(metadata.get("call_id"), payload.get("call_id"))
    caller_name = _string_field(metadata, "caller_name")
    caller_number = _string_field(metadata, "caller_number")

    is_video = _bool_field(payload, "isVideo")
    if is_video is None:
        is_video = _bool_field(metadata, "isVideo") or False

    return CallRecord(
        id=call_id,
        caller_name=display_caller(caller_name, caller_number, unknown_caller),
        caller_number=caller_number,
        is_video=is_video,
        source=CallSource.PUSHKIT,
        raw_payload=payload,
    )


def normalize_resume(
    handle: EncryptedHandle | None,
    is_video: Any,
    *,
    unknown_caller: str = DEFAULT_UNKNOWN_CALLER,
) -> CallRecord:
    """Turn a call resumed from the recents list into a call record.

    Resumed calls always get a new identifier; the previous call's id is
    not recoverable from the activity.

    Args:
        handle: Encrypted contact handle attached to the activity
        is_video: Video flag attached to the activity

    Raises:
        UnresumableActivityError: If the handle or video flag is missing,
            or the handle cannot be decrypted
    """
    if handle is None:
        raise UnresumableActivityError("activity has no contact handle")
    if not isinstance(is_video, bool):
        raise UnresumableActivityError(
            "activity has no video classification",
            details={"is_video": repr(is_video)},
        )

    try:
        decrypted = handle.decrypt()
    except Exception as e:
        raise UnresumableActivityError(
            "contact handle could not be decrypted",
            details={"error": str(e)},
        ) from e

    if not isinstance(decrypted, Mapping):
        raise UnresumableActivityError(
            "decrypted handle is not a mapping",
            details={"type": type(decrypted).__name__},
        )

    caller_name = _string_field(decrypted, "nameCaller")
    caller_number = _string_field(decrypted, "handle")

    return CallRecord(
        id=generate_call_id(),
        caller_name=display_caller(caller_name, caller_number, unknown_caller),
        caller_number=caller_number,
        is_video=is_video,
        source=CallSource.RESUMED_ACTIVITY,
        raw_payload={"nameCaller": caller_name, "handle": caller_number, "isVideo": is_video},
    )
