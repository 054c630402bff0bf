"""Call identifier resolution."""

import uuid
from typing import Any

from voip_bridge.utils.exceptions import InvalidCallIdentifierError


def generate_call_id() -> str:
    """Create a fresh call identifier."""
    return str(uuid.uuid4())


def resolve_call_id(metadata_call_id: Any = None, payload_call_id: Any = None) -> str:
    """Pick the stable identifier for a call.

    Precedence is the metadata ``call_id``, then the payload-level
    ``call_id``, then a freshly generated one. Empty strings count as
    absent.

    The metadata identifier is what the call UI keys its callbacks on, so
    it must be a well-formed UUID. The payload-level identifier is an
    opaque server id and is adopted verbatim when it is a string.

    Args:
        metadata_call_id: ``metadata.call_id`` from the push, if any
        payload_call_id: top-level ``call_id`` from the push, if any

    Returns:
        The resolved identifier

    Raises:
        InvalidCallIdentifierError: If a supplied candidate is not usable
    """
    if metadata_call_id is not None and not isinstance(metadata_call_id, str):
        raise InvalidCallIdentifierError(
            "metadata call_id must be a string",
            details={"call_id": repr(metadata_call_id)},
        )

    if metadata_call_id:
        try:
            uuid.UUID(metadata_call_id)
        except ValueError as e:
            raise InvalidCallIdentifierError(
                f"metadata call_id is not a valid UUID: {metadata_call_id!r}",
                details={"call_id": metadata_call_id},
            ) from e
        return metadata_call_id

    # A non-string server id counts as absent
    if isinstance(payload_call_id, str) and payload_call_id:
        return payload_call_id

    return generate_call_id()
