"""Push token lifecycle forwarding."""

import threading

from voip_bridge.core.ports import TokenSink
from voip_bridge.utils.exceptions import TokenForwardError
from voip_bridge.utils.logging import get_logger

logger = get_logger(__name__)


def encode_token(token: bytes | str) -> str:
    """Hex-encode raw token bytes; strings pass through unchanged.

    Raises:
        TypeError: If the token is neither bytes nor a string
    """
    if isinstance(token, (bytes, bytearray)):
        return token.hex()
    if isinstance(token, str):
        return token
    raise TypeError(f"push token must be bytes or str, not {type(token).__name__}")


class TokenForwarder:
    """Owns the device push token and relays changes to the registration sink."""

    def __init__(self, sink: TokenSink):
        self._sink = sink
        self._lock = threading.Lock()
        # Serializes writers so the sink sees tokens in the order they were stored
        self._forward_lock = threading.Lock()
        self._token = ""

    @property
    def token(self) -> str:
        """Current push token, empty when none is registered."""
        with self._lock:
            return self._token

    def on_token_updated(self, token: bytes | str) -> None:
        """Replace the push token and forward it.

        Raises:
            TypeError: If the token is neither bytes nor a string
            TokenForwardError: If the sink rejects the token
        """
        self._replace(encode_token(token))

    def on_token_invalidated(self) -> None:
        """Clear the push token and forward the empty value.

        Raises:
            TokenForwardError: If the sink rejects the update
        """
        self._replace("")

    def _replace(self, token: str) -> None:
        with self._forward_lock:
            with self._lock:
                self._token = token
            logger.info("push_token_updated", token_length=len(token))

            try:
                self._sink.report_push_token(token)
            except TokenForwardError:
                raise
            except Exception as e:
                logger.error("push_token_forward_failed", error=str(e))
                raise TokenForwardError(
                    "push token could not be forwarded",
                    details={"error": str(e)},
                ) from e
