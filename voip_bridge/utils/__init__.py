"""Utility modules."""

from voip_bridge.utils.exceptions import (
    InvalidCallIdentifierError,
    MalformedPayloadError,
    TokenForwardError,
    UnresumableActivityError,
    VoipBridgeError,
)
from voip_bridge.utils.logging import get_logger, setup_logging

__all__ = [
    "VoipBridgeError",
    "MalformedPayloadError",
    "UnresumableActivityError",
    "InvalidCallIdentifierError",
    "TokenForwardError",
    "setup_logging",
    "get_logger",
]
