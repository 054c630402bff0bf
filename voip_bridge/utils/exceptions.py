"""Custom exceptions for the VoIP bridge."""


class VoipBridgeError(Exception):
    """Base exception for all VoIP bridge errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class MalformedPayloadError(VoipBridgeError):
    """Push payload is missing required structure.

    Raised when the payload or its nested metadata is not a mapping.
    The notification is dropped without presenting a call.
    """

    pass


class UnresumableActivityError(VoipBridgeError):
    """Resumed activity cannot be turned into a call.

    Raised when the handle object or the video flag is missing,
    or when the handle cannot be decrypted.
    """

    pass


class InvalidCallIdentifierError(VoipBridgeError):
    """Supplied call identifier is not well formed.

    Raised instead of guessing an identifier, so a presented call can
    always be matched by the call UI's callbacks.
    """

    pass


class TokenForwardError(VoipBridgeError):
    """Push token could not be handed to the registration collaborator."""

    pass
