"""VoIP push-to-telephony bridge."""

__version__ = "0.1.0"
