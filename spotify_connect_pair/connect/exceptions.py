"""
Zeroconf pairing exceptions.
"""

from typing import Any, Optional


class PairingError(Exception):
    """Base class for Zeroconf pairing errors."""

    pass


class CommunicationError(PairingError):
    """
    The protocol exchange with the device could not be completed.

    Raised for both transport and decode failures, so callers can tell
    "could not talk to the device" apart from "device said no".
    """

    def __init__(self, base_url: str, cause: Optional[BaseException] = None):
        message = f"Could not complete exchange with {base_url}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
        self.base_url = base_url
        self.cause = cause


class TransportError(CommunicationError):
    """Network-level failure reaching the device."""

    pass


class DecodeError(CommunicationError):
    """Response body is not valid JSON or lacks the required structure."""

    pass


class ProtocolRejection(PairingError):
    """The device answered but reported a non-success status."""

    def __init__(self, payload: str, response: Any = None):
        super().__init__(f"Device rejected the request: {payload}")
        self.payload = payload
        self.response = response
