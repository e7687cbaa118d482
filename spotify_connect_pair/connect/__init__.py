"""
Spotify Connect Zeroconf module.

Handles the getInfo/addUser pairing exchange and mDNS browsing.
"""

from .client import ZeroconfClient, add_user, get_device_info, interpret_status
from .discovery import DiscoveredDevice, ZeroconfDiscovery
from .exceptions import (
    CommunicationError,
    DecodeError,
    PairingError,
    ProtocolRejection,
    TransportError,
)
from .form import decode_form, encode_form
from .identity import DEVICE_LABEL, device_id, login_id
from .types import ACCEPTED_STATUS_STRINGS, AddUserRequest, DeviceInfo, ProtocolOutcome

__all__ = [
    "ZeroconfClient",
    "get_device_info",
    "add_user",
    "interpret_status",
    "DiscoveredDevice",
    "ZeroconfDiscovery",
    "PairingError",
    "CommunicationError",
    "TransportError",
    "DecodeError",
    "ProtocolRejection",
    "encode_form",
    "decode_form",
    "DEVICE_LABEL",
    "device_id",
    "login_id",
    "ACCEPTED_STATUS_STRINGS",
    "AddUserRequest",
    "DeviceInfo",
    "ProtocolOutcome",
]
