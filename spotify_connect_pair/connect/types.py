"""
Shared types for the Zeroconf pairing protocol.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional

from .identity import DEVICE_LABEL, device_id, login_id

# statusString values meaning success, from different firmware generations
ACCEPTED_STATUS_STRINGS = ("ERROR-OK", "OK")


def _require_str(data: dict[str, Any], key: str) -> str:
    if key not in data:
        raise ValueError(f"missing field '{key}'")
    value = data[key]
    if not isinstance(value, str):
        raise ValueError(f"field '{key}' must be a string, got {type(value).__name__}")
    return value


def _optional_str(data: dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"field '{key}' must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class DeviceInfo:
    """Device identity and capabilities reported by getInfo."""

    device_id: str
    remote_name: str
    public_key: str  # Opaque here, consumed by the blob crypto
    active_user: Optional[str] = None
    # Requested by firmware 2.9.0 and later, absent on older devices
    token_type: Optional[str] = None
    client_id: Optional[str] = None
    scope: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "DeviceInfo":
        """
        Build from a decoded getInfo response.

        Unknown fields are ignored. Values are kept exactly as reported.

        Raises:
            ValueError: If the response is not an object or a required
                field is missing or not a string
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")

        return cls(
            device_id=_require_str(data, "deviceID"),
            remote_name=_require_str(data, "remoteName"),
            public_key=_require_str(data, "publicKey"),
            active_user=_optional_str(data, "activeUser"),
            token_type=_optional_str(data, "tokenType"),
            client_id=_optional_str(data, "clientId"),
            scope=_optional_str(data, "scope"),
        )


@dataclass(frozen=True)
class AddUserRequest:
    """Fields of an addUser request, kept in wire order."""

    username: str
    blob: str
    client_key: str
    device_id: str
    login_id: str
    device_name: str = DEVICE_LABEL
    token_type: Optional[str] = None

    @classmethod
    def build(
        cls,
        username: str,
        blob: str,
        client_key: str,
        token_type: Optional[str] = None,
    ) -> "AddUserRequest":
        """Create a request with this client's device id and a fresh login id."""
        return cls(
            username=username,
            blob=blob,
            client_key=client_key,
            device_id=device_id(),
            login_id=login_id(),
            token_type=token_type,
        )

    def pairs(self) -> list[tuple[str, str]]:
        """Return the form fields in the order devices expect them."""
        fields = [
            ("action", "addUser"),
            ("userName", self.username),
            ("blob", self.blob),
            ("clientKey", self.client_key),
            ("deviceId", self.device_id),
            ("deviceName", self.device_name),
            ("loginId", self.login_id),
        ]
        if self.token_type is not None:
            fields.append(("tokenType", self.token_type))
        return fields


@dataclass(frozen=True)
class ProtocolOutcome:
    """Interpretation of an addUser response."""

    success: bool
    status_string: Optional[str]
    payload: str  # Full response rendered back to JSON text
    response: Any = None

    @classmethod
    def from_response(cls, response: Any) -> "ProtocolOutcome":
        """Interpret a decoded addUser response."""
        status = response.get("statusString") if isinstance(response, dict) else None
        if not isinstance(status, str):
            status = None
        return cls(
            success=status in ACCEPTED_STATUS_STRINGS,
            status_string=status,
            payload=json.dumps(response, separators=(",", ":"), ensure_ascii=False),
            response=response,
        )
