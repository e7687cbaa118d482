"""
Client identity values sent in the addUser request.
"""

import hashlib
import secrets

# Label identifying this client, also sent as deviceName
DEVICE_LABEL = "spotify-connect"

LOGIN_ID_BYTES = 16


def device_id(label: str = DEVICE_LABEL) -> str:
    """
    Derive the stable device identifier for a label.

    Some devices remember this id per pairing, so it must not change
    between runs.

    Args:
        label: Advertised service label

    Returns:
        Lowercase hex SHA-1 digest of the UTF-8 label
    """
    return hashlib.sha1(label.encode("utf-8")).hexdigest()


def login_id() -> str:
    """Generate a fresh hex-encoded 16-byte login nonce."""
    return secrets.token_hex(LOGIN_ID_BYTES)
