"""
Zeroconf pairing client.

Implements the controller side of the Spotify Connect Zeroconf protocol:
querying a device with getInfo and handing it an encrypted credential
blob with addUser.
"""

import asyncio
import json
import logging
from typing import Any, Optional

import aiohttp

from .exceptions import DecodeError, ProtocolRejection, TransportError
from .form import encode_form
from .types import AddUserRequest, DeviceInfo, ProtocolOutcome

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 10.0
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def interpret_status(response: Any) -> ProtocolOutcome:
    """
    Interpret a decoded addUser response.

    Args:
        response: Decoded JSON response

    Returns:
        Successful outcome

    Raises:
        ProtocolRejection: If statusString is absent or not an accepted value
    """
    outcome = ProtocolOutcome.from_response(response)
    if not outcome.success:
        raise ProtocolRejection(outcome.payload, response)
    return outcome


class ZeroconfClient:
    """
    Stateless Zeroconf protocol client.

    Every call opens its own HTTP session and performs exactly one round
    trip. Nothing is retried; retry policy belongs to the caller.
    """

    def __init__(self, timeout: float = REQUEST_TIMEOUT_SECONDS):
        """
        Initialize client.

        Args:
            timeout: Total transport timeout per request in seconds
        """
        self.timeout = timeout

    async def get_device_info(self, base_url: str) -> DeviceInfo:
        """
        Query device identity and capabilities.

        Args:
            base_url: Device Zeroconf endpoint, e.g. http://192.168.1.20:4070/zc

        Returns:
            Device information as reported by the device

        Raises:
            TransportError: If the device cannot be reached
            DecodeError: If the response is not a valid getInfo document
        """
        body = await self._request("GET", base_url, params={"action": "getInfo"})

        try:
            info = DeviceInfo.from_dict(self._decode(body))
        except ValueError as e:
            raise DecodeError(base_url, e) from e

        logger.debug(f"getInfo from {base_url}: {info.remote_name} ({info.device_id})")
        return info

    async def add_user(
        self,
        base_url: str,
        username: str,
        blob: str,
        client_key: str,
        token_type: Optional[str] = None,
    ) -> ProtocolOutcome:
        """
        Authorize a user on the device with an encrypted blob.

        Each call generates a new login id, so repeated calls are separate
        login attempts on the device.

        Args:
            base_url: Device Zeroconf endpoint
            username: Spotify username
            blob: Encrypted credential blob (base64)
            client_key: This client's public key (base64)
            token_type: Token type requested by the device, if any

        Returns:
            Successful outcome

        Raises:
            TransportError: If the device cannot be reached
            DecodeError: If the response is not JSON
            ProtocolRejection: If the device reports a failure status
        """
        request = AddUserRequest.build(username, blob, client_key, token_type)
        body = await self._request(
            "POST",
            base_url,
            data=encode_form(request.pairs()),
            headers={"Content-Type": FORM_CONTENT_TYPE},
        )

        try:
            response = self._decode(body)
        except ValueError as e:
            raise DecodeError(base_url, e) from e

        try:
            outcome = interpret_status(response)
        except ProtocolRejection as e:
            logger.warning(f"addUser rejected by {base_url}: {e.payload}")
            raise

        logger.info(f"Added user {username} on {base_url} ({outcome.status_string})")
        return outcome

    async def _request(
        self,
        method: str,
        base_url: str,
        params: Optional[dict[str, str]] = None,
        data: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> bytes:
        """Perform one HTTP round trip and return the raw body, whatever the status."""
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(
                    method, base_url, params=params, data=data, headers=headers
                ) as resp:
                    logger.debug(f"{method} {base_url} -> {resp.status}")
                    return await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise TransportError(base_url, e) from e

    @staticmethod
    def _decode(body: bytes) -> Any:
        """
        Decode a JSON response body.

        Raises:
            ValueError: If the body is not strict JSON or nests too deeply
        """
        try:
            return json.loads(body.decode("utf-8"), parse_constant=_reject_constant)
        except RecursionError as e:
            raise ValueError("JSON nesting too deep") from e


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON
    raise ValueError(f"invalid JSON constant {name}")


def _ensure_no_running_loop(operation: str) -> None:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return
    raise RuntimeError(
        f"{operation}() blocks and cannot run inside an event loop; "
        f"await ZeroconfClient.{operation}() instead"
    )


def get_device_info(base_url: str, timeout: float = REQUEST_TIMEOUT_SECONDS) -> DeviceInfo:
    """
    Blocking getInfo, run on a private event loop.

    Must not be called from a thread with a running event loop.

    Raises:
        RuntimeError: If called from inside a running event loop
    """
    _ensure_no_running_loop("get_device_info")
    return asyncio.run(ZeroconfClient(timeout).get_device_info(base_url))


def add_user(
    base_url: str,
    username: str,
    blob: str,
    client_key: str,
    token_type: Optional[str] = None,
    timeout: float = REQUEST_TIMEOUT_SECONDS,
) -> ProtocolOutcome:
    """
    Blocking addUser, run on a private event loop.

    Must not be called from a thread with a running event loop.

    Raises:
        RuntimeError: If called from inside a running event loop
    """
    _ensure_no_running_loop("add_user")
    return asyncio.run(
        ZeroconfClient(timeout).add_user(base_url, username, blob, client_key, token_type)
    )
