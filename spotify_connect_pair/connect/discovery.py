"""
mDNS browsing for Spotify Connect devices.

Finds devices advertising _spotify-connect._tcp and turns them into base
URLs for the Zeroconf client.
"""

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional

from zeroconf import IPVersion, ServiceBrowser, ServiceInfo, ServiceStateChange, Zeroconf

logger = logging.getLogger(__name__)

MDNS_SERVICE_TYPE = "_spotify-connect._tcp.local."
DEFAULT_PATH = "/"
# Milliseconds to wait for a service to resolve
RESOLVE_TIMEOUT_MS = 3000


@dataclass
class DiscoveredDevice:
    """Spotify Connect device found on the network."""

    name: str
    ip: str
    port: int
    path: str = DEFAULT_PATH

    @property
    def base_url(self) -> str:
        """Zeroconf endpoint URL for this device."""
        return f"http://{self.ip}:{self.port}{self.path}"


def _decode_properties(info: ServiceInfo) -> dict[str, str]:
    props: dict[str, str] = {}
    for key, value in (info.properties or {}).items():
        k = key.decode("utf-8", errors="replace") if isinstance(key, bytes) else str(key)
        if value is None:
            props[k] = ""
        elif isinstance(value, bytes):
            props[k] = value.decode("utf-8", errors="replace")
        else:
            props[k] = str(value)
    return props


def parse_service_info(info: ServiceInfo) -> Optional[DiscoveredDevice]:
    """
    Convert a resolved mDNS service into a DiscoveredDevice.

    Returns:
        The device, or None if it has no IPv4 address
    """
    addresses = info.parsed_addresses(IPVersion.V4Only)
    if not addresses or not info.port:
        return None

    props = _decode_properties(info)
    path = props.get("CPath") or DEFAULT_PATH
    if not path.startswith("/"):
        path = "/" + path

    name = info.name
    suffix = "." + info.type
    if name.endswith(suffix):
        name = name[: -len(suffix)]

    return DiscoveredDevice(name=name, ip=addresses[0], port=info.port, path=path)


class ZeroconfDiscovery:
    """
    Browses the local network for Spotify Connect devices.

    Usage:
        discovery = ZeroconfDiscovery()
        devices = await discovery.discover(timeout=3.0)
        for device in devices:
            print(f"{device.name}: {device.base_url}")
    """

    def __init__(self) -> None:
        self._devices: dict[str, DiscoveredDevice] = {}
        self._lock = threading.Lock()

    async def discover(self, timeout: float = 3.0) -> list[DiscoveredDevice]:
        """
        Browse for devices.

        Args:
            timeout: Browse duration in seconds

        Returns:
            Devices found, sorted by name
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._browse, timeout)

    def _browse(self, timeout: float) -> list[DiscoveredDevice]:
        with self._lock:
            self._devices.clear()

        zc = Zeroconf()
        try:
            browser = ServiceBrowser(
                zc, MDNS_SERVICE_TYPE, handlers=[self._on_service_state_change]
            )
            time.sleep(timeout)
            browser.cancel()
        finally:
            zc.close()

        with self._lock:
            devices = sorted(self._devices.values(), key=lambda d: d.name.lower())
        logger.info(f"Discovered {len(devices)} Spotify Connect device(s)")
        return devices

    def _on_service_state_change(
        self,
        zeroconf: Zeroconf,
        service_type: str,
        name: str,
        state_change: ServiceStateChange,
    ) -> None:
        """ServiceBrowser callback."""
        if state_change is not ServiceStateChange.Added:
            return

        info = zeroconf.get_service_info(service_type, name, timeout=RESOLVE_TIMEOUT_MS)
        if info is None:
            logger.debug(f"Could not resolve {name}")
            return

        device = parse_service_info(info)
        if device is None:
            logger.debug(f"Ignoring {name}: no IPv4 address")
            return

        logger.debug(f"Found {device.name} at {device.base_url}")
        with self._lock:
            self._devices[name] = device
