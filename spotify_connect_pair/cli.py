"""
spotify-connect-pair CLI entry point.

Provides command-line access to mDNS browsing and the Zeroconf
getInfo/addUser exchange.
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

from spotify_connect_pair import __version__
from spotify_connect_pair.config import Config, ConfigError, _set_nested, load_config
from spotify_connect_pair.connect import (
    CommunicationError,
    DeviceInfo,
    ProtocolRejection,
    ZeroconfClient,
    ZeroconfDiscovery,
)

logger = logging.getLogger(__name__)

# Exit codes
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1
EXIT_REJECTED = 2
EXIT_NETWORK_ERROR = 3


def setup_logging(level: str = "info") -> None:
    """Configure logging to stdout."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="spotify-connect-pair",
        description="Query and pair Spotify Connect devices over Zeroconf",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  spotify-connect-pair --discover
  spotify-connect-pair --url http://192.168.1.20:4070/zc
  spotify-connect-pair --url http://192.168.1.20:4070/zc --add-user \\
      --username alice --blob BLOB --client-key KEY --token-type accesstoken

Environment Variables:
  SPOTIFY_PAIR_URL, SPOTIFY_PAIR_HOST, SPOTIFY_PAIR_PORT, SPOTIFY_PAIR_PATH
  SPOTIFY_PAIR_TIMEOUT, SPOTIFY_PAIR_TOKEN_TYPE, SPOTIFY_PAIR_LOG_LEVEL
""",
    )

    # General
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Discovery mode
    parser.add_argument(
        "--discover",
        action="store_true",
        help="Browse the network for Spotify Connect devices and exit",
    )
    parser.add_argument(
        "--discover-timeout",
        type=float,
        metavar="SECONDS",
        help="Browse duration in seconds (default: 3)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output as JSON",
    )

    # Configuration
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("./config.yaml"),
        metavar="PATH",
        help="Path to config file (default: ./config.yaml)",
    )

    # Device
    device_group = parser.add_argument_group("Device")
    device_group.add_argument(
        "--url",
        metavar="URL",
        help="Device Zeroconf endpoint URL",
    )
    device_group.add_argument(
        "--host",
        metavar="TEXT",
        help="Device IP address or hostname",
    )
    device_group.add_argument(
        "--port",
        type=int,
        metavar="INT",
        help="Device Zeroconf port",
    )
    device_group.add_argument(
        "--path",
        metavar="TEXT",
        help="Device Zeroconf path (default: /)",
    )
    device_group.add_argument(
        "--timeout",
        "-t",
        type=float,
        metavar="SECONDS",
        help="Request timeout in seconds (default: 10)",
    )

    # addUser
    add_group = parser.add_argument_group("Add user")
    add_group.add_argument(
        "--add-user",
        action="store_true",
        help="Send addUser instead of getInfo",
    )
    add_group.add_argument("--username", metavar="TEXT", help="Spotify username")
    add_group.add_argument("--blob", metavar="TEXT", help="Encrypted credential blob")
    add_group.add_argument("--client-key", metavar="TEXT", help="Client public key")
    add_group.add_argument(
        "--token-type",
        metavar="TEXT",
        help="tokenType to send (omitted if not set)",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        metavar="LEVEL",
        help="Log level: debug, info, warning, error",
    )

    return parser


def parse_args(argv: Any = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)


def args_to_dict(args: argparse.Namespace) -> dict:
    """Convert argparse namespace to nested config dict."""
    result: dict = {}

    mappings = {
        "url": ("device", "url"),
        "host": ("device", "host"),
        "port": ("device", "port"),
        "path": ("device", "path"),
        "timeout": ("zeroconf", "timeout"),
        "token_type": ("zeroconf", "token_type"),
        "discover_timeout": ("discovery", "timeout"),
        "log_level": ("logging", "level"),
    }

    for arg_name, path in mappings.items():
        value = getattr(args, arg_name, None)
        if value is None:
            continue
        _set_nested(result, path, value)

    return result


def format_device_info(info: DeviceInfo) -> str:
    """Human-readable getInfo summary."""
    lines = [
        f"  Name: {info.remote_name}",
        f"  Device ID: {info.device_id}",
        f"  Active user: {info.active_user or '-'}",
    ]
    if info.token_type:
        lines.append(f"  Token type: {info.token_type}")
    if info.client_id:
        lines.append(f"  Client ID: {info.client_id}")
    if info.scope:
        lines.append(f"  Scope: {info.scope}")
    return "\n".join(lines)


async def run_discovery(timeout: float, json_output: bool) -> int:
    """
    Browse for Spotify Connect devices.

    Args:
        timeout: Browse duration in seconds
        json_output: Output as JSON if True

    Returns:
        Exit code
    """
    if not json_output:
        print(f"Browsing for Spotify Connect devices ({timeout}s)...")

    discovery = ZeroconfDiscovery()
    devices = await discovery.discover(timeout=timeout)

    if json_output:
        output = {
            "devices": [{**asdict(d), "url": d.base_url} for d in devices],
            "count": len(devices),
        }
        print(json.dumps(output, indent=2))
        return EXIT_SUCCESS

    if not devices:
        print("\nNo Spotify Connect devices found.")
        print("\nTroubleshooting tips:")
        print("  - Ensure the device is powered on and on the same network")
        print("  - Try increasing the browse time with --discover-timeout 10")
        return EXIT_SUCCESS

    print(f"\nFound {len(devices)} device(s):\n")
    for d in devices:
        print(f"  {d.name}")
        print(f"    URL: {d.base_url}")
        print()

    return EXIT_SUCCESS


async def run_get_info(client: ZeroconfClient, base_url: str, json_output: bool) -> int:
    """Query a device with getInfo and print the result."""
    info = await client.get_device_info(base_url)
    if json_output:
        print(json.dumps(asdict(info), indent=2))
    else:
        print(f"Device at {base_url}:")
        print(format_device_info(info))
    return EXIT_SUCCESS


async def run_add_user(
    client: ZeroconfClient, base_url: str, args: argparse.Namespace, config: Config
) -> int:
    """Send addUser and print the outcome."""
    outcome = await client.add_user(
        base_url,
        username=args.username,
        blob=args.blob,
        client_key=args.client_key,
        token_type=config.zeroconf.token_type or None,
    )
    if args.json_output:
        print(outcome.payload)
    else:
        print(f"User {args.username} added ({outcome.status_string})")
    return EXIT_SUCCESS


def run_device(args: argparse.Namespace) -> int:
    """
    Run getInfo or addUser against the configured device.

    Returns:
        Exit code
    """
    try:
        config = load_config(args.config, args_to_dict(args))
        setup_logging(config.logging.level)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR

    if args.add_user:
        missing = [
            flag
            for flag, value in (
                ("--username", args.username),
                ("--blob", args.blob),
                ("--client-key", args.client_key),
            )
            if not value
        ]
        if missing:
            logger.error(f"--add-user requires {', '.join(missing)}")
            return EXIT_CONFIG_ERROR

    base_url = config.device.base_url
    client = ZeroconfClient(timeout=config.zeroconf.timeout)

    try:
        if args.add_user:
            return asyncio.run(run_add_user(client, base_url, args, config))
        return asyncio.run(run_get_info(client, base_url, args.json_output))

    except ProtocolRejection as e:
        logger.error(f"Device rejected the request: {e.payload}")
        return EXIT_REJECTED

    except CommunicationError as e:
        logger.error(str(e))
        return EXIT_NETWORK_ERROR

    except KeyboardInterrupt:
        logger.info("Interrupted")
        return EXIT_SUCCESS


def main(argv: Any = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code: 0=success, 1=config error, 2=rejected, 3=network error
    """
    args = parse_args(argv)
    setup_logging(args.log_level or "info")

    if args.discover:
        try:
            config = load_config(args.config, args_to_dict(args), require_device=False)
        except ConfigError as e:
            logger.error(f"Configuration error: {e}")
            return EXIT_CONFIG_ERROR
        return asyncio.run(run_discovery(config.discovery.timeout, args.json_output))

    return run_device(args)


if __name__ == "__main__":
    sys.exit(main())
