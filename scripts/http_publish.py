#!/usr/bin/env python3
"""Publish device events or state through the cloud IoT HTTP bridge.

Connects with a JWT signed by the device's private key and, by default,
publishes 100 events at a rate of one per second before exiting.  Use
``--message-type state`` to set device state instead (once every five
seconds).  Unset flags fall back to ``IOTCORE_*`` environment variables.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyiotcore import IotCoreClient, IotCoreConfig, IotCoreConfigError, IotCoreError  # noqa: E402


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="HTTP bridge device publisher.")
    parser.add_argument("--project-id", help="GCP cloud project name")
    parser.add_argument("--registry-id", help="Cloud IoT registry id")
    parser.add_argument("--device-id", help="Cloud IoT device id")
    parser.add_argument("--private-key-file", help="Path to the device's PKCS#8 private key")
    parser.add_argument("--algorithm", choices=["RS256", "ES256"], help="Encryption algorithm of the key")
    parser.add_argument("--cloud-region", help="GCP cloud region (default: us-central1)")
    parser.add_argument("--http-bridge-address", help="HTTP bridge host")
    parser.add_argument("--api-version", help="The version to use for the API call")
    parser.add_argument("--message-type", choices=["event", "state"], help="Publish events or set state")
    parser.add_argument("--num-messages", type=int, help="Number of messages to publish")
    parser.add_argument("--token-exp-minutes", type=int, help="Minutes before the JWT is refreshed")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _config_from_args(args: argparse.Namespace) -> IotCoreConfig:
    device: dict[str, str] = {}
    for field_name in ("project_id", "registry_id", "device_id", "cloud_region"):
        value = getattr(args, field_name)
        if value is not None:
            device[field_name] = value

    overrides: dict[str, Any] = {}
    for field_name in (
        "private_key_file",
        "algorithm",
        "http_bridge_address",
        "api_version",
        "message_type",
        "num_messages",
        "token_exp_minutes",
    ):
        value = getattr(args, field_name)
        if value is not None:
            overrides[field_name] = value
    return IotCoreConfig.from_env(device=device, **overrides)


async def run(args: argparse.Namespace) -> None:
    config = _config_from_args(args)
    cancel_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, cancel_event.set)

    async with IotCoreClient(config, cancel_event=cancel_event) as client:
        session = await client.publish_messages()
    print(f"Finished loop successfully after {session.messages_sent} message(s). Goodbye!")


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    try:
        asyncio.run(run(args))
    except IotCoreConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1
    except IotCoreError as exc:
        print(f"Publishing failed: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
