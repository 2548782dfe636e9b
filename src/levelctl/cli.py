"""Command-line interface for the levelctl daemon.

Provides the main entry point: load settings, configure logging, build
the device backend and session server, wire process signals to the
shutdown token, and run the listener supervisor until shutdown.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="levelctl",
        description="Remote volume and brightness control daemon",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/levelctl.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    subparsers.add_parser("serve", help="Run the WebSocket control server (default)")

    return parser.parse_args(argv)


def install_signal_handlers(shutdown) -> None:
    """Trip ``shutdown`` on SIGINT / SIGTERM."""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown.trip)
        except (NotImplementedError, RuntimeError):
            # No loop signal support (Windows, non-main thread)
            signal.signal(sig, lambda signum, frame: shutdown.trip())


async def _serve(settings, shutdown=None) -> None:
    """Initialize all components and run the supervisor."""
    from levelctl.device import create_device_controller
    from levelctl.server.address import fixed_address, resolve_primary_ipv4
    from levelctl.server.app import create_app
    from levelctl.server.session import SessionHandler
    from levelctl.server.shutdown import ShutdownToken
    from levelctl.server.supervisor import ListenerSupervisor

    if shutdown is None:
        shutdown = ShutdownToken()
        install_signal_handlers(shutdown)

    dev = settings.device
    controller = create_device_controller(
        dev.backend,
        backlight_device=dev.backlight_device,
        pactl_command=dev.pactl_command,
        sink=dev.sink,
    )

    srv = settings.server
    resolver = fixed_address(srv.host) if srv.host else resolve_primary_ipv4

    async with controller:
        app = create_app(SessionHandler(controller), path=srv.path)
        supervisor = ListenerSupervisor(
            app,
            shutdown,
            resolver,
            port=srv.port,
            path=srv.path,
            heartbeat_interval=settings.supervisor.heartbeat_interval,
            restart_backoff=settings.supervisor.restart_backoff,
        )
        await supervisor.run()


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the levelctl CLI."""
    args = parse_args(argv)

    from levelctl.config.settings import load_settings
    from levelctl.server.address import AddressResolutionError
    from levelctl.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    command = args.command or "serve"
    if command == "serve":
        logger.info("Starting levelctl daemon (backend=%s)", settings.device.backend)
        try:
            asyncio.run(_serve(settings))
        except AddressResolutionError as e:
            logger.critical("Cannot start server: %s", e)
            return EXIT_FATAL
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
