#!/usr/bin/env python3
"""
Chat Relay Server - Main Entry Point

Runs the relay either headless with an admin console on stdin, or with the
PyQt6 admin window.

Usage:
    python main_server.py

Optional arguments:
    --host HOST             Bind address (default: 0.0.0.0)
    --port PORT             TCP port (default: 12345)
    --idle-timeout SECONDS  Drop clients silent for this long (default: never)
    --logs-dir DIR          Directory for the chat transcript (default: logs)
    --gui                   Open the admin window instead of the console
    --no-console            Headless without reading admin commands
    --debug                 Verbose logging
"""

import argparse
import asyncio
import logging
import sys

from common.constants import DEFAULT_SERVER_HOST, DEFAULT_PORT, LOG_DIR
from server.control.admin_console import AdminConsole
from server.main_server import ChatRelayServer
from server.utils.config import ServerConfig
from server.utils.logger import logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Chat Relay Server')
    parser.add_argument('--host', type=str, default=DEFAULT_SERVER_HOST,
                        help=f'Host to bind to (default: {DEFAULT_SERVER_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'TCP port (default: {DEFAULT_PORT})')
    parser.add_argument('--idle-timeout', type=float, default=None,
                        help='Seconds of silence before a client is dropped (default: never)')
    parser.add_argument('--logs-dir', type=str, default=LOG_DIR,
                        help=f'Directory for the chat transcript (default: {LOG_DIR})')
    parser.add_argument('--gui', action='store_true',
                        help='Open the PyQt6 admin window')
    parser.add_argument('--no-console', action='store_true',
                        help='Do not read admin commands from stdin')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug logging')
    return parser


async def run_headless(server, with_console: bool) -> bool:
    """Serve until stopped; optionally drive the server from stdin."""
    if not await server.start():
        return False

    console_task = None
    if with_console:
        console_task = asyncio.create_task(AdminConsole(server).run())
    try:
        await server.wait_stopped()
    finally:
        if server.is_running:
            await server.stop()
        if console_task is not None and not console_task.done():
            console_task.cancel()
    return True


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.debug:
        logger.set_level(logging.DEBUG)
    config = ServerConfig(
        host=args.host,
        port=args.port,
        idle_timeout=args.idle_timeout,
        logs_dir=args.logs_dir
    )
    logger.set_logs_dir(config.get_log_settings()['logs_dir'])

    if args.gui:
        from server.ui.admin_window import main as run_admin_window
        return run_admin_window(config)

    server = ChatRelayServer(config)
    try:
        ok = asyncio.run(run_headless(server, not args.no_console))
    except KeyboardInterrupt:
        logger.info("Server shutting down...")
        return 0
    if not ok:
        logger.error(f"Server failed to start: {server.last_error}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
