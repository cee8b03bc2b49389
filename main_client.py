#!/usr/bin/env python3
"""
Chat Relay Client - Console Entry Point

Usage:
    python main_client.py NICKNAME [--server HOST] [--port PORT]
"""

import argparse
import asyncio
import sys

from common.constants import DEFAULT_HOST, DEFAULT_PORT
from client.main_client import ConsoleClient
from client.utils.config import ClientConfig


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Chat Relay console client')
    parser.add_argument('nickname', nargs='?', default=None,
                        help='Nickname to register (prompted if omitted)')
    parser.add_argument('--server', type=str, default=DEFAULT_HOST,
                        help=f'Server address (default: {DEFAULT_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'Server TCP port (default: {DEFAULT_PORT})')
    args = parser.parse_args(argv)

    nickname = args.nickname or input("Enter nickname: ").strip()
    client = ConsoleClient(ClientConfig(args.server, args.port, nickname))
    try:
        asyncio.run(client.interactive_mode())
    except KeyboardInterrupt:
        print("\n[INFO] Client terminated")
    return 0


if __name__ == "__main__":
    sys.exit(main())
