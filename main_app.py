#!/usr/bin/env python3
"""
Chat Relay - Client Window Launcher
"""

import sys
import os
import argparse
from PyQt6.QtWidgets import QApplication

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from common.constants import DEFAULT_HOST, DEFAULT_PORT
from client.ui.client_gui import ClientMainWindow


def main():
    """Main entry point for the application."""
    parser = argparse.ArgumentParser(
        description='Chat Relay client window',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Connect to local server
  python main_app.py

  # Connect to remote server
  python main_app.py --server 192.168.1.100 --port 12345 --nickname Alice
        """
    )
    parser.add_argument('--server', type=str, default=DEFAULT_HOST,
                        help=f'Server IP address (default: {DEFAULT_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'Server TCP port (default: {DEFAULT_PORT})')
    parser.add_argument('--nickname', type=str, default='',
                        help='Nickname to prefill')
    args = parser.parse_args()

    app = QApplication(sys.argv)
    app.setApplicationName("Chat Relay")

    window = ClientMainWindow(
        server_host=args.server,
        server_port=args.port,
        nickname=args.nickname
    )
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
