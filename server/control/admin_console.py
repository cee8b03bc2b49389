"""
Admin console module.

Reads administrator commands from standard input when the server runs
without the admin window.

Commands:
    /kick <nickname>   remove a client
    /users             list connected nicknames
    /stop              shut the server down
    /help              show this list
    anything else      broadcast as an admin line
"""

import asyncio
from typing import Callable, Optional, TextIO

from common.console_input import start_stdin_reader

from server.chat.events import ServerListener
from server.main_server import ChatRelayServer
from server.utils.logger import logger

HELP_TEXT = "Commands: /kick <nickname>, /users, /stop, /help; other text is broadcast"


class AdminConsole(ServerListener):
    """Text front end over the server's command surface."""

    def __init__(self, server: ChatRelayServer, output: Optional[Callable[[str], None]] = None,
                 stream: Optional[TextIO] = None):
        self.server = server
        self.output = output or print
        self.stream = stream
        server.add_listener(self)

    async def handle_command(self, line: str) -> bool:
        """
        Execute one console line.

        Returns False once the console should exit.
        """
        line = line.strip()
        if not line:
            return True

        if line.startswith('/'):
            command, _, arg = line[1:].partition(' ')
            command = command.lower()
            arg = arg.strip()

            if command == 'kick':
                if not arg:
                    self.output("Usage: /kick <nickname>")
                elif await self.server.kick(arg):
                    self.output(f"Kicked {arg}")
                else:
                    self.output(f"User {arg} not found")
            elif command == 'users':
                nicknames = self.server.nicknames()
                self.output(', '.join(sorted(nicknames)) if nicknames else "No users connected")
            elif command == 'stop':
                await self.server.stop()
                return False
            elif command == 'help':
                self.output(HELP_TEXT)
            else:
                self.output(f"Unknown command /{command}. {HELP_TEXT}")
            return True

        sent = await self.server.admin_broadcast(line)
        if not sent:
            self.output("Nothing sent, server is not running")
        return True

    async def run(self):
        """Read commands from stdin until EOF, /stop or server shutdown."""
        lines = start_stdin_reader(asyncio.get_running_loop(), self.stream)
        self.output(HELP_TEXT)
        while self.server.is_running:
            line = await lines.get()
            if not line:
                logger.info("Console input closed")
                break
            if not await self.handle_command(line):
                break

    def on_user_joined(self, nickname: str):
        self.output(f"+ {nickname}")

    def on_user_left(self, nickname: str):
        self.output(f"- {nickname}")
