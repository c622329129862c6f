"""
Chat client module.

This module handles client-side chat messaging functionality.
"""

import asyncio
from typing import Optional, Callable

from common.protocol_definitions import (
    encode_line, strip_line_terminator, parse_presence,
    create_rename_command, create_quit_command
)


class ChatClient:
    """Client-side chat functionality."""

    def __init__(self, writer: Optional[asyncio.StreamWriter] = None):
        self.writer = writer
        self.message_handler: Optional[Callable] = print
        self.online_count: Optional[int] = None

    def set_writer(self, writer: asyncio.StreamWriter):
        """Set the writer for sending messages."""
        self.writer = writer

    def set_message_handler(self, handler: Callable):
        """Set the handler that displays incoming lines."""
        self.message_handler = handler

    async def send_line(self, text: str) -> bool:
        """Send one raw line to the server."""
        if not self.writer:
            print("[ERROR] Not connected to server")
            return False

        try:
            self.writer.write(encode_line(text).encode('utf-8'))
            await self.writer.drain()
            return True
        except Exception as e:
            print(f"[ERROR] Failed to send message: {e}")
            return False

    async def send_chat(self, message: str) -> bool:
        """Send a chat message."""
        return await self.send_line(message)

    async def send_rename(self, username: str) -> bool:
        """Ask the server to change our display name."""
        return await self.send_line(create_rename_command(username))

    async def send_quit(self) -> bool:
        """Ask the server to end the session."""
        return await self.send_line(create_quit_command())

    async def handle_line(self, data: bytes):
        """Handle one line from the server."""
        line = strip_line_terminator(data.decode('utf-8', errors='replace'))

        count = parse_presence(line)
        if count is not None:
            self.online_count = count
            self.message_handler(f"[ONLINE] {count} user(s) connected")
            return

        self.message_handler(line)
