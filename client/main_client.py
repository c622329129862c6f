#!/usr/bin/env python3
"""
Text Relay Client - Main Entry Point

Terminal client for the TCP line protocol: stdin lines go to the server,
server lines are printed.
"""

import asyncio
import argparse
import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from client.chat.chat_client import ChatClient
from client.utils.config import ClientConfig
from client.utils.logger import logger
from common.constants import DEFAULT_HOST, DEFAULT_PORT, MessageKinds
from common.protocol_definitions import classify_line


class RelayClient:
    """Main client class."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, username: str = None):
        self.config = ClientConfig(host, port, username)
        self.reader = None
        self.writer = None
        self.running = False
        self.chat_client = ChatClient()

    async def connect(self, retry_count: int = None, base_delay: float = None):
        """Establish connection to the server with retry logic and exponential backoff."""
        if retry_count is None:
            retry_count = self.config.retry_attempts
        if base_delay is None:
            base_delay = self.config.retry_delay_base
        attempt = 0

        while attempt < retry_count:
            try:
                self.reader, self.writer = await asyncio.open_connection(self.config.host, self.config.port)
                logger.log_connection(self.config.host, self.config.port, True)
                self.running = True
                self.chat_client.set_writer(self.writer)
                return True
            except OSError as e:
                attempt += 1
                logger.log_connection(self.config.host, self.config.port, False)
                logger.log_error("connection", e)

                if attempt < retry_count:
                    delay = base_delay * (2 ** (attempt - 1))
                    logger.info(f"[INFO] Retrying connection in {delay}s (attempt {attempt}/{retry_count})...")
                    await asyncio.sleep(delay)
                else:
                    logger.error(f"[ERROR] Failed to connect after {retry_count} attempts")
        return False

    async def listen_for_messages(self):
        """Print server lines until the connection ends."""
        try:
            while self.running:
                data = await self.reader.readline()
                if not data:
                    logger.info("[INFO] Server closed the connection")
                    break
                await self.chat_client.handle_line(data)
        except (ConnectionError, asyncio.IncompleteReadError) as e:
            logger.log_error("receive", e)
        finally:
            self.running = False

    async def send_input(self, line: str) -> bool:
        """Forward one input line. Returns False once the user quits."""
        text = line.rstrip('\r\n')
        if not text.strip():
            return True
        await self.chat_client.send_line(text)
        return classify_line(text).kind != MessageKinds.QUIT

    async def close(self):
        """Close the connection."""
        self.running = False
        if self.writer:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except (ConnectionError, OSError):
                pass
            self.writer = None

    async def interactive_mode(self):
        """Run client with interactive chat input."""
        if not await self.connect():
            return

        if self.config.username:
            await self.chat_client.send_rename(self.config.username)

        listener_task = asyncio.create_task(self.listen_for_messages())
        logger.show_interactive_mode_info()

        quit_sent = False
        loop = asyncio.get_running_loop()
        try:
            while self.running:
                user_input = await loop.run_in_executor(None, sys.stdin.readline)
                if not user_input:
                    break
                if not await self.send_input(user_input):
                    quit_sent = True
                    break
        except asyncio.CancelledError:
            pass
        finally:
            if self.running and not quit_sent:
                await self.chat_client.send_quit()
            listener_task.cancel()
            try:
                await listener_task
            except asyncio.CancelledError:
                pass
            await self.close()
            logger.info("[INFO] Disconnected from server")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description='Text Relay Client')
    parser.add_argument('--username', type=str, default=None,
                        help='Display name to set after connecting')
    parser.add_argument('--server-ip', type=str, default=DEFAULT_HOST,
                        help=f'Server IP address (default: {DEFAULT_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'Server TCP port (default: {DEFAULT_PORT})')
    args = parser.parse_args()

    client = RelayClient(host=args.server_ip, port=args.port, username=args.username)
    try:
        asyncio.run(client.interactive_mode())
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted by user")


if __name__ == "__main__":
    main()
