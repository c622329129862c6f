#!/usr/bin/env python3
"""
Unit tests for the terminal client (client/chat/chat_client.py, client/main_client.py)
and the server command line (server/main_server.py).
"""

import logging
import unittest
from unittest.mock import Mock, AsyncMock, patch

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from client.chat.chat_client import ChatClient
from client.main_client import RelayClient
from server.main_server import build_arg_parser, config_from_args


def make_writer():
    writer = Mock()
    writer.drain = AsyncMock()
    return writer


class TestChatClient(unittest.IsolatedAsyncioTestCase):
    """Test cases for ChatClient."""

    async def asyncSetUp(self):
        self.writer = make_writer()
        self.client = ChatClient(self.writer)
        self.handler = Mock()
        self.client.set_message_handler(self.handler)

    async def test_send_line_appends_newline(self):
        self.assertTrue(await self.client.send_chat("hello"))
        self.writer.write.assert_called_once_with(b"hello\n")
        self.writer.drain.assert_awaited_once()

    async def test_send_commands(self):
        await self.client.send_rename("Alice")
        await self.client.send_quit()
        self.assertEqual(
            [c.args[0] for c in self.writer.write.call_args_list],
            [b"/u Alice\n", b"/q\n"]
        )

    async def test_send_without_connection(self):
        client = ChatClient()
        self.assertFalse(await client.send_chat("hello"))

    async def test_send_failure_returns_false(self):
        self.writer.drain.side_effect = ConnectionResetError("gone")
        self.assertFalse(await self.client.send_chat("hello"))

    async def test_presence_updates_count(self):
        await self.client.handle_line(b"/online 4\n")
        self.assertEqual(self.client.online_count, 4)
        self.handler.assert_called_once_with("[ONLINE] 4 user(s) connected")

    async def test_plain_line_is_displayed(self):
        await self.client.handle_line(b"Alice: hi\n")
        self.handler.assert_called_once_with("Alice: hi")
        self.assertIsNone(self.client.online_count)


class TestRelayClient(unittest.IsolatedAsyncioTestCase):
    """Test cases for RelayClient input handling."""

    async def asyncSetUp(self):
        self.client = RelayClient(username="Alice")
        self.writer = make_writer()
        self.client.chat_client.set_writer(self.writer)

    async def test_send_input_forwards_chat(self):
        self.assertTrue(await self.client.send_input("hello\n"))
        self.writer.write.assert_called_once_with(b"hello\n")

    async def test_blank_input_is_skipped(self):
        self.assertTrue(await self.client.send_input("   \n"))
        self.writer.write.assert_not_called()

    async def test_quit_input_stops(self):
        self.assertFalse(await self.client.send_input("/q\n"))
        self.writer.write.assert_called_once_with(b"/q\n")

    async def test_connect_gives_up_after_retries(self):
        self.client.config.port = 1
        self.client.config.host = '127.0.0.1'
        self.assertFalse(await self.client.connect(retry_count=2, base_delay=0))

    async def test_connect_retries_from_config(self):
        self.client.config.retry_attempts = 4
        self.client.config.retry_delay_base = 0
        refused = AsyncMock(side_effect=ConnectionRefusedError("refused"))

        with patch('client.main_client.asyncio.open_connection', refused):
            self.assertFalse(await self.client.connect())

        self.assertEqual(refused.await_count, 4)


class TestServerCommandLine(unittest.TestCase):
    """Test cases for server argument parsing."""

    def test_defaults(self):
        config = config_from_args(build_arg_parser().parse_args([]))
        self.assertTrue(config.enable_websocket)
        self.assertFalse(config.close_on_unsupported_payload)
        self.assertEqual(config.log_level, logging.INFO)

    def test_overrides(self):
        args = build_arg_parser().parse_args([
            '--port', '7000', '--no-websocket', '--close-on-unsupported',
            '--default-username', 'dork', '--log-level', 'DEBUG'
        ])
        config = config_from_args(args)
        self.assertEqual(config.port, 7000)
        self.assertFalse(config.enable_websocket)
        self.assertTrue(config.close_on_unsupported_payload)
        self.assertEqual(config.default_username, 'dork')
        self.assertEqual(config.log_level, logging.DEBUG)
        self.assertNotIn('ws_port', config.get_connection_info())


if __name__ == '__main__':
    unittest.main()
