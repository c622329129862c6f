#!/usr/bin/env python3
"""
Text Relay Server - Main Entry Point

This is the main entry point for the server application.
It binds the TCP line listener and the WebSocket listener and hands every
accepted connection to one shared chat core.
"""

import asyncio
import argparse
import logging
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import websockets

from server.chat.chat_server import ChatServer
from server.chat.registry import ConnectionRegistry
from server.transport.tcp_channel import TcpLineChannel
from server.transport.websocket_channel import WebSocketChannel
from server.utils.config import ServerConfig
from server.utils.logger import logger
from common.constants import DEFAULT_SERVER_HOST, DEFAULT_PORT, DEFAULT_WS_PORT, DEFAULT_USERNAME, LOG_DIR


class RelayServer:
    """Main server class that wires transports to the chat core."""

    def __init__(self, config: ServerConfig = None):
        self.config = config or ServerConfig()
        self.registry = ConnectionRegistry()
        self.chat_server = ChatServer(self.registry, self.config)
        self.tcp_server = None
        self.ws_server = None

    async def handle_tcp_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Handle individual TCP client connection."""
        await self.chat_server.handle_connection(TcpLineChannel(reader, writer))

    async def handle_ws_client(self, websocket):
        """Handle individual WebSocket client connection."""
        await self.chat_server.handle_connection(WebSocketChannel(websocket))

    async def open(self):
        """Bind all listeners. Bind failures propagate."""
        self.tcp_server = await asyncio.start_server(
            self.handle_tcp_client,
            self.config.host,
            self.config.port,
            limit=self.config.max_line_length
        )
        addr = ', '.join(str(sock.getsockname()) for sock in self.tcp_server.sockets)
        logger.info(f"TCP relay listening on {addr}")

        if self.config.enable_websocket:
            self.ws_server = await websockets.serve(
                self.handle_ws_client,
                self.config.host,
                self.config.ws_port,
                max_size=self.config.max_ws_message_size
            )
            addr = ', '.join(str(sock.getsockname()) for sock in self.ws_server.sockets)
            logger.info(f"WebSocket relay listening on {addr}")

    async def close(self):
        """Stop accepting connections."""
        if self.ws_server is not None:
            self.ws_server.close()
            await self.ws_server.wait_closed()
            self.ws_server = None
        if self.tcp_server is not None:
            self.tcp_server.close()
            await self.tcp_server.wait_closed()
            self.tcp_server = None

    async def start(self):
        """Start the server and serve until cancelled."""
        await self.open()
        try:
            await self.tcp_server.serve_forever()
        finally:
            await self.close()


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Text Relay Server')
    parser.add_argument('--host', type=str, default=DEFAULT_SERVER_HOST,
                        help=f'Host to bind to (default: {DEFAULT_SERVER_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'TCP port for line clients (default: {DEFAULT_PORT})')
    parser.add_argument('--ws-port', type=int, default=DEFAULT_WS_PORT,
                        help=f'WebSocket port (default: {DEFAULT_WS_PORT})')
    parser.add_argument('--no-websocket', action='store_true',
                        help='Disable the WebSocket listener')
    parser.add_argument('--default-username', type=str, default=DEFAULT_USERNAME,
                        help=f'Display name before /u is used (default: {DEFAULT_USERNAME})')
    parser.add_argument('--close-on-unsupported', action='store_true',
                        help='Close connections that send binary payloads')
    parser.add_argument('--log-dir', type=str, default=LOG_DIR,
                        help=f'Directory for the server log file (default: {LOG_DIR})')
    parser.add_argument('--log-level', type=str, default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: INFO)')
    return parser


def config_from_args(args) -> ServerConfig:
    config = ServerConfig(
        host=args.host,
        port=args.port,
        ws_port=args.ws_port,
        enable_websocket=not args.no_websocket,
        default_username=args.default_username,
        close_on_unsupported_payload=args.close_on_unsupported
    )
    config.logs_dir = args.log_dir
    config.log_level = getattr(logging, args.log_level)
    return config


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    config = config_from_args(args)
    logger.configure(**config.get_log_settings())

    try:
        asyncio.run(RelayServer(config).start())
    except KeyboardInterrupt:
        logger.info("Server shutting down...")
    except OSError as e:
        logger.error(f"Server failed to start: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
