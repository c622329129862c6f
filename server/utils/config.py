"""
Server configuration module.

This module handles server-side configuration settings.
"""

import logging

from common.constants import (
    DEFAULT_SERVER_HOST, DEFAULT_PORT, DEFAULT_WS_PORT, DEFAULT_USERNAME,
    MAX_LINE_LENGTH, MAX_WS_MESSAGE_SIZE, LOG_DIR
)


class ServerConfig:
    """Server configuration class."""

    def __init__(self, host: str = DEFAULT_SERVER_HOST, port: int = DEFAULT_PORT,
                 ws_port: int = DEFAULT_WS_PORT, enable_websocket: bool = True,
                 default_username: str = DEFAULT_USERNAME,
                 close_on_unsupported_payload: bool = False):
        self.host = host
        self.port = port
        self.ws_port = ws_port
        self.enable_websocket = enable_websocket

        # Participant settings
        self.default_username = default_username
        # Binary/undecodable payloads are announced; closing is opt-in
        self.close_on_unsupported_payload = close_on_unsupported_payload

        # Transport limits
        self.max_line_length = MAX_LINE_LENGTH
        self.max_ws_message_size = MAX_WS_MESSAGE_SIZE

        # Logging configuration
        self.logs_dir = LOG_DIR
        self.log_level = logging.INFO

    def get_connection_info(self):
        """Get connection information."""
        info = {
            'host': self.host,
            'port': self.port
        }
        if self.enable_websocket:
            info['ws_port'] = self.ws_port
        return info

    def get_log_settings(self):
        """Get logging settings."""
        return {
            'logs_dir': self.logs_dir,
            'log_level': self.log_level
        }
