"""
Client configuration module.

This module handles client-side configuration settings.
"""

from common.constants import DEFAULT_HOST, DEFAULT_PORT, MAX_RETRY_ATTEMPTS, RECONNECT_DELAY_BASE


class ClientConfig:
    """Client configuration class."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, username: str = None):
        self.host = host
        self.port = port
        # None keeps the server-assigned default name
        self.username = username

        # Connection settings
        self.retry_attempts = MAX_RETRY_ATTEMPTS
        self.retry_delay_base = RECONNECT_DELAY_BASE

    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port,
            'username': self.username
        }
