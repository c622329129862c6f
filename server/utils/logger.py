"""
Server logging module.

This module handles server-side logging functionality.
"""

import logging
from pathlib import Path
from typing import Optional

from common.constants import SERVER_LOG_FILE


class ServerLogger:
    """Server logging class."""

    def __init__(self, logs_dir: Optional[str] = None, log_level: int = logging.INFO):
        self.logger = logging.getLogger('relay_server')
        self.logs_dir = None
        self.configure(logs_dir, log_level)

    def configure(self, logs_dir: Optional[str] = None, log_level: int = logging.INFO):
        """(Re)build handlers; a file handler is added when logs_dir is given."""
        self.logger.setLevel(log_level)

        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)
            handler.close()

        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if logs_dir:
            self.logs_dir = Path(logs_dir)
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.logs_dir / SERVER_LOG_FILE, encoding='utf-8')
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def log_connection(self, peer: str, uid: int):
        """Log accepted connection."""
        self.info(f"New connection from {peer}, assigned uid={uid}")

    def log_join(self, username: str, uid: int, count: int):
        """Log participant registration."""
        self.info(f"User '{username}' (uid={uid}) joined, {count} online")

    def log_rename(self, old_username: str, new_username: str, uid: int):
        """Log display name change."""
        self.info(f"User '{old_username}' (uid={uid}) is now '{new_username}'")

    def log_chat(self, username: str, uid: int, message: str):
        """Log chat message."""
        self.debug(f"Chat from {username} (uid={uid}): {message}")

    def log_quit(self, username: str, uid: int):
        """Log explicit quit command."""
        self.info(f"User {username} (uid={uid}) has disconnected.")

    def log_disconnect(self, username: str, uid: int, count: int):
        """Log participant teardown."""
        self.info(f"User {username} (uid={uid}) left, {count} online")

    def log_delivery_failure(self, uid: int, error: Exception):
        """Log a failed write to one recipient."""
        self.warning(f"Failed to deliver to uid={uid}: {error}")

    def log_policy_violation(self, username: str, uid: int):
        """Log unsupported payload."""
        self.warning(f"User {username} (uid={uid}) has entered a binary message. For shame!")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")


# Global logger instance
logger = ServerLogger()
