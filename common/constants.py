"""
Shared constants for the text relay.

This module contains all constants used across client and server components.
"""

# Network Configuration
DEFAULT_HOST = 'localhost'
DEFAULT_SERVER_HOST = '0.0.0.0'
DEFAULT_PORT = 9000
DEFAULT_WS_PORT = 9001

# Buffer Sizes
MAX_LINE_LENGTH = 64 * 1024  # bytes per inbound line on the TCP transport
MAX_WS_MESSAGE_SIZE = 1024 * 1024

# Client reconnect
MAX_RETRY_ATTEMPTS = 3
RECONNECT_DELAY_BASE = 1.0  # seconds

# Participants
DEFAULT_USERNAME = 'anonymous'

# Logging
LOG_DIR = 'logs'
SERVER_LOG_FILE = 'relay_server.log'

# Commands (client to server)
RENAME_COMMAND = '/u '
QUIT_COMMAND = '/q'

# Server to client texts
WELCOME_LINES = (
    'Welcome to the chat.',
    'Change username with: /u <username>',
    'Leave the chat with: /q',
)
PRESENCE_PREFIX = '/online '
USERNAME_SET_TEMPLATE = 'Username set to {username}'
CHAT_LINE_TEMPLATE = '{username}: {text}'
LEFT_TEMPLATE = '{username} has left the chat.'
UNSUPPORTED_PAYLOAD_TEMPLATE = '{username} has entered a binary message. For shame!'

LINE_TERMINATOR = '\n'


class MessageKinds:
    # Inbound line classification
    RENAME = 'rename'
    QUIT = 'quit'
    CHAT = 'chat'


class PayloadTypes:
    # Inbound frame types
    TEXT = 'text'
    UNSUPPORTED = 'unsupported'
