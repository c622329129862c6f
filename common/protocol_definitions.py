"""
Protocol definitions for the text relay.

This module defines the line formats exchanged between client and server and
the classification of inbound lines into commands and chat content.
"""

from typing import Optional
from dataclasses import dataclass

from common.constants import (
    MessageKinds, RENAME_COMMAND, QUIT_COMMAND, WELCOME_LINES, PRESENCE_PREFIX,
    USERNAME_SET_TEMPLATE, CHAT_LINE_TEMPLATE, LEFT_TEMPLATE,
    UNSUPPORTED_PAYLOAD_TEMPLATE, LINE_TERMINATOR
)


@dataclass
class ParsedLine:
    """Classified inbound line."""
    kind: str
    argument: str = ''


def strip_line_terminator(text: str) -> str:
    """Remove a trailing CRLF or LF."""
    return text.rstrip('\r\n')


def flatten_line(text: str) -> str:
    """
    Collapse one inbound message onto a single line.

    The trailing terminator is dropped and any embedded CR/LF becomes a
    space, so relayed content can never start a new line for stream readers.
    """
    line = strip_line_terminator(text)
    return line.replace('\r\n', ' ').replace('\r', ' ').replace('\n', ' ')


def classify_line(text: str) -> ParsedLine:
    """
    Classify one inbound line.

    Lines starting with the rename prefix carry the new name (surrounding
    whitespace trimmed). Any line starting with the quit prefix is a quit.
    Everything else is chat content.
    """
    line = strip_line_terminator(text)
    if line.startswith(RENAME_COMMAND):
        return ParsedLine(MessageKinds.RENAME, line[len(RENAME_COMMAND):].strip())
    if line.startswith(QUIT_COMMAND):
        return ParsedLine(MessageKinds.QUIT)
    return ParsedLine(MessageKinds.CHAT, line)


def encode_line(text: str) -> str:
    """Terminate an outbound message with exactly one newline."""
    if text.endswith(LINE_TERMINATOR):
        return text
    return text + LINE_TERMINATOR


def create_welcome_lines() -> tuple:
    """Create the banner sent once at connection start."""
    return WELCOME_LINES


def create_presence_message(count: int) -> str:
    """Create a presence token for the current participant count."""
    return f"{PRESENCE_PREFIX}{count}"


def parse_presence(text: str) -> Optional[int]:
    """Return the count carried by a presence token, or None for other lines."""
    line = strip_line_terminator(text)
    if not line.startswith(PRESENCE_PREFIX):
        return None
    try:
        return int(line[len(PRESENCE_PREFIX):])
    except ValueError:
        return None


def create_username_set_message(username: str) -> str:
    """Create the rename confirmation."""
    return USERNAME_SET_TEMPLATE.format(username=username)


def create_chat_line(username: str, text: str) -> str:
    """Create a relayed chat line."""
    return CHAT_LINE_TEMPLATE.format(username=username, text=text)


def create_user_left_message(username: str) -> str:
    """Create the departure notice."""
    return LEFT_TEMPLATE.format(username=username)


def create_unsupported_payload_message(username: str) -> str:
    """Create the policy-violation notice."""
    return UNSUPPORTED_PAYLOAD_TEMPLATE.format(username=username)


def create_rename_command(username: str) -> str:
    """Create a rename command (client side)."""
    return f"{RENAME_COMMAND}{username}"


def create_quit_command() -> str:
    """Create a quit command (client side)."""
    return QUIT_COMMAND
