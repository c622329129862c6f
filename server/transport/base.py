"""
Channel contract.

A channel is the ready-to-use bidirectional message pipe a transport hands to
the chat core for each accepted connection.
"""

from dataclasses import dataclass
from typing import Optional, Union

from common.constants import PayloadTypes


class ChannelClosed(Exception):
    """Raised by receive() once the peer has gone away."""


@dataclass
class InboundMessage:
    """One message received from a peer."""
    payload_type: str
    text: str = ''
    raw: Optional[Union[bytes, str]] = None

    @property
    def is_text(self) -> bool:
        return self.payload_type == PayloadTypes.TEXT


class Channel:
    """Base class for transport channels."""

    peer: str = 'unknown'

    async def receive(self) -> InboundMessage:
        """Wait for the next inbound message; raise ChannelClosed on close."""
        raise NotImplementedError

    async def send_text(self, text: str):
        """Write one newline-terminated text message."""
        raise NotImplementedError

    async def close(self):
        """Release the underlying connection."""
        raise NotImplementedError
