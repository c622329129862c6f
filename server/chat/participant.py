"""
Participant module.

One Participant exists per accepted connection and does not outlive it.
"""

import asyncio
from enum import Enum

from server.transport.base import Channel
from server.utils.logger import logger


class ParticipantState(Enum):
    CONNECTING = 'connecting'
    ACTIVE = 'active'
    CLOSING = 'closing'
    CLOSED = 'closed'


class Participant:
    """A connected client session."""

    def __init__(self, uid: int, channel: Channel, username: str):
        self.uid = uid
        self.channel = channel
        self.username = username
        self.state = ParticipantState.CONNECTING
        # Direct echoes and broadcast deliveries must not interleave on the wire
        self.write_lock = asyncio.Lock()

    async def send(self, text: str) -> bool:
        """Write one line to this participant; False if the write failed."""
        async with self.write_lock:
            try:
                await self.channel.send_text(text)
                return True
            except Exception as e:
                logger.log_delivery_failure(self.uid, e)
                return False

    def __repr__(self):
        return f"Participant(uid={self.uid}, username={self.username!r}, state={self.state.value})"
