"""
Chat server module.

This module handles the per-connection lifecycle and the broadcast fan-out of
chat lines and system notices to registered participants.
"""

import asyncio
from typing import List, Optional

from common.constants import MessageKinds
from common.protocol_definitions import (
    classify_line, create_welcome_lines, create_presence_message,
    create_username_set_message, create_chat_line, create_user_left_message,
    create_unsupported_payload_message
)
from server.chat.participant import Participant, ParticipantState
from server.chat.registry import ConnectionRegistry
from server.transport.base import Channel, ChannelClosed
from server.utils.config import ServerConfig
from server.utils.logger import logger


class ChatServer:
    """Server-side chat functionality."""

    def __init__(self, registry: Optional[ConnectionRegistry] = None,
                 config: Optional[ServerConfig] = None):
        self.registry = registry if registry is not None else ConnectionRegistry()
        self.config = config if config is not None else ServerConfig()

    async def broadcast(self, message: str, sender: Optional[Participant] = None) -> List[int]:
        """
        Send a line to every registered participant except the sender.
        With sender=None the line goes to everyone.
        Returns the uids whose delivery failed.
        """
        async with self.registry.lock:
            return await self._broadcast_locked(message, sender)

    async def _broadcast_locked(self, message: str, sender: Optional[Participant]) -> List[int]:
        failed = []
        for participant in self.registry.snapshot():
            if sender is not None and participant.uid == sender.uid:
                continue
            # Failures stay with the recipient; its own read loop unregisters it
            if not await participant.send(message):
                failed.append(participant.uid)
        return failed

    async def broadcast_presence(self) -> List[int]:
        """Send the current live count to all participants."""
        async with self.registry.lock:
            return await self._broadcast_presence_locked()

    async def _broadcast_presence_locked(self) -> List[int]:
        return await self._broadcast_locked(create_presence_message(self.registry.live_count), None)

    async def send_message(self, participant: Participant, message: str) -> bool:
        """Send a line to one participant only."""
        return await participant.send(message)

    async def join(self, participant: Participant) -> int:
        """Register and announce the new count in one critical section."""
        async with self.registry.lock:
            count = self.registry.locked_register(participant)
            participant.state = ParticipantState.ACTIVE
            await self._broadcast_presence_locked()
        logger.log_join(participant.username, participant.uid, count)
        return count

    async def leave(self, participant: Participant) -> bool:
        """Unregister and announce the new count in one critical section."""
        async with self.registry.lock:
            removed = self.registry.locked_unregister(participant)
            if removed:
                await self._broadcast_presence_locked()
            count = self.registry.live_count
        if removed:
            logger.log_disconnect(participant.username, participant.uid, count)
        return removed

    async def handle_rename(self, participant: Participant, username: str):
        """Process a rename command; only the sender is told."""
        logger.log_rename(participant.username, username, participant.uid)
        participant.username = username
        await self.send_message(participant, create_username_set_message(username))

    async def handle_chat(self, participant: Participant, text: str):
        """Relay a chat line to the others and echo it to the sender."""
        logger.log_chat(participant.username, participant.uid, text)
        line = create_chat_line(participant.username, text)
        await self.broadcast(line, participant)
        await self.send_message(participant, line)

    async def handle_unsupported_payload(self, participant: Participant) -> bool:
        """
        Announce a non-text payload. Returns True when the connection should
        be closed as a consequence.
        """
        logger.log_policy_violation(participant.username, participant.uid)
        await self.broadcast(create_unsupported_payload_message(participant.username))
        return self.config.close_on_unsupported_payload

    async def handle_line(self, participant: Participant, text: str) -> bool:
        """Dispatch one text line. Returns False when the read loop should stop."""
        parsed = classify_line(text)

        if parsed.kind == MessageKinds.RENAME:
            await self.handle_rename(participant, parsed.argument)
        elif parsed.kind == MessageKinds.QUIT:
            logger.log_quit(participant.username, participant.uid)
            return False
        else:
            await self.handle_chat(participant, parsed.argument)
        return True

    async def handle_connection(self, channel: Channel):
        """Run one participant from accept to teardown."""
        participant = Participant(self.registry.get_next_uid(), channel, self.config.default_username)
        logger.log_connection(channel.peer, participant.uid)

        try:
            for line in create_welcome_lines():
                await self.send_message(participant, line)
            await self.join(participant)
            await self._read_loop(participant)
        except asyncio.CancelledError:
            logger.info(f"Connection cancelled for uid={participant.uid}")
            raise
        except Exception as e:
            logger.log_error(f"connection uid={participant.uid}", e)
        finally:
            await self.disconnect(participant)

    async def _read_loop(self, participant: Participant):
        channel = participant.channel
        while True:
            try:
                message = await channel.receive()
            except ChannelClosed as e:
                logger.debug(f"Read ended for uid={participant.uid}: {e}")
                break

            if message.is_text:
                if not await self.handle_line(participant, message.text):
                    break
            elif await self.handle_unsupported_payload(participant):
                break

    async def disconnect(self, participant: Participant):
        """Tear a participant down: unregister, announce, release the channel."""
        if participant.state in (ParticipantState.CLOSING, ParticipantState.CLOSED):
            return
        participant.state = ParticipantState.CLOSING

        try:
            if await self.leave(participant):
                await self.broadcast(create_user_left_message(participant.username))
        finally:
            try:
                await participant.channel.close()
            except Exception as e:
                logger.log_error(f"closing channel uid={participant.uid}", e)
            participant.state = ParticipantState.CLOSED
