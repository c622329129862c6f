"""
TCP line transport.

Each inbound line (terminated by a newline) is one message. Lines that are not
valid UTF-8 are reported as unsupported payloads.
"""

import asyncio

from common.constants import PayloadTypes
from common.protocol_definitions import encode_line, flatten_line
from server.transport.base import Channel, ChannelClosed, InboundMessage
from server.utils.logger import logger


class TcpLineChannel(Channel):
    """Channel over an asyncio stream pair."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        self.reader = reader
        self.writer = writer
        peername = writer.get_extra_info('peername')
        self.peer = f"tcp:{peername}"

    async def receive(self) -> InboundMessage:
        try:
            data = await self.reader.readline()
        except (ConnectionError, asyncio.IncompleteReadError) as e:
            raise ChannelClosed(str(e)) from e
        except ValueError as e:
            # StreamReader limit exceeded
            raise ChannelClosed(f"line too long: {e}") from e

        if not data:
            raise ChannelClosed("peer closed the connection")

        try:
            text = data.decode('utf-8')
        except UnicodeDecodeError:
            return InboundMessage(PayloadTypes.UNSUPPORTED, raw=data)
        return InboundMessage(PayloadTypes.TEXT, text=flatten_line(text), raw=data)

    async def send_text(self, text: str):
        if self.writer.is_closing():
            raise ChannelClosed("writer is closing")
        self.writer.write(encode_line(text).encode('utf-8'))
        await self.writer.drain()

    async def close(self):
        if self.writer.is_closing():
            return
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except (ConnectionError, OSError) as e:
            logger.debug(f"Error while closing {self.peer}: {e}")
