"""
WebSocket transport.

Text frames are text messages; binary frames are unsupported payloads.
"""

import websockets

from common.constants import PayloadTypes
from common.protocol_definitions import encode_line, flatten_line
from server.transport.base import Channel, ChannelClosed, InboundMessage


class WebSocketChannel(Channel):
    """Channel over a websockets server connection."""

    def __init__(self, websocket):
        self.websocket = websocket
        self.peer = f"ws:{websocket.remote_address}"

    async def receive(self) -> InboundMessage:
        try:
            data = await self.websocket.recv()
        except websockets.exceptions.ConnectionClosed as e:
            raise ChannelClosed(str(e)) from e

        if isinstance(data, str):
            return InboundMessage(PayloadTypes.TEXT, text=flatten_line(data), raw=data)
        return InboundMessage(PayloadTypes.UNSUPPORTED, raw=data)

    async def send_text(self, text: str):
        await self.websocket.send(encode_line(text))

    async def close(self):
        await self.websocket.close()
