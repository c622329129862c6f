#!/usr/bin/env python3
"""
Unit tests for the broadcast fan-out in server/chat/chat_server.py

Tests:
- Sender exclusion and system messages
- Isolation when one recipient fails
- Presence tokens after join and leave
- Per-participant write serialisation
"""

import asyncio
import unittest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from fake_channel import FakeChannel
from common.protocol_definitions import create_presence_message
from server.chat.chat_server import ChatServer
from server.chat.participant import Participant, ParticipantState
from server.chat.registry import ConnectionRegistry


class InterleavingChannel(FakeChannel):
    """Yields to the loop in the middle of every write."""

    async def send_text(self, text: str):
        self.sent.append(f"begin {text}")
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        self.sent.append(f"end {text}")


class TestBroadcast(unittest.IsolatedAsyncioTestCase):
    """Test cases for ChatServer.broadcast and presence."""

    async def asyncSetUp(self):
        self.registry = ConnectionRegistry()
        self.server = ChatServer(self.registry)

    async def add(self, name: str, fail_sends: bool = False) -> Participant:
        participant = Participant(self.registry.get_next_uid(), FakeChannel(name, fail_sends), name)
        await self.registry.register(participant)
        return participant

    async def test_broadcast_excludes_sender(self):
        a, b, c = [await self.add(n) for n in ("A", "B", "C")]

        failed = await self.server.broadcast("A: hi", a)

        self.assertEqual(failed, [])
        self.assertEqual(a.channel.sent, [])
        self.assertEqual(b.channel.sent, ["A: hi"])
        self.assertEqual(c.channel.sent, ["A: hi"])

    async def test_system_broadcast_reaches_everyone(self):
        participants = [await self.add(n) for n in ("A", "B", "C")]

        await self.server.broadcast("notice")

        for participant in participants:
            self.assertEqual(participant.channel.sent, ["notice"])

    async def test_broadcast_to_empty_registry(self):
        self.assertEqual(await self.server.broadcast("nobody home"), [])

    async def test_unregistered_participants_get_nothing(self):
        a = await self.add("A")
        b = await self.add("B")
        await self.registry.unregister(b)

        await self.server.broadcast("notice")

        self.assertEqual(a.channel.sent, ["notice"])
        self.assertEqual(b.channel.sent, [])

    async def test_one_failing_recipient_does_not_stop_the_sweep(self):
        a = await self.add("A")
        broken = await self.add("broken", fail_sends=True)
        c = await self.add("C")
        d = await self.add("D")

        failed = await self.server.broadcast("A: hi", a)

        self.assertEqual(failed, [broken.uid])
        self.assertEqual(c.channel.sent, ["A: hi"])
        self.assertEqual(d.channel.sent, ["A: hi"])
        # Delivery failure never unregisters
        self.assertIn(broken, self.registry)
        self.assertEqual(await self.registry.count(), 4)

    async def test_join_sends_presence_to_all_registered(self):
        a = Participant(self.registry.get_next_uid(), FakeChannel("A"), "A")
        b = Participant(self.registry.get_next_uid(), FakeChannel("B"), "B")

        self.assertEqual(await self.server.join(a), 1)
        self.assertEqual(await self.server.join(b), 2)

        self.assertEqual(a.channel.sent, [create_presence_message(1), create_presence_message(2)])
        self.assertEqual(b.channel.sent, [create_presence_message(2)])
        self.assertEqual(a.state, ParticipantState.ACTIVE)

    async def test_leave_sends_presence_once(self):
        a = Participant(self.registry.get_next_uid(), FakeChannel("A"), "A")
        b = Participant(self.registry.get_next_uid(), FakeChannel("B"), "B")
        await self.server.join(a)
        await self.server.join(b)
        a.channel.sent.clear()

        self.assertTrue(await self.server.leave(b))
        self.assertFalse(await self.server.leave(b))

        self.assertEqual(a.channel.sent, [create_presence_message(1)])
        self.assertEqual(await self.registry.count(), 1)

    async def test_concurrent_joins_report_accurate_counts(self):
        participants = [
            Participant(self.registry.get_next_uid(), FakeChannel(str(i)), str(i))
            for i in range(10)
        ]

        await asyncio.gather(*(self.server.join(p) for p in participants))

        # The last token every participant saw is the final count
        for participant in participants:
            self.assertEqual(participant.channel.sent[-1], create_presence_message(10))
        # Tokens arrive in increasing order; no stale count follows a newer one
        first = participants[0].channel.sent
        self.assertEqual(first, sorted(first, key=lambda t: int(t.split()[-1])))

    async def test_writes_to_one_participant_do_not_interleave(self):
        target = Participant(self.registry.get_next_uid(), InterleavingChannel("T"), "T")
        sender = await self.add("S")
        await self.registry.register(target)

        await asyncio.gather(
            self.server.broadcast("S: one", sender),
            self.server.send_message(target, "direct"),
            self.server.broadcast("S: two", sender),
        )

        sent = target.channel.sent
        self.assertEqual(len(sent), 6)
        for i in range(0, len(sent), 2):
            self.assertTrue(sent[i].startswith("begin "))
            self.assertEqual(sent[i + 1], "end " + sent[i][len("begin "):])

    async def test_broadcast_presence_uses_current_count(self):
        a = await self.add("A")
        await self.add("B")

        await self.server.broadcast_presence()

        self.assertEqual(a.channel.sent, [create_presence_message(2)])


if __name__ == '__main__':
    unittest.main()
