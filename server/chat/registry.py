"""
Connection registry.

The set of currently active participants and its live count, guarded by a
single asyncio lock that every membership read or mutation goes through.
"""

import asyncio
from typing import Dict, List


class ConnectionRegistry:
    """Shared set of active participants, keyed by uid."""

    def __init__(self):
        self.participants: Dict[int, 'Participant'] = {}  # uid -> participant
        self.live_count = 0
        self.next_uid = 1
        self.lock = asyncio.Lock()

    def get_next_uid(self) -> int:
        """Mint an identifier that is never reused within this registry."""
        uid = self.next_uid
        self.next_uid += 1
        return uid

    async def register(self, participant) -> int:
        """Add a participant. Returns the live count after insertion."""
        async with self.lock:
            return self.locked_register(participant)

    async def unregister(self, participant) -> bool:
        """Remove a participant if present. Absent handles are a no-op."""
        async with self.lock:
            return self.locked_unregister(participant)

    async def count(self) -> int:
        """Current live participant count."""
        async with self.lock:
            return self.live_count

    def locked_register(self, participant) -> int:
        """register() for callers already holding the lock."""
        if participant.uid not in self.participants:
            self.participants[participant.uid] = participant
            self.live_count += 1
        return self.live_count

    def locked_unregister(self, participant) -> bool:
        """unregister() for callers already holding the lock."""
        if self.participants.pop(participant.uid, None) is None:
            return False
        self.live_count -= 1
        return True

    def snapshot(self) -> List['Participant']:
        """Registered participants at this instant. Caller must hold the lock."""
        return list(self.participants.values())

    def __contains__(self, participant) -> bool:
        return participant.uid in self.participants

    def __len__(self) -> int:
        return len(self.participants)
