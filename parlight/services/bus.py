from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, Final, Mapping, Protocol

logger = logging.getLogger(__name__)

DMX_CHANNELS: Final[int] = 512


class BusHandle(Protocol):
    """What a fixture needs from the DMX output it is patched into."""

    def write(self, mapping: Mapping[int, int]) -> None: ...

    def read(self, channel: int) -> int: ...


def clamp_byte(value) -> int:
    return max(0, min(255, int(value)))


class MemoryBus:
    """In-process DMX universe with no hardware behind it.

    Used for dry runs (DMX_DRIVER=memory) and tests. Every write is kept in a
    bounded history so callers can inspect what would have been sent.
    """

    def __init__(self, channels: int = DMX_CHANNELS, history: int = 1000):
        self.dmx_universe: bytearray = bytearray(channels)
        self.writes: Deque[Dict[int, int]] = deque(maxlen=history)
        self.running = False

    async def start(self) -> None:
        self.running = True

    async def stop(self) -> None:
        self.running = False

    async def blackout(self) -> None:
        self.dmx_universe = bytearray(len(self.dmx_universe))

    def write(self, mapping: Mapping[int, int]) -> None:
        applied: Dict[int, int] = {}
        for channel, value in mapping.items():
            if 1 <= channel <= len(self.dmx_universe):
                self.dmx_universe[channel - 1] = clamp_byte(value)
                applied[channel] = self.dmx_universe[channel - 1]
            else:
                logger.debug("ignoring write to channel %s outside 1..%s", channel, len(self.dmx_universe))
        self.writes.append(applied)

    def read(self, channel: int) -> int:
        if not 1 <= channel <= len(self.dmx_universe):
            raise IndexError(f"channel {channel} outside 1..{len(self.dmx_universe)}")
        return self.dmx_universe[channel - 1]
