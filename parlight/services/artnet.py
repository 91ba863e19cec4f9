import asyncio
import contextlib
import logging
import socket
from pathlib import Path
from time import perf_counter
from typing import Mapping, Optional

from parlight.services.bus import DMX_CHANNELS, clamp_byte

logger = logging.getLogger(__name__)

ARTNET_IP = "192.168.10.221"
ARTNET_PORT = 6454
ARTNET_UNIVERSE = 0
FPS = 60


class ArtNetService:
    """DMX output over Art-Net (ArtDMX packets, one universe, fixed frame rate).

    `write`/`read` only touch the in-memory universe; the send loop started by
    `start()` pushes the whole universe to the node `fps` times per second.
    """

    def __init__(
        self,
        host: str = ARTNET_IP,
        port: int = ARTNET_PORT,
        universe: int = ARTNET_UNIVERSE,
        fps: int = FPS,
        debug: bool = False,
        debug_file: Optional[str] = None,
    ):
        self.host = host
        self.port = int(port)
        self.universe = int(universe)
        self.fps = int(fps)
        self.dmx_universe: bytearray = bytearray(DMX_CHANNELS)
        self.last_send = 0.0
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.running = False
        self._task: Optional[asyncio.Task] = None
        self.debug = bool(debug)
        self.debug_file_path = Path(debug_file) if debug_file else None
        if self.debug_file_path is not None:
            self.debug_file_path.parent.mkdir(parents=True, exist_ok=True)

    async def start(self):
        self.running = True
        self._task = asyncio.create_task(self.send_loop())
        logger.info("Art-Net output started -> %s:%s universe %s at %s fps", self.host, self.port, self.universe, self.fps)

    async def stop(self):
        self.running = False
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        self.sock.close()
        logger.info("Art-Net output stopped")

    def write(self, mapping: Mapping[int, int]) -> None:
        for channel, value in mapping.items():
            self.set_channel(channel, value)

    def read(self, channel: int) -> int:
        if not 1 <= channel <= DMX_CHANNELS:
            raise IndexError(f"channel {channel} outside 1..{DMX_CHANNELS}")
        return self.dmx_universe[channel - 1]

    def set_channel(self, channel: int, value: int) -> None:
        if 1 <= channel <= DMX_CHANNELS:
            self.dmx_universe[channel - 1] = clamp_byte(value)
        else:
            logger.debug("ignoring write to channel %s outside 1..%s", channel, DMX_CHANNELS)

    async def send_loop(self):
        while self.running:
            now = perf_counter()
            if now - self.last_send >= 1.0 / self.fps:
                await self.send_artnet()
                self.last_send = now
            await asyncio.sleep(0.01)  # small sleep to not hog CPU

    def build_packet(self) -> bytes:
        packet = bytearray()
        packet.extend(b'Art-Net\x00')  # ID
        packet.extend((0x00, 0x50))  # OpCode: ArtDMX
        packet.extend((0x00, 0x0e))  # Protocol version
        packet.extend((0x00, 0x00))  # Sequence + Physical
        packet.extend((self.universe & 0xFF, (self.universe >> 8) & 0xFF))  # Universe
        packet.extend(((DMX_CHANNELS >> 8) & 0xFF, DMX_CHANNELS & 0xFF))  # Data length = 512
        packet.extend(self.dmx_universe)
        return bytes(packet)

    async def send_artnet(self):
        packet = self.build_packet()

        if self.debug:
            self._debug_dump(bytes(self.dmx_universe))

        try:
            self.sock.sendto(packet, (self.host, self.port))
        except OSError as e:
            logger.warning("Art-Net send error: %s", e)

    def _debug_dump(self, universe_bytes: bytes):
        timestamp = perf_counter()
        dmx_hex = '.'.join(f"{value:02X}" for value in universe_bytes)
        line = f"[{timestamp:.3f}] artnet dmx {dmx_hex}"

        if self.debug_file_path is None:
            logger.debug(line)
            return

        try:
            with self.debug_file_path.open("a", encoding="utf-8") as debug_file:
                debug_file.write(line + "\n")
        except OSError as e:
            logger.warning("Art-Net debug write error: %s", e)

    async def blackout(self, send_once: bool = True) -> None:
        """Immediately set the entire DMX universe to zero and optionally send one Art-Net packet.

        This is intended to be called during shutdown to ensure fixtures go dark before sockets close.
        """
        self.dmx_universe = bytearray(DMX_CHANNELS)
        if send_once:
            await self.send_artnet()
