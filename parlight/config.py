"""Runtime configuration for the controller."""

import os
from typing import Literal, Optional

from pydantic import BaseModel, Field


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Server, DMX output and fixture patch settings."""

    # HTTP server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)

    # DMX output: "artnet" sends to a node, "memory" keeps the universe in-process
    dmx_driver: Literal["artnet", "memory"] = Field(default="artnet")
    dmx_device: str = Field(default="192.168.10.221")  # Art-Net node address
    artnet_port: int = Field(default=6454)
    artnet_universe: int = Field(default=0, ge=0)
    dmx_fps: int = Field(default=60, gt=0)
    artnet_debug: bool = Field(default=False)
    artnet_debug_file: Optional[str] = Field(default=None)

    # Fixture patch
    start_channel: int = Field(default=1, ge=1, le=506)

    log_level: str = Field(default="INFO")

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            dmx_driver=os.getenv("DMX_DRIVER", "artnet").strip().lower(),
            dmx_device=os.getenv("DMX_DEVICE", "192.168.10.221"),
            artnet_port=int(os.getenv("ARTNET_PORT", "6454")),
            artnet_universe=int(os.getenv("ARTNET_UNIVERSE", "0")),
            dmx_fps=int(os.getenv("DMX_FPS", "60")),
            artnet_debug=_env_flag("ARTNET_DEBUG"),
            artnet_debug_file=os.getenv("ARTNET_DEBUG_FILE") or None,
            start_channel=int(os.getenv("START_CHANNEL", "1")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
