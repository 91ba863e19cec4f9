from typing import Dict, Final, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Logical channels in DMX offset order (start channel + index).
CHANNEL_NAMES: Final[Tuple[str, ...]] = (
    "master_dimmer",
    "red",
    "green",
    "blue",
    "strobe",
    "mode",
    "hue_speed",
)

STROBE_MIN: Final[int] = 8


class ChannelMap(BaseModel):
    """Absolute DMX channel number for each logical channel of one fixture."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    master_dimmer: int = Field(ge=1)
    red: int = Field(ge=1)
    green: int = Field(ge=1)
    blue: int = Field(ge=1)
    strobe: int = Field(ge=1)
    mode: int = Field(ge=1)
    hue_speed: int = Field(ge=1)

    @classmethod
    def from_start_channel(cls, start_channel: int = 1) -> "ChannelMap":
        if int(start_channel) < 1:
            raise ValueError(f"start channel must be >= 1, got {start_channel}")
        return cls(**{name: int(start_channel) + offset for offset, name in enumerate(CHANNEL_NAMES)})

    def channel(self, name: str) -> int:
        if name not in CHANNEL_NAMES:
            raise KeyError(f"Unknown channel {name}")
        return getattr(self, name)


class FixtureState(BaseModel):
    """Last value sent for each logical channel. All channels power on at zero."""

    model_config = ConfigDict(validate_assignment=True, alias_generator=to_camel, populate_by_name=True)

    master_dimmer: int = Field(default=0, ge=0, le=255)
    red: int = Field(default=0, ge=0, le=255)
    green: int = Field(default=0, ge=0, le=255)
    blue: int = Field(default=0, ge=0, le=255)
    strobe: int = Field(default=0, ge=0, le=255)
    mode: int = Field(default=0, ge=0, le=255)
    hue_speed: int = Field(default=0, ge=0, le=255)

    @field_validator("strobe")
    @classmethod
    def _strobe_off_or_above_minimum(cls, value: int) -> int:
        if 0 < value < STROBE_MIN:
            raise ValueError(f"strobe must be 0 or within {STROBE_MIN}..255")
        return value

    def snapshot(self) -> Dict[str, int]:
        return self.model_dump(by_alias=True)
