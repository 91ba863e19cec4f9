from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ColorInput = Union[str, List[int]]


class RequestModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LightOnRequest(RequestModel):
    intensity: int = 255
    color: Optional[str] = "white"


class ColorRequest(RequestModel):
    color: str
    intensity: int = 255


class DimmerRequest(RequestModel):
    value: int


class StrobeRequest(RequestModel):
    speed: int = 0


class ModeRequest(RequestModel):
    mode: str
    value: int = 128


class FadeRequest(RequestModel):
    color: ColorInput
    duration: float = Field(default=2000, ge=0)
    easing: str = "linear"


class PulseRequest(RequestModel):
    color: ColorInput = "white"
    min_intensity: int = 50
    max_intensity: int = 255
    duration: float = Field(default=2000, ge=0)


class RainbowRequest(RequestModel):
    duration: float = Field(default=5000, ge=0)
    steps: int = Field(default=36, le=360)


class StrobeAnimationRequest(RequestModel):
    color: ColorInput = "white"
    on_duration: float = Field(default=100, ge=0)
    off_duration: float = Field(default=100, ge=0)


class CycleRequest(RequestModel):
    colors: Optional[List[ColorInput]] = None
    step_duration: float = Field(default=1000, ge=0)


class DimmerFadeRequest(RequestModel):
    value: int
    duration: float = Field(default=2000, ge=0)
    easing: str = "linear"


class ActionResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class StatusResponse(BaseModel):
    isAnimating: bool
    currentState: Dict[str, int]


class HealthResponse(BaseModel):
    success: bool = True
    healthy: bool = True
    uptime: float
    timestamp: str
    dmx: Dict[str, Any]
