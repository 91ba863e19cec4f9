from types import MappingProxyType
from typing import Annotated, Dict, Final, List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

# Easing ids accepted by animation steps -> easing_functions class names.
EASINGS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "linear": "LinearInOut",
        "inQuad": "QuadEaseIn",
        "outQuad": "QuadEaseOut",
        "inOutQuad": "QuadEaseInOut",
        "inCubic": "CubicEaseIn",
        "outCubic": "CubicEaseOut",
        "inOutCubic": "CubicEaseInOut",
        "inQuart": "QuarticEaseIn",
        "outQuart": "QuarticEaseOut",
        "inOutQuart": "QuarticEaseInOut",
        "inQuint": "QuinticEaseIn",
        "outQuint": "QuinticEaseOut",
        "inOutQuint": "QuinticEaseInOut",
        "inSine": "SineEaseIn",
        "outSine": "SineEaseOut",
        "inOutSine": "SineEaseInOut",
        "inExpo": "ExponentialEaseIn",
        "outExpo": "ExponentialEaseOut",
        "inOutExpo": "ExponentialEaseInOut",
        "inCirc": "CircularEaseIn",
        "outCirc": "CircularEaseOut",
        "inOutCirc": "CircularEaseInOut",
        "inElastic": "ElasticEaseIn",
        "outElastic": "ElasticEaseOut",
        "inOutElastic": "ElasticEaseInOut",
        "inBack": "BackEaseIn",
        "outBack": "BackEaseOut",
        "inOutBack": "BackEaseInOut",
        "inBounce": "BounceEaseIn",
        "outBounce": "BounceEaseOut",
        "inOutBounce": "BounceEaseInOut",
    }
)

Byte = Annotated[int, Field(ge=0, le=255)]


class AnimationStep(BaseModel):
    """Move a set of DMX channels to target values over `duration` milliseconds."""

    targets: Dict[int, Byte]
    duration: float = Field(default=0.0, ge=0)
    easing: str = "linear"

    @field_validator("easing")
    @classmethod
    def _known_easing(cls, value: str) -> str:
        if value not in EASINGS:
            raise ValueError(f"Unknown easing '{value}'. Available easings: {', '.join(EASINGS)}")
        return value


class AnimationPlan(BaseModel):
    """Ordered animation steps.

    `loop` is the number of passes over the steps; None repeats until stopped.
    """

    steps: List[AnimationStep] = []
    loop: Optional[int] = Field(default=1, ge=1)

    @property
    def is_infinite(self) -> bool:
        return self.loop is None

    @property
    def pass_duration(self) -> float:
        return sum(step.duration for step in self.steps)

    def add(self, targets: Dict[int, int], duration: float, easing: str = "linear") -> "AnimationPlan":
        self.steps.append(AnimationStep(targets=targets, duration=duration, easing=easing))
        return self
