import logging
from typing import Optional, Sequence

from parlight.errors import InvalidColor
from parlight.models.animation import AnimationPlan
from parlight.models.colors import DEFAULT_CYCLE_COLORS, ColorLike, resolve_color

logger = logging.getLogger(__name__)


def build(
    self,
    colors: Optional[Sequence[ColorLike]] = None,
    step_duration: float = 1000,
    easing: str = "linear",
) -> AnimationPlan:
    # Loops forever; colors that do not resolve are skipped rather than rejected.
    plan = AnimationPlan(loop=None)
    for color in colors or DEFAULT_CYCLE_COLORS:
        try:
            red, green, blue = resolve_color(color)
        except InvalidColor:
            logger.debug("color cycle: skipping unknown color %r", color)
            continue
        plan.add(
            {
                self.channels.red: red,
                self.channels.green: green,
                self.channels.blue: blue,
            },
            step_duration,
            easing,
        )
    return plan
