import asyncio
import logging

from parlight.models.fixtures import ParLight

logger = logging.getLogger(__name__)


async def run_demo_sequence(
    fixture: ParLight,
    hold_seconds: float = 2.0,
    fade_ms: float = 2000,
    dimmer_target: int = 100,
) -> None:
    """Scripted check of a freshly patched fixture.

    - Green at full for `hold_seconds`
    - Snap to red, fade to blue over `fade_ms`
    - Then fade the dimmer down to `dimmer_target` (inOutCubic)
    - Then turn the light off
    """
    done = asyncio.Event()

    def after_dimmer_fade() -> None:
        logger.info("demo: turning off")
        fixture.turn_off()
        done.set()

    def after_color_fade() -> None:
        logger.info("demo: fading dimmer to %s", dimmer_target)
        fixture.fade_dimmer(dimmer_target, fade_ms, "inOutCubic", on_finish=after_dimmer_fade)

    logger.info("demo: green")
    fixture.turn_on(255, "green")
    await asyncio.sleep(hold_seconds)

    logger.info("demo: red -> blue")
    fixture.set_color("red")
    fixture.fade_to_color("blue", fade_ms, "linear", on_finish=after_color_fade)

    await done.wait()
