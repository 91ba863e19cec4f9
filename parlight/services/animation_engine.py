from __future__ import annotations

import asyncio
import contextlib
import logging
import math
from typing import Callable, Dict, Optional

import easing_functions

from parlight.models.animation import EASINGS, AnimationPlan, AnimationStep
from parlight.services.bus import BusHandle, clamp_byte

logger = logging.getLogger(__name__)

FPS = 60


def make_easing(easing_id: str):
    """Instantiate the easing_functions curve for an easing id over t in [0, 1]."""
    try:
        class_name = EASINGS[easing_id]
    except KeyError:
        raise ValueError(f"Unknown easing '{easing_id}'") from None
    easing_cls = getattr(easing_functions, class_name)
    return easing_cls(start=0.0, end=1.0, duration=1.0)


class AnimationEngine:
    """Plays one AnimationPlan onto a bus from an asyncio task.

    Each step interpolates from the values on the bus when the step begins to the
    step targets. `stop()` is synchronous and nothing is written after it returns.
    """

    def __init__(self, fps: int = FPS):
        if fps <= 0:
            raise ValueError("fps must be > 0")
        self.fps = int(fps)
        self._task: Optional[asyncio.Task] = None
        self._stopped = False
        self._finished = False

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done() and not self._stopped

    @property
    def is_finished(self) -> bool:
        return self._finished

    def run(
        self,
        plan: AnimationPlan,
        bus: BusHandle,
        on_finish: Optional[Callable[[], None]] = None,
    ) -> "AnimationEngine":
        if self._task is not None:
            raise RuntimeError("animation engine already started")
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._play(plan, bus, on_finish))
        return self

    def stop(self) -> None:
        self._stopped = True
        if self._task and not self._task.done():
            self._task.cancel()

    async def wait(self) -> None:
        if self._task:
            with contextlib.suppress(asyncio.CancelledError):
                await self._task

    async def _play(self, plan: AnimationPlan, bus: BusHandle, on_finish: Optional[Callable[[], None]]) -> None:
        passes = 0
        try:
            while plan.steps and (plan.is_infinite or passes < plan.loop):
                for step in plan.steps:
                    await self._play_step(step, bus)
                    if self._stopped:
                        return
                passes += 1
                if plan.pass_duration <= 0:
                    # zero-length passes still yield one frame to the loop
                    await asyncio.sleep(1.0 / self.fps)
        except asyncio.CancelledError:
            logger.debug("animation cancelled after %d pass(es)", passes)
            raise

        if self._stopped:
            return
        self._finished = True
        logger.debug("animation finished after %d pass(es)", passes)
        if on_finish is not None:
            try:
                on_finish()
            except Exception:
                logger.exception("animation on_finish callback failed")

    async def _play_step(self, step: AnimationStep, bus: BusHandle) -> None:
        targets: Dict[int, int] = dict(step.targets)

        if step.duration <= 0:
            self._write(bus, targets)
            return

        start = {channel: self._read(bus, channel) for channel in targets}
        easing = make_easing(step.easing)
        total_frames = max(1, int(math.ceil(step.duration / 1000.0 * self.fps)))

        for frame_index in range(1, total_frames + 1):
            await asyncio.sleep(1.0 / self.fps)
            if frame_index == total_frames:
                frame = targets
            else:
                amount = easing.ease(frame_index / float(total_frames))
                frame = {
                    channel: clamp_byte(round(start[channel] + (target - start[channel]) * amount))
                    for channel, target in targets.items()
                }
            if not self._write(bus, frame):
                return

    def _write(self, bus: BusHandle, frame: Dict[int, int]) -> bool:
        if self._stopped:
            return False
        bus.write(frame)
        return True

    @staticmethod
    def _read(bus: BusHandle, channel: int) -> int:
        try:
            return clamp_byte(bus.read(channel))
        except Exception as exc:
            logger.debug("could not read channel %s (%s); starting from 0", channel, exc)
            return 0
