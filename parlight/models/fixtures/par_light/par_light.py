import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

from parlight.errors import InvalidColor
from parlight.models.animation import AnimationPlan
from parlight.models.colors import (
    MODES,
    ColorLike,
    clamp,
    is_valid_color,
    list_colors,
    mode_code,
    normalize_mode,
    resolve_color,
    scale_rgb,
)
from parlight.models.fixture import STROBE_MIN, ChannelMap, FixtureState
from parlight.services.animation_engine import AnimationEngine
from parlight.services.bus import BusHandle
from .fade import build as build_fade
from .color_cycle import build as build_color_cycle
from .pulse import build as build_pulse
from .strobe import build as build_strobe
from .rainbow import build as build_rainbow
from .dimmer_fade import build as build_dimmer_fade

logger = logging.getLogger(__name__)

OnFinish = Optional[Callable[[], None]]


class ParLight:
    """7-channel LED par (B262): dimmer, red, green, blue, strobe, mode, hue speed.

    Every setter clamps its input, stores it in `current_state` and pushes the
    changed channels to the bus in one write. At most one animation runs at a
    time; starting another stops the current one first.
    """

    def __init__(
        self,
        universe: BusHandle,
        start_channel: int = 1,
        engine_factory: Callable[[], AnimationEngine] = AnimationEngine,
    ):
        self.universe = universe
        self.start_channel = int(start_channel)
        self.channels = ChannelMap.from_start_channel(self.start_channel)
        self.current_state = FixtureState()
        self.current_animation: Optional[AnimationEngine] = None
        self._engine_factory = engine_factory

    # Basic control

    def turn_on(self, intensity: int = 255, color: Optional[str] = None) -> "ParLight":
        self.set_master_dimmer(intensity)
        if color:
            # Color mix stays at full scale; brightness lives on the dimmer channel.
            self.set_color(color)
        return self

    def turn_off(self) -> "ParLight":
        self.set_master_dimmer(0)
        self.set_color("off")
        return self

    def set_master_dimmer(self, value: int) -> "ParLight":
        self.current_state.master_dimmer = clamp(value)
        self._update_channels("master_dimmer")
        return self

    def set_rgb(self, red: int, green: int, blue: int) -> "ParLight":
        self.current_state.red = clamp(red)
        self.current_state.green = clamp(green)
        self.current_state.blue = clamp(blue)
        self._update_channels(["red", "green", "blue"])
        return self

    def set_strobe(self, speed: int = 0) -> "ParLight":
        if speed == 0:
            self.current_state.strobe = 0
        else:
            self.current_state.strobe = clamp(speed, STROBE_MIN, 255)
        self._update_channels("strobe")
        return self

    def set_color(self, color_name: str, intensity: int = 255) -> "ParLight":
        if not isinstance(color_name, str):
            raise InvalidColor(color_name, list_colors())
        red, green, blue = scale_rgb(resolve_color(color_name), intensity)
        self.set_rgb(red, green, blue)
        return self

    # Colors

    @staticmethod
    def get_available_colors() -> List[str]:
        return list_colors()

    @staticmethod
    def is_valid_color(color_name) -> bool:
        return is_valid_color(color_name)

    # Modes

    def set_manual_mode(self) -> "ParLight":
        self.current_state.mode = MODES["manual"]
        self._update_channels("mode")
        return self

    def set_hue_select(self, hue: int = 128) -> "ParLight":
        return self._set_hue_mode("hue-select", hue)

    def set_hue_shift(self, speed: int = 128) -> "ParLight":
        return self._set_hue_mode("hue-shift", speed)

    def set_hue_pulse(self, speed: int = 128) -> "ParLight":
        return self._set_hue_mode("hue-pulse", speed)

    def set_hue_transition(self, speed: int = 128) -> "ParLight":
        return self._set_hue_mode("hue-transition", speed)

    def set_sound_control(self, sensitivity: int = 128) -> "ParLight":
        return self._set_hue_mode("sound-control", sensitivity)

    def set_mode(self, mode: str, value: int = 128) -> "ParLight":
        """Select a mode by name (manual, hue-select, ...); `value` feeds the hue-speed channel."""
        if mode_code(mode) == MODES["manual"]:
            return self.set_manual_mode()
        return self._set_hue_mode(normalize_mode(mode), value)

    def _set_hue_mode(self, name: str, value: int) -> "ParLight":
        self.current_state.mode = MODES[name]
        self.current_state.hue_speed = clamp(value)
        self._update_channels(["mode", "hue_speed"])
        return self

    # Animation plans (pure, nothing is written to the bus)

    def create_fade_animation(self, target_color: ColorLike, duration: float = 2000, easing: str = "linear") -> AnimationPlan:
        return build_fade(self, target_color, duration, easing)

    def create_color_cycle_animation(
        self,
        colors: Optional[Sequence[ColorLike]] = None,
        step_duration: float = 1000,
        easing: str = "linear",
    ) -> AnimationPlan:
        return build_color_cycle(self, colors, step_duration, easing)

    def create_pulse_animation(
        self,
        color: ColorLike = "white",
        min_intensity: int = 50,
        max_intensity: int = 255,
        pulse_duration: float = 2000,
        easing: str = "inOutSine",
    ) -> AnimationPlan:
        return build_pulse(self, color, min_intensity, max_intensity, pulse_duration, easing)

    def create_strobe_animation(self, color: ColorLike = "white", on_duration: float = 100, off_duration: float = 100) -> AnimationPlan:
        return build_strobe(self, color, on_duration, off_duration)

    def create_rainbow_animation(self, cycle_duration: float = 5000, steps: int = 36) -> AnimationPlan:
        return build_rainbow(self, cycle_duration, steps)

    def create_dimmer_fade(self, target_intensity: int, duration: float = 2000, easing: str = "linear") -> AnimationPlan:
        return build_dimmer_fade(self, target_intensity, duration, easing)

    # Animation lifecycle

    def start_animation(self, animation: AnimationPlan, on_finish: OnFinish = None) -> "ParLight":
        self.stop_animation()
        engine = self._engine_factory()
        self.current_animation = engine
        try:
            engine.run(animation, self.universe, self._finished_callback(engine, on_finish))
        except Exception:
            if self.current_animation is engine:
                self.current_animation = None
            raise
        logger.info(
            "animation started: %d step(s), %s",
            len(animation.steps),
            "looping" if animation.is_infinite else f"{animation.loop} pass(es)",
        )
        return self

    def stop_animation(self) -> "ParLight":
        if self.current_animation is not None:
            animation = self.current_animation
            self.current_animation = None
            animation.stop()
            logger.info("animation stopped")
        return self

    def is_animating(self) -> bool:
        return self.current_animation is not None

    def _finished_callback(self, engine: AnimationEngine, on_finish: OnFinish) -> Callable[[], None]:
        def finished() -> None:
            # A stale engine must never clear a newer animation.
            if self.current_animation is not engine:
                return
            self.current_animation = None
            logger.info("animation finished")
            if on_finish is not None:
                on_finish()

        return finished

    # Convenience: create + start

    def fade_to_color(self, color: ColorLike, duration: float = 2000, easing: str = "linear", on_finish: OnFinish = None) -> "ParLight":
        return self.start_animation(self.create_fade_animation(color, duration, easing), on_finish)

    def start_color_cycle(
        self,
        colors: Optional[Sequence[ColorLike]] = None,
        step_duration: float = 1000,
        easing: str = "linear",
        on_finish: OnFinish = None,
    ) -> "ParLight":
        return self.start_animation(self.create_color_cycle_animation(colors, step_duration, easing), on_finish)

    def start_pulse(
        self,
        color: ColorLike = "white",
        min_intensity: int = 50,
        max_intensity: int = 255,
        pulse_duration: float = 2000,
        easing: str = "inOutSine",
        on_finish: OnFinish = None,
    ) -> "ParLight":
        return self.start_animation(
            self.create_pulse_animation(color, min_intensity, max_intensity, pulse_duration, easing),
            on_finish,
        )

    def start_strobe(
        self,
        color: ColorLike = "white",
        on_duration: float = 100,
        off_duration: float = 100,
        on_finish: OnFinish = None,
    ) -> "ParLight":
        return self.start_animation(self.create_strobe_animation(color, on_duration, off_duration), on_finish)

    def start_rainbow(self, cycle_duration: float = 5000, steps: int = 36, on_finish: OnFinish = None) -> "ParLight":
        return self.start_animation(self.create_rainbow_animation(cycle_duration, steps), on_finish)

    def fade_dimmer(self, target_intensity: int, duration: float = 2000, easing: str = "linear", on_finish: OnFinish = None) -> "ParLight":
        return self.start_animation(self.create_dimmer_fade(target_intensity, duration, easing), on_finish)

    # Status

    def is_connected(self) -> bool:
        try:
            dim = int(self.universe.read(self.channels.master_dimmer))
        except Exception as exc:
            logger.debug("DMX read-back failed: %s", exc)
            return False
        return 0 <= dim <= 255

    def snapshot(self) -> Dict[str, int]:
        return self.current_state.snapshot()

    def to_dmx(self) -> Dict[int, int]:
        """Current state as DMX mapping: 1-based channel -> 0-255."""
        return {self.channels.channel(name): value for name, value in self.current_state.model_dump().items()}

    def _update_channels(self, channels: Union[str, Iterable[str]]) -> None:
        if isinstance(channels, str):
            channels = [channels]
        update = {self.channels.channel(name): getattr(self.current_state, name) for name in channels}
        logger.debug("DMX update %s", update)
        self.universe.write(update)
