from parlight.models.animation import AnimationPlan
from parlight.models.colors import ColorLike, resolve_color


def build(self, color: ColorLike, duration: float = 2000, easing: str = "linear") -> AnimationPlan:
    # One step, RGB only; dimmer and mode channels are left where they are.
    red, green, blue = resolve_color(color)
    return AnimationPlan().add(
        {
            self.channels.red: red,
            self.channels.green: green,
            self.channels.blue: blue,
        },
        duration,
        easing,
    )
