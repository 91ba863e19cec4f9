from parlight.models.animation import AnimationPlan
from parlight.models.colors import ColorLike, resolve_color, scale_rgb


def build(
    self,
    color: ColorLike = "white",
    min_intensity: int = 50,
    max_intensity: int = 255,
    pulse_duration: float = 2000,
    easing: str = "inOutSine",
) -> AnimationPlan:
    # Down to the min-scaled color, back up to the max-scaled color, forever.
    rgb = resolve_color(color)
    half = pulse_duration / 2
    plan = AnimationPlan(loop=None)
    for intensity in (min_intensity, max_intensity):
        red, green, blue = scale_rgb(rgb, intensity)
        plan.add(
            {
                self.channels.red: red,
                self.channels.green: green,
                self.channels.blue: blue,
            },
            half,
            easing,
        )
    return plan
