from parlight.models.animation import AnimationPlan
from parlight.models.colors import ColorLike, resolve_color


def build(self, color: ColorLike = "white", on_duration: float = 100, off_duration: float = 100) -> AnimationPlan:
    # Software strobe on the RGB channels; the fixture's own strobe channel is untouched.
    red, green, blue = resolve_color(color)
    return (
        AnimationPlan(loop=None)
        .add({self.channels.red: red, self.channels.green: green, self.channels.blue: blue}, on_duration, "linear")
        .add({self.channels.red: 0, self.channels.green: 0, self.channels.blue: 0}, off_duration, "linear")
    )
