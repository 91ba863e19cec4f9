from parlight.models.animation import AnimationPlan
from parlight.models.colors import hsv_to_rgb


def build(self, cycle_duration: float = 5000, steps: int = 36) -> AnimationPlan:
    steps = int(steps)
    if steps < 1:
        raise ValueError("steps must be >= 1")

    plan = AnimationPlan(loop=None)
    step_duration = cycle_duration / steps
    for i in range(steps):
        red, green, blue = hsv_to_rgb(i / steps, 1, 1)
        plan.add(
            {
                self.channels.red: red,
                self.channels.green: green,
                self.channels.blue: blue,
            },
            step_duration,
            "linear",
        )
    return plan
