from parlight.models.animation import AnimationPlan
from parlight.models.colors import clamp


def build(self, target_intensity: int, duration: float = 2000, easing: str = "linear") -> AnimationPlan:
    return AnimationPlan().add({self.channels.master_dimmer: clamp(target_intensity)}, duration, easing)
