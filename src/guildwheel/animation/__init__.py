"""Animation module for the wheel."""

from guildwheel.animation.easing import Easing, easing_names, get_easing, interpolate
from guildwheel.animation.spin import SpinPlan, choose_target_angle, plan_spin

__all__ = [
    # Easing
    "Easing",
    "get_easing",
    "easing_names",
    "interpolate",
    # Spin
    "SpinPlan",
    "choose_target_angle",
    "plan_spin",
]
