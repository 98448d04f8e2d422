"""Graphics for the wheel: buffer primitives and the wheel renderer."""

from guildwheel.graphics.primitives import Buffer, Color, new_buffer
from guildwheel.graphics.wheel import DEFAULT_STYLE, WheelStyle, render_wheel, segment_index_map

__all__ = [
    "Buffer",
    "Color",
    "new_buffer",
    "DEFAULT_STYLE",
    "WheelStyle",
    "render_wheel",
    "segment_index_map",
]
