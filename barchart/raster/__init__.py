from .canvas import draw_hline, draw_vline, fill_rect, new_canvas
from .draw_text import draw_text, text_size

__all__ = [
    "draw_hline",
    "draw_text",
    "draw_vline",
    "fill_rect",
    "new_canvas",
    "text_size",
]
