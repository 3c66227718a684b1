from .drawing import draw_line_fit, draw_correspondence_arrows, draw_status_text

__all__ = [
    "draw_line_fit", "draw_correspondence_arrows", "draw_status_text",
]
