"""Terminal front end for ReadGrove."""

from .session_screen import SessionScreen, format_duration, render_snapshot, render_summary
from .keyboard_input import create_input_handler

__all__ = [
    "SessionScreen",
    "format_duration",
    "render_snapshot",
    "render_summary",
    "create_input_handler",
]
