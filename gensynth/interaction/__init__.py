"""
Pointer and keyboard editing of parameter values.
"""

from .controller import (
    DragSession,
    Handle,
    InteractionController,
    track_x_to_value,
    value_to_track_x,
)

__all__ = [
    "DragSession",
    "Handle",
    "InteractionController",
    "track_x_to_value",
    "value_to_track_x",
]
