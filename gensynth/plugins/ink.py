"""
Shared "ink" parameters.

Every plugin gets these appended to its own definitions. Their keys are
carried over when switching plugins, so stroke settings follow the user.
"""

from typing import Mapping, Tuple

from PyQt5.QtGui import QColor

from gensynth.config import INK_GROUP
from gensynth.params.normalize import clamp, to_number

INK_PARAMETER_DEFS = [
    {"type": "range", "key": "lineThickness", "label": "Line Thickness",
     "min": 0.5, "max": 10, "default": 1, "step": 0.1, "group": INK_GROUP},
    {"type": "range", "key": "opacity", "label": "Opacity",
     "min": 0.01, "max": 1, "default": 0.5, "step": 0.01, "group": INK_GROUP},
    {"type": "range", "key": "hue", "label": "Hue",
     "min": 0, "max": 360, "default": 0, "step": 1, "group": INK_GROUP},
    {"type": "range", "key": "saturation", "label": "Saturation",
     "min": 0, "max": 100, "default": 0, "step": 1, "group": INK_GROUP},
    {"type": "range", "key": "lightness", "label": "Lightness",
     "min": 0, "max": 100, "default": 0, "step": 1, "group": INK_GROUP},
]

INK_PARAMETER_KEYS = frozenset(d["key"] for d in INK_PARAMETER_DEFS)

# Keys shown with a colour swatch in the HUD
INK_SWATCH_KEYS = frozenset(("hue", "saturation", "lightness"))


def hsl_components(params: Mapping) -> Tuple[int, int, int]:
    """Rounded (hue, saturation%, lightness%) from a parameter snapshot."""
    hue = to_number(params.get("hue"), 0.0) % 360
    saturation = clamp(to_number(params.get("saturation"), 0.0), 0, 100)
    lightness = clamp(to_number(params.get("lightness"), 0.0), 0, 100)
    return int(hue + 0.5) % 360, int(saturation + 0.5), int(lightness + 0.5)


def resolve_ink_style(params: Mapping) -> Tuple[float, QColor]:
    """Line thickness and stroke colour (with alpha) for a parameter snapshot."""
    line_thickness = max(0.01, to_number(params.get("lineThickness"), 1.0) or 1.0)
    opacity = clamp(to_number(params.get("opacity"), 0.0), 0.0, 1.0)
    hue, saturation, lightness = hsl_components(params)

    color = QColor.fromHslF(hue / 360.0, saturation / 100.0, lightness / 100.0, opacity)
    return line_thickness, color
