"""
Arcs - fans of concentric arcs around a random centre.

Radii interpolate linearly from startRadius to endRadius across arcCount
arcs; the angular extent is `spread` degrees centred on `direction`.
"""

import numpy as np
from PyQt5.QtCore import QRectF, Qt
from PyQt5.QtGui import QPen

from gensynth.params.normalize import clamp, to_number
from .base import Plugin
from .ink import resolve_ink_style


def arc_radii(start_radius: float, end_radius: float, count: int) -> np.ndarray:
    """Radii for `count` arcs; a single arc sits halfway between the two."""
    if count <= 0:
        return np.zeros(0)
    if count == 1:
        return np.array([max(0.0, (start_radius + end_radius) * 0.5)])
    return np.maximum(0.0, np.linspace(start_radius, end_radius, count))


class ArcsPlugin(Plugin):
    id = "arcs"
    name = "Arcs"

    def init(self, context):
        return {
            "parameters": [
                {"type": "range", "key": "spread", "label": "Spread",
                 "min": 0, "max": 360, "default": 60, "step": 1},
                {"type": "range", "key": "direction", "label": "Direction",
                 "min": 0, "max": 360, "default": 0, "step": 1},
                {"type": "range", "key": "startRadius", "label": "Start Radius",
                 "min": 0, "max": 1000, "default": 100, "step": 1},
                {"type": "range", "key": "endRadius", "label": "End Radius",
                 "min": 0, "max": 1000, "default": 100, "step": 1},
                {"type": "range", "key": "arcCount", "label": "Arc Count",
                 "min": 0, "max": 100, "default": 10, "step": 1},
            ],
            "state": {"rng": np.random.default_rng()},
        }

    def run(self, context):
        params = context.params
        arc_count = int(clamp(round(to_number(params.get("arcCount"), 0.0)), 0, 100))
        if arc_count <= 0 or context.surface is None:
            return

        spread = clamp(to_number(params.get("spread"), 0.0), 0, 360)
        direction = clamp(to_number(params.get("direction"), 0.0), 0, 360)
        radii = arc_radii(max(0.0, to_number(params.get("startRadius"), 0.0)),
                          max(0.0, to_number(params.get("endRadius"), 0.0)),
                          arc_count)

        rng = context.state["rng"]
        cx = float(rng.uniform(0, context.width))
        cy = float(rng.uniform(0, context.height))
        line_thickness, color = resolve_ink_style(params)

        pen = QPen(color)
        pen.setWidthF(line_thickness)
        pen.setCapStyle(Qt.RoundCap)

        # Qt angles are counter-clockwise in 1/16 degree; canvas angles run clockwise
        start_angle = int(round(-(direction - spread * 0.5) * 16))
        span_angle = int(round(-spread * 16))
        with context.surface.painter() as painter:
            painter.setPen(pen)
            painter.setBrush(Qt.NoBrush)
            for radius in radii:
                r = float(radius)
                painter.drawArc(QRectF(cx - r, cy - r, r * 2, r * 2), start_angle, span_angle)

    def restart(self, context):
        context.state["rng"] = np.random.default_rng()
