"""
Circles - outlines of random circles scattered around the canvas.
"""

import numpy as np
from PyQt5.QtCore import QPointF, Qt
from PyQt5.QtGui import QPen

from gensynth.params.normalize import clamp, to_number
from .base import Plugin
from .ink import resolve_ink_style

CIRCLES_PER_FRAME = 3


class CirclesPlugin(Plugin):
    id = "circles"
    name = "Circles"

    def init(self, context):
        return {
            "parameters": [
                {"type": "range", "key": "radius", "label": "Radius",
                 "min": 0, "max": lambda limits: limits.max_dim * 2,
                 "default": lambda limits: limits.min_dim / 2, "step": 1},
                {"type": "number", "key": "count", "label": "Circles Per Step",
                 "min": 1, "max": 20, "default": CIRCLES_PER_FRAME, "step": 1},
            ],
            "state": {"rng": np.random.default_rng()},
        }

    def run(self, context):
        if context.surface is None:
            return
        params = context.params
        radius = max(0.0, to_number(params.get("radius"), 0.0))
        count = int(clamp(to_number(params.get("count"), CIRCLES_PER_FRAME), 1, 20))
        line_thickness, color = resolve_ink_style(params)

        rng = context.state["rng"]
        # Centres may sit up to half a radius off-canvas
        offset = radius * 0.5
        xs = rng.uniform(-offset, context.width + offset, count)
        ys = rng.uniform(-offset, context.height + offset, count)

        pen = QPen(color)
        pen.setWidthF(line_thickness)
        pen.setCapStyle(Qt.RoundCap)
        with context.surface.painter() as painter:
            painter.setPen(pen)
            painter.setBrush(Qt.NoBrush)
            for x, y in zip(xs, ys):
                painter.drawEllipse(QPointF(float(x), float(y)), radius, radius)

    def restart(self, context):
        context.state["rng"] = np.random.default_rng()
