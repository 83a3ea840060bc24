"""
Value Normalizer

Pure functions that clamp and snap raw input into valid parameter values.
Every mutation path (definition refresh, drag, keyboard step, persisted
restore, share restore) routes through these, so the value invariants hold
even for stale or adversarial input:

- Scalar: def.min <= value <= def.max, on the step grid anchored at def.min
- Range:  def.min <= min <= current <= max <= def.max
- Bounds: def.min <= min <= max <= def.max
"""

import math
from collections.abc import Mapping
from typing import Any, Optional

from .definitions import (
    BoundsDefinition,
    BoundsValue,
    Definition,
    ParamType,
    RangeDefinition,
    RangeValue,
    ScalarDefinition,
)


def to_number(value: Any, fallback: float) -> float:
    """Coerce to a finite float, or return fallback."""
    if value is None:
        return fallback
    try:
        parsed = float(value)
    except (TypeError, ValueError, OverflowError):
        return fallback
    return parsed if math.isfinite(parsed) else fallback


def is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        return False


def clamp(value: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, value))


def snap(value: float, origin: float, step: Optional[float]) -> float:
    """Round value onto the grid origin + k*step. No-op for a non-positive step."""
    if not is_finite_number(step) or step <= 0:
        return value
    steps = math.floor((value - origin) / step + 0.5)
    return origin + steps * step


def snap_to_grid(defn: Definition, value: float) -> float:
    """Snap onto the definition's grid (anchored at def.min) and keep it in bounds."""
    return clamp(snap(value, defn.min, defn.step), defn.min, defn.max)


def _field(raw: Any, name: str) -> Any:
    if isinstance(raw, Mapping):
        return raw.get(name)
    return getattr(raw, name, None)


def is_range_value(raw: Any) -> bool:
    """Structurally a range triplet: finite min, current and max."""
    if raw is None or is_finite_number(raw):
        return False
    return all(is_finite_number(_field(raw, name)) for name in ("min", "current", "max"))


def is_bounds_value(raw: Any) -> bool:
    """Structurally a bounds pair: finite min and max."""
    if raw is None or is_finite_number(raw):
        return False
    return all(is_finite_number(_field(raw, name)) for name in ("min", "max"))


def is_scalar_value(raw: Any) -> bool:
    return is_finite_number(raw)


def normalize_scalar(defn: ScalarDefinition, raw: Any) -> float:
    value = clamp(to_number(raw, defn.default_value), defn.min, defn.max)
    return snap_to_grid(defn, value)


def normalize_range_triplet(defn: RangeDefinition, raw: Any) -> RangeValue:
    """
    Normalize a {min, current, max} triplet against a Range definition.

    Parameters that forbid self-modulation have their min/max pinned to the
    definition bounds; only current is editable.
    """
    raw_current = to_number(_field(raw, "current"), defn.default_current)

    if not defn.allows_modulation:
        current = snap_to_grid(defn, clamp(raw_current, defn.min, defn.max))
        return RangeValue(min=defn.min, current=current, max=defn.max)

    lo = clamp(to_number(_field(raw, "min"), defn.default_min), defn.min, defn.max)
    hi = clamp(to_number(_field(raw, "max"), defn.default_max), defn.min, defn.max)
    lo = snap_to_grid(defn, lo)
    hi = snap_to_grid(defn, hi)
    if hi < lo:
        hi = lo

    current = clamp(raw_current, lo, hi)
    current = clamp(snap_to_grid(defn, current), lo, hi)
    return RangeValue(min=lo, current=current, max=hi)


def normalize_bounds_pair(defn: BoundsDefinition, raw: Any) -> BoundsValue:
    lo = clamp(to_number(_field(raw, "min"), defn.default_min), defn.min, defn.max)
    hi = clamp(to_number(_field(raw, "max"), defn.default_max), defn.min, defn.max)
    lo = snap_to_grid(defn, lo)
    hi = snap_to_grid(defn, hi)
    if hi < lo:
        hi = lo
    return BoundsValue(min=lo, max=hi)


def normalize_value(defn: Definition, raw: Any):
    """Dispatch to the normalizer matching the definition variant."""
    if defn.type == ParamType.RANGE:
        return normalize_range_triplet(defn, raw)
    if defn.type == ParamType.BOUNDS:
        return normalize_bounds_pair(defn, raw)
    return normalize_scalar(defn, raw)


def is_valid_shape(defn: Definition, raw: Any) -> bool:
    """Whether a stored value has the right shape for the definition variant."""
    if defn.type == ParamType.RANGE:
        return is_range_value(raw)
    if defn.type == ParamType.BOUNDS:
        return is_bounds_value(raw)
    return is_scalar_value(raw)
