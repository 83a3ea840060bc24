"""
Parameter definitions and values.

Three definition variants, keyed by a unique string key:
- ScalarDefinition: a single number
- RangeDefinition: editable sub-interval (min/max) with a live point (current)
- BoundsDefinition: editable sub-interval with no live point

Definitions are immutable and recreated whenever the plugin is (re)initialized
or the canvas is resized, since min/max may depend on canvas dimensions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from gensynth.config import DEFAULT_GROUP, INK_GROUP


class ParamType(str, Enum):
    """Parameter definition variants (matches the declared 'type' string)."""
    NUMBER = "number"
    RANGE = "range"
    BOUNDS = "bounds"


@dataclass(frozen=True)
class LimitContext:
    """Runtime context for context-dependent min/max/default."""
    min_dim: float
    max_dim: float

    @classmethod
    def from_size(cls, width: float, height: float) -> "LimitContext":
        return cls(min_dim=min(width, height), max_dim=max(width, height))


@dataclass(frozen=True)
class ScalarDefinition:
    key: str
    min: float
    max: float
    step: float
    default_value: float
    label: str = ""
    group: str = DEFAULT_GROUP

    type = ParamType.NUMBER

    @property
    def allows_modulation(self) -> bool:
        return False

    @property
    def can_adjust_bounds(self) -> bool:
        return False


@dataclass(frozen=True)
class RangeDefinition:
    key: str
    min: float
    max: float
    step: float
    default_min: float
    default_current: float
    default_max: float
    allow_function: bool = True
    label: str = ""
    group: str = DEFAULT_GROUP

    type = ParamType.RANGE

    @property
    def allows_modulation(self) -> bool:
        """Noise self-modulation may drive this parameter's current value."""
        return self.allow_function is not False

    @property
    def can_adjust_bounds(self) -> bool:
        return self.allows_modulation


@dataclass(frozen=True)
class BoundsDefinition:
    key: str
    min: float
    max: float
    step: float
    default_min: float
    default_max: float
    label: str = ""
    group: str = DEFAULT_GROUP

    type = ParamType.BOUNDS

    @property
    def allows_modulation(self) -> bool:
        return False

    @property
    def can_adjust_bounds(self) -> bool:
        return True


@dataclass(frozen=True)
class RangeValue:
    """Live value of a Range parameter: min <= current <= max."""
    min: float
    current: float
    max: float

    def to_dict(self) -> dict:
        return {"min": self.min, "current": self.current, "max": self.max}


@dataclass(frozen=True)
class BoundsValue:
    """Live value of a Bounds parameter: min <= max."""
    min: float
    max: float

    def to_dict(self) -> dict:
        return {"min": self.min, "max": self.max}


Definition = Union[ScalarDefinition, RangeDefinition, BoundsDefinition]
Value = Union[float, RangeValue, BoundsValue]


def is_ink_definition(defn: Definition) -> bool:
    return defn.group == INK_GROUP
