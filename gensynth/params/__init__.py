"""
Parameter model - definitions, normalization and the value registry.
"""

from .definitions import (
    BoundsDefinition,
    BoundsValue,
    LimitContext,
    ParamType,
    RangeDefinition,
    RangeValue,
    ScalarDefinition,
)
from .normalize import (
    clamp,
    normalize_bounds_pair,
    normalize_range_triplet,
    normalize_scalar,
    normalize_value,
    snap,
    to_number,
)
from .registry import ParameterRegistry, resolve_definition

__all__ = [
    "BoundsDefinition",
    "BoundsValue",
    "LimitContext",
    "ParamType",
    "RangeDefinition",
    "RangeValue",
    "ScalarDefinition",
    "clamp",
    "normalize_bounds_pair",
    "normalize_range_triplet",
    "normalize_scalar",
    "normalize_value",
    "snap",
    "to_number",
    "ParameterRegistry",
    "resolve_definition",
]
