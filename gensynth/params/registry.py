"""
Parameter Registry

Resolves plugin-declared parameter definitions against a runtime context
(canvas dimensions) and reconciles them with the live value store.

Raw definition format (declared by plugins):

    {
        'type': 'range',            # 'number' (default) | 'range' | 'bounds'
        'key': 'radius',
        'label': 'Radius',
        'group': 'algo',
        'min': 0,                   # number or callable(LimitContext)
        'max': lambda lim: lim.max_dim,
        'step': 1,
        'default': {'min': 0, 'current': 100, 'max': 500},
        'allow_function': True,     # range only
    }

Range default behavior:
- default omitted -> min/max use full limits, current starts at midpoint
- default is a number -> min/max use full limits, current uses default
- default is a mapping -> may set any of min/current/max

Bounds default behavior:
- default omitted -> min/max use full limits
- default is a mapping -> may set min/max
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional

from gensynth.config import DEFAULT_GROUP, DEFAULT_STEP
from gensynth.utils.logger import logger

from .definitions import (
    BoundsDefinition,
    BoundsValue,
    Definition,
    LimitContext,
    ParamType,
    RangeDefinition,
    RangeValue,
    ScalarDefinition,
    Value,
)
from .normalize import (
    clamp,
    is_finite_number,
    is_valid_shape,
    normalize_value,
    to_number,
)


def _resolve_dynamic(raw: Any, limits: LimitContext) -> Any:
    return raw(limits) if callable(raw) else raw


def _resolve_bound(raw: Any, limits: LimitContext, fallback: float) -> float:
    return to_number(_resolve_dynamic(raw, limits), fallback)


def _resolve_step(raw: Any) -> float:
    return raw if is_finite_number(raw) and raw > 0 else DEFAULT_STEP


def _raw_get(raw: Mapping, *names: str) -> Any:
    for name in names:
        if name in raw:
            return raw[name]
    return None


def _resolve_interval_defaults(raw_default: Any, lo: float, hi: float):
    """Resolve (default_min, default_max) from a mapping default."""
    default_min, default_max = lo, hi
    if isinstance(raw_default, Mapping):
        if is_finite_number(raw_default.get("min")):
            default_min = float(raw_default["min"])
        if is_finite_number(raw_default.get("max")):
            default_max = float(raw_default["max"])
        if default_max < default_min:
            default_max = default_min
    return default_min, default_max


def resolve_definition(raw: Mapping, limits: LimitContext) -> Optional[Definition]:
    """Resolve one raw definition. Entries without a key resolve to None."""
    if not isinstance(raw, Mapping) or not raw.get("key"):
        return None

    key = str(raw["key"])
    label = raw.get("label") or key
    group = raw.get("group")
    if not isinstance(group, str) or not group:
        group = DEFAULT_GROUP

    lo = _resolve_bound(raw.get("min"), limits, 0.0)
    hi = _resolve_bound(raw.get("max"), limits, lo)
    if hi < lo:
        hi = lo
    step = _resolve_step(raw.get("step"))
    param_type = raw.get("type", ParamType.NUMBER.value)

    if param_type == ParamType.RANGE.value:
        raw_default = _resolve_dynamic(raw.get("default"), limits)
        default_min, default_max = _resolve_interval_defaults(raw_default, lo, hi)
        default_current = (lo + hi) / 2
        if isinstance(raw_default, Mapping):
            if is_finite_number(raw_default.get("current")):
                default_current = float(raw_default["current"])
        elif raw_default is not None:
            default_current = to_number(raw_default, default_current)

        allow_function = _raw_get(raw, "allow_function", "allowFunction")
        return RangeDefinition(
            key=key,
            label=label,
            group=group,
            min=lo,
            max=hi,
            step=step,
            default_min=default_min,
            default_current=default_current,
            default_max=default_max,
            allow_function=allow_function is not False,
        )

    if param_type == ParamType.BOUNDS.value:
        raw_default = _resolve_dynamic(raw.get("default"), limits)
        default_min, default_max = _resolve_interval_defaults(raw_default, lo, hi)
        return BoundsDefinition(
            key=key,
            label=label,
            group=group,
            min=lo,
            max=hi,
            step=step,
            default_min=default_min,
            default_max=default_max,
        )

    if param_type != ParamType.NUMBER.value:
        logger.warning(f"Unknown parameter type {param_type!r} for '{key}', treating as number",
                       component="PARAMS")

    default_source = raw["default"] if "default" in raw else raw.get("default_value")
    default_value = clamp(_resolve_bound(default_source, limits, lo), lo, hi)
    return ScalarDefinition(
        key=key,
        label=label,
        group=group,
        min=lo,
        max=hi,
        step=step,
        default_value=default_value,
    )


def default_raw_value(defn: Definition):
    """Unnormalized default value for a definition."""
    if defn.type == ParamType.RANGE:
        return RangeValue(min=defn.default_min, current=defn.default_current, max=defn.default_max)
    if defn.type == ParamType.BOUNDS:
        return BoundsValue(min=defn.default_min, max=defn.default_max)
    return defn.default_value


class ParameterRegistry:
    """
    Authoritative map of parameter definitions plus the live value store.

    Values persist across a definition refresh when the key is unchanged and
    the stored value is still structurally valid; they are re-normalized
    against the new bounds. Keys that disappear are dropped.
    """

    def __init__(self):
        self.definitions: Dict[str, Definition] = {}
        self.values: Dict[str, Value] = {}

    def __contains__(self, key: str) -> bool:
        return key in self.definitions

    def __iter__(self):
        return iter(self.definitions.values())

    def resolve(
        self,
        raw_defs: Iterable[Mapping],
        limits: LimitContext,
        use_defaults: bool,
        preserve_keys: Optional[Iterable[str]] = None,
    ) -> Dict[str, Definition]:
        """
        Resolve raw definitions and reconcile the value store.

        Args:
            raw_defs: Plugin-declared definitions (later duplicates win)
            limits: Canvas-derived context for dynamic min/max/default
            use_defaults: Reset values to definition defaults
            preserve_keys: Keys exempt from the reset when use_defaults is set

        Returns:
            The new definition map
        """
        preserved = set(preserve_keys or ())
        next_defs: Dict[str, Definition] = {}

        for raw in raw_defs:
            defn = resolve_definition(raw, limits)
            if defn is None:
                continue
            next_defs[defn.key] = defn

            existing = self.values.get(defn.key)
            reset = use_defaults and defn.key not in preserved
            if reset or not is_valid_shape(defn, existing):
                self.values[defn.key] = normalize_value(defn, default_raw_value(defn))
            else:
                self.values[defn.key] = normalize_value(defn, existing)

        for key in list(self.values):
            if key not in next_defs:
                del self.values[key]

        self.definitions = next_defs
        logger.debug(f"Resolved {len(next_defs)} parameter definitions", component="PARAMS")
        return next_defs

    def get(self, key: str) -> Optional[Definition]:
        return self.definitions.get(key)

    def value(self, key: str) -> Optional[Value]:
        return self.values.get(key)

    def set_value(self, key: str, raw: Any) -> Optional[Value]:
        """Normalize and store a value. Unknown keys are ignored."""
        defn = self.definitions.get(key)
        if defn is None:
            return None
        value = normalize_value(defn, raw)
        self.values[key] = value
        return value

    def default_value(self, key: str) -> Optional[Value]:
        defn = self.definitions.get(key)
        if defn is None:
            return None
        return normalize_value(defn, default_raw_value(defn))

    def is_default(self, key: str) -> bool:
        return self.values.get(key) == self.default_value(key)

    def reset_to_defaults(self) -> None:
        for defn in self.definitions.values():
            self.values[defn.key] = normalize_value(defn, default_raw_value(defn))

    def keys(self) -> List[str]:
        return list(self.definitions)

    def snapshot(self) -> Dict[str, Any]:
        """
        Plugin-facing copy of the values.

        Range -> current number, Bounds -> fresh {'min', 'max'} dict,
        Scalar -> number. Mutating the result never touches the store.
        """
        result: Dict[str, Any] = {}
        for defn in self.definitions.values():
            value = self.values[defn.key]
            if defn.type == ParamType.RANGE:
                result[defn.key] = value.current
            elif defn.type == ParamType.BOUNDS:
                result[defn.key] = {"min": value.min, "max": value.max}
            else:
                result[defn.key] = value
        return result

    def serialize_values(self, non_default_only: bool = False) -> Dict[str, Any]:
        """JSON-compatible values: numbers, {min,current,max} or {min,max}."""
        result: Dict[str, Any] = {}
        for defn in self.definitions.values():
            if non_default_only and self.is_default(defn.key):
                continue
            value = self.values[defn.key]
            result[defn.key] = value.to_dict() if hasattr(value, "to_dict") else value
        return result

    def apply_values(self, saved: Any) -> int:
        """
        Restore values from an external mapping.

        Unknown keys and structurally invalid entries are ignored. Returns
        the number of keys applied.
        """
        if not isinstance(saved, Mapping):
            return 0

        applied = 0
        for defn in self.definitions.values():
            if defn.key not in saved:
                continue
            candidate = saved[defn.key]
            if defn.type == ParamType.NUMBER:
                number = to_number(candidate, None)
                if number is None:
                    continue
                self.values[defn.key] = normalize_value(defn, number)
            elif is_valid_shape(defn, candidate):
                self.values[defn.key] = normalize_value(defn, candidate)
            else:
                logger.debug(f"Ignoring malformed saved value for '{defn.key}'", component="PARAMS")
                continue
            applied += 1
        return applied
