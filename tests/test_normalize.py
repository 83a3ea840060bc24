"""
Value Normalizer Tests

Tests for:
- snap/clamp/to_number primitives
- Scalar, range and bounds normalization
- Invariants and idempotence under adversarial input
"""
import math

import pytest

from gensynth.params.definitions import (
    BoundsDefinition,
    BoundsValue,
    RangeDefinition,
    RangeValue,
    ScalarDefinition,
)
from gensynth.params.normalize import (
    clamp,
    is_bounds_value,
    is_range_value,
    is_scalar_value,
    normalize_bounds_pair,
    normalize_range_triplet,
    normalize_scalar,
    normalize_value,
    snap,
    to_number,
)


def make_range(**overrides):
    values = dict(key="r", min=0, max=100, step=1,
                  default_min=20, default_current=50, default_max=80)
    values.update(overrides)
    return RangeDefinition(**values)


def make_bounds(**overrides):
    values = dict(key="b", min=0, max=100, step=5, default_min=10, default_max=60)
    values.update(overrides)
    return BoundsDefinition(**values)


def make_scalar(**overrides):
    values = dict(key="n", min=0, max=10, step=2, default_value=4)
    values.update(overrides)
    return ScalarDefinition(**values)


def on_grid(value, origin, step):
    steps = (value - origin) / step
    return abs(steps - round(steps)) < 1e-9


# =============================================================================
# PRIMITIVES
# =============================================================================

class TestPrimitives:
    """snap, clamp and to_number."""

    def test_snap_rounds_to_nearest_grid_point(self):
        assert snap(7, 0, 5) == 5
        assert snap(8, 0, 5) == 10

    def test_snap_half_rounds_up(self):
        assert snap(7.5, 0, 5) == 10

    def test_snap_grid_anchored_at_origin(self):
        """Grid is origin + k*step, not multiples of step."""
        assert snap(4, 1, 2) == 5

    @pytest.mark.parametrize("step", [0, -1, None, float("nan")])
    def test_snap_without_positive_step_is_identity(self, step):
        assert snap(3.3, 0, step) == 3.3

    def test_clamp(self):
        assert clamp(-1, 0, 10) == 0
        assert clamp(11, 0, 10) == 10
        assert clamp(5, 0, 10) == 5

    def test_to_number_parses_numeric_strings(self):
        assert to_number("2.5", 0) == 2.5

    @pytest.mark.parametrize("raw", [None, "abc", float("nan"), float("inf"), {}, [], 10 ** 400])
    def test_to_number_falls_back(self, raw):
        assert to_number(raw, 4) == 4

    def test_shape_checks(self):
        assert is_range_value({"min": 1, "current": 2, "max": 3})
        assert is_range_value(RangeValue(1, 2, 3))
        assert not is_range_value({"min": 1, "max": 3})
        assert not is_range_value(5)
        assert is_bounds_value({"min": 1, "max": 3})
        assert not is_bounds_value({"min": 1, "max": float("nan")})
        assert is_scalar_value(3)
        assert not is_scalar_value(True)
        assert not is_scalar_value("3")
        assert not is_scalar_value(10 ** 400)
        assert not is_range_value({"min": 1, "current": 10 ** 400, "max": 3})


# =============================================================================
# SCALAR
# =============================================================================

class TestNormalizeScalar:
    """Clamp then snap."""

    def test_snaps_to_step(self):
        assert normalize_scalar(make_scalar(), 7.1) == 8

    def test_clamps_above_max(self):
        assert normalize_scalar(make_scalar(), 99) == 10

    def test_clamps_below_min(self):
        assert normalize_scalar(make_scalar(), -3) == 0

    def test_non_numeric_uses_default(self):
        assert normalize_scalar(make_scalar(), "abc") == 4


# =============================================================================
# RANGE
# =============================================================================

class TestNormalizeRange:
    """Range triplets keep def.min <= min <= current <= max <= def.max."""

    def test_valid_triplet_unchanged(self):
        assert normalize_range_triplet(make_range(), {"min": 20, "current": 50, "max": 80}) == RangeValue(20, 50, 80)

    def test_inverted_interval_collapses_onto_min(self):
        result = normalize_range_triplet(make_range(), {"min": 90, "current": 50, "max": 30})
        assert result == RangeValue(90, 90, 90)

    def test_current_clamped_into_interval(self):
        result = normalize_range_triplet(make_range(), {"min": 20, "current": 95, "max": 80})
        assert result == RangeValue(20, 80, 80)

    def test_missing_fields_use_defaults(self):
        assert normalize_range_triplet(make_range(), {}) == RangeValue(20, 50, 80)

    def test_accepts_range_value_objects(self):
        assert normalize_range_triplet(make_range(), RangeValue(10.4, 30.6, 70)) == RangeValue(10, 31, 70)

    def test_fixed_range_pins_bounds(self):
        """Parameters that forbid modulation keep min/max at the definition bounds."""
        defn = make_range(min=0, max=10, default_min=0, default_current=4, default_max=10,
                          allow_function=False)
        result = normalize_range_triplet(defn, {"min": 3, "current": 7.4, "max": 5})
        assert result == RangeValue(0, 7, 10)

    def test_fractional_step(self):
        defn = make_range(min=0.5, max=10, step=0.1, default_min=0.5, default_current=1,
                          default_max=10)
        result = normalize_range_triplet(defn, {"min": 0.5, "current": 1.04, "max": 10})
        assert result.current == pytest.approx(1.0)

    @pytest.mark.parametrize("raw", [
        {"min": -50, "current": 500, "max": 1e9},
        {"min": 99.6, "current": 0, "max": 0.2},
        {"min": float("nan"), "current": float("inf"), "max": "x"},
        {"min": 33.3, "current": 33.4, "max": 33.5},
    ])
    def test_invariants_and_idempotence(self, raw):
        defn = make_range(min=1, max=99, step=2, default_min=1, default_current=49, default_max=99)
        result = normalize_range_triplet(defn, raw)
        assert defn.min <= result.min <= result.current <= result.max <= defn.max
        for part in (result.min, result.current, result.max):
            assert on_grid(part, defn.min, defn.step)
        assert normalize_range_triplet(defn, result) == result


# =============================================================================
# BOUNDS
# =============================================================================

class TestNormalizeBounds:
    """Bounds pairs keep def.min <= min <= max <= def.max."""

    def test_snaps_both_ends(self):
        assert normalize_bounds_pair(make_bounds(), {"min": 12, "max": 58}) == BoundsValue(10, 60)

    def test_inverted_pair_collapses(self):
        assert normalize_bounds_pair(make_bounds(), {"min": 62, "max": 13}) == BoundsValue(60, 60)

    def test_out_of_range_clamped(self):
        assert normalize_bounds_pair(make_bounds(), {"min": -20, "max": 400}) == BoundsValue(0, 100)

    def test_idempotent(self):
        once = normalize_bounds_pair(make_bounds(), {"min": 37, "max": 81})
        assert normalize_bounds_pair(make_bounds(), once) == once


class TestNormalizeDispatch:
    """normalize_value picks the normalizer for the definition variant."""

    def test_dispatch(self):
        assert normalize_value(make_scalar(), 3) == 4
        assert isinstance(normalize_value(make_range(), {}), RangeValue)
        assert isinstance(normalize_value(make_bounds(), {}), BoundsValue)

    def test_results_are_finite(self):
        result = normalize_value(make_range(), {"current": float("nan")})
        assert all(math.isfinite(v) for v in (result.min, result.current, result.max))
