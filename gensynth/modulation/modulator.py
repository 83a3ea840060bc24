"""
Noise Modulator

Per-parameter self-modulation for Range parameters. Each eligible parameter
has a ModulationState:
- speed_level: index into PARAM_NOISE_SPEEDS (0 = off)
- phase_domain: offset into the noise input space, unique among active
  states so modulated parameters don't move in lockstep

Modulation only ever rewrites the `current` field of a Range value, never
its min/max. It is globally suspended while any `current` handle drag is in
progress (reentrant counter).
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Sequence

from gensynth.config import (
    DEFAULT_PARAM_NOISE_SPEED_INDEX,
    MODULATION_EPSILON,
    PARAM_NOISE_DOMAIN_STEP,
    PARAM_NOISE_SPEEDS,
)
from gensynth.params.definitions import Definition, ParamType, RangeValue
from gensynth.params.normalize import clamp, is_finite_number
from gensynth.utils.logger import logger

from .noise import noise1


@dataclass
class ModulationState:
    speed_level: int = DEFAULT_PARAM_NOISE_SPEED_INDEX
    phase_domain: Optional[float] = None


def is_modulatable(defn: Optional[Definition]) -> bool:
    return defn is not None and defn.type == ParamType.RANGE and defn.allows_modulation


class NoiseModulator:
    """Owns modulation states and applies noise to Range `current` values."""

    def __init__(self, speeds: Sequence[float] = PARAM_NOISE_SPEEDS,
                 domain_step: float = PARAM_NOISE_DOMAIN_STEP):
        self.speeds = list(speeds)
        self.domain_step = domain_step
        self.states: Dict[str, ModulationState] = {}
        self._next_domain_seed = 1
        self._suspend_count = 0

    @property
    def level_count(self) -> int:
        """Number of non-off speed levels."""
        return len(self.speeds) - 1

    # === Phase domains ===

    def create_domain(self) -> float:
        """Draw a fresh phase domain from the monotonically increasing counter."""
        domain = self._next_domain_seed * self.domain_step
        self._next_domain_seed += 1
        return domain

    # === Speed levels ===

    def normalize_speed_level(self, level) -> int:
        """Wrap any index onto the speed table (non-numeric -> 0)."""
        count = len(self.speeds)
        if count <= 0:
            return 0
        if not is_finite_number(level):
            return 0
        return int(math.trunc(level)) % count

    def speed_for(self, key: str) -> float:
        state = self.states.get(key)
        if state is None:
            return 0.0
        return self.speeds[self.normalize_speed_level(state.speed_level)]

    def speed_level(self, key: str) -> int:
        state = self.states.get(key)
        if state is None:
            return DEFAULT_PARAM_NOISE_SPEED_INDEX
        return self.normalize_speed_level(state.speed_level)

    def set_speed_level(self, key: str, level) -> int:
        state = self.states.get(key)
        if state is None:
            state = ModulationState(phase_domain=self.create_domain())
            self.states[key] = state
        state.speed_level = self.normalize_speed_level(level)
        return state.speed_level

    def cycle_speed(self, key: str, definitions: Mapping) -> Optional[int]:
        """Advance a parameter's speed level circularly. Returns the new level."""
        if not is_modulatable(definitions.get(key)):
            return None
        level = self.set_speed_level(key, self.speed_level(key) + 1)
        logger.debug(f"'{key}' modulation level {level}", component="MOD")
        return level

    # === State reconciliation ===

    def sync(self, definitions: Iterable[Definition]) -> None:
        """
        Rebuild states for the current definitions.

        Keeps speed levels for surviving keys, prunes vanished keys, and
        guarantees every active state has a finite, unique phase domain.
        """
        next_states: Dict[str, ModulationState] = {}
        used_domains = set()

        for defn in definitions:
            if not is_modulatable(defn):
                continue
            previous = self.states.get(defn.key)
            level = self.normalize_speed_level(previous.speed_level if previous else None)
            domain = previous.phase_domain if previous else None
            if not is_finite_number(domain):
                domain = self.create_domain()
            while domain in used_domains:
                domain = self.create_domain()
            used_domains.add(domain)
            next_states[defn.key] = ModulationState(speed_level=level, phase_domain=domain)

        self.states = next_states

    def speed_levels(self) -> Dict[str, int]:
        return {key: self.normalize_speed_level(state.speed_level)
                for key, state in self.states.items()}

    def restore_speed_levels(self, saved, definitions: Mapping) -> int:
        """
        Restore speed levels from persisted data ({key: {'noiseSpeedIndex': n}}
        or {key: n}). Phase domains are regenerated, never restored.
        """
        if not isinstance(saved, Mapping):
            return 0
        applied = 0
        for key, entry in saved.items():
            if not is_modulatable(definitions.get(key)):
                continue
            if isinstance(entry, Mapping):
                level = entry.get("noiseSpeedIndex")
            else:
                level = entry
            self.set_speed_level(key, level)
            applied += 1
        return applied

    # === Drag suspension ===

    def begin_suspend(self) -> None:
        self._suspend_count += 1

    def end_suspend(self) -> None:
        if self._suspend_count > 0:
            self._suspend_count -= 1

    @property
    def suspended(self) -> bool:
        return self._suspend_count > 0

    # === Per-tick application ===

    def apply(self, frame: int, registry,
              is_locked: Optional[Callable[[str], bool]] = None) -> bool:
        """
        Drive `current` of every modulated Range parameter from noise.

        Modulated values are clamped to the parameter's [min, max] but not
        snapped to its step grid, so motion stays continuous between grid
        points. Readouts round for display, and the next normalization (a
        commit or a reload) snaps the value again.

        Args:
            frame: Logical frame counter (noise time base)
            registry: ParameterRegistry holding definitions and values
            is_locked: Optional predicate; parameters it accepts are skipped
                (e.g. while any of their handles is being dragged)

        Returns:
            True if any displayed value changed
        """
        if self.suspended:
            return False

        changed = False
        for defn in registry.definitions.values():
            if not is_modulatable(defn):
                continue
            state = self.states.get(defn.key)
            if state is None:
                continue
            speed = self.speeds[self.normalize_speed_level(state.speed_level)]
            if not speed > 0:
                continue
            if is_locked is not None and is_locked(defn.key):
                continue
            if not is_finite_number(state.phase_domain):
                state.phase_domain = self.create_domain()

            value = registry.values[defn.key]
            sample = noise1(frame * speed + state.phase_domain)
            next_current = clamp(value.min + (value.max - value.min) * sample, value.min, value.max)
            if abs(next_current - value.current) > MODULATION_EPSILON:
                registry.values[defn.key] = RangeValue(min=value.min, current=next_current, max=value.max)
                changed = True
        return changed
