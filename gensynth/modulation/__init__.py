"""
Noise self-modulation for Range parameters.
"""

from .modulator import ModulationState, NoiseModulator, is_modulatable
from .noise import noise1

__all__ = [
    "ModulationState",
    "NoiseModulator",
    "is_modulatable",
    "noise1",
]
