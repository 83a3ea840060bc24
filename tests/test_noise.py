"""
Value Noise Tests

noise1 must be bounded to [0, 1), continuous, reproducible and accept
both scalars and numpy arrays.
"""
import numpy as np

from gensynth.modulation.noise import hash1, noise1, smoothstep


class TestNoise:
    """1D value noise properties."""

    def test_range(self):
        samples = noise1(np.linspace(-500, 500, 20001))
        assert samples.min() >= 0.0
        assert samples.max() < 1.0

    def test_scalar_returns_float(self):
        assert isinstance(noise1(3.7), float)

    def test_array_returns_array(self):
        result = noise1(np.array([0.5, 1.5]))
        assert isinstance(result, np.ndarray)
        assert result.shape == (2,)

    def test_reproducible(self):
        assert noise1(123.456) == noise1(123.456)

    def test_lattice_points_match_hash(self):
        for i in range(-3, 4):
            assert noise1(float(i)) == float(hash1(float(i)))

    def test_continuous(self):
        xs = np.linspace(0, 50, 50001)
        assert np.max(np.abs(np.diff(noise1(xs)))) < 0.01

    def test_not_constant(self):
        assert np.std(noise1(np.arange(0.5, 100.5, 1.0))) > 0.05

    def test_smoothstep_endpoints(self):
        assert smoothstep(0.0) == 0.0
        assert smoothstep(1.0) == 1.0
        assert smoothstep(0.5) == 0.5
