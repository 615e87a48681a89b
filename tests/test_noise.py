# tests/test_noise.py

import numpy as np

from planet_generator import config as DEFAULTS
from planet_generator.noise import ConstantGenerator, EquatorDistanceGenerator, ValueNoiseGenerator


def test_value_noise_shape_and_range(rng):
    field = ValueNoiseGenerator(4, 0.5).generate(16, 8, rng)
    assert field.width == 16 and field.height == 8
    assert field.size == 128
    assert np.all(np.isfinite(field.data))
    assert field.min_value() == 0.0
    assert field.max_value() == 1.0


def test_value_noise_is_deterministic():
    generator = ValueNoiseGenerator(5, 0.75)
    first = generator.generate(20, 10, np.random.default_rng(7))
    second = generator.generate(20, 10, np.random.default_rng(7))
    np.testing.assert_array_equal(first.data, second.data)


def test_value_noise_differs_between_seeds():
    generator = ValueNoiseGenerator(3, 0.5)
    first = generator.generate(16, 16, np.random.default_rng(1))
    second = generator.generate(16, 16, np.random.default_rng(2))
    assert not np.array_equal(first.data, second.data)


def test_octaves_coarser_than_the_map_still_work(rng):
    # Periods far larger than the map collapse to a single sample.
    field = ValueNoiseGenerator(16, 0.25).generate(8, 4, rng)
    assert np.all(np.isfinite(field.data))


def test_invalid_settings_fall_back():
    generator = ValueNoiseGenerator(0, 0.0)
    assert generator.octave_count == 1
    assert generator.persistence == DEFAULTS.FALLBACK_PERSISTENCE

    generator.persistence = 3.0
    assert generator.persistence == 1.0
    generator.octave_count = -4
    assert generator.octave_count == 1


def test_equator_peaks_on_its_row():
    field = EquatorDistanceGenerator(2).generate(3, 5)
    grid = field.as_array()
    np.testing.assert_allclose(grid[:, 0], [0.0, 0.5, 1.0, 0.5, 0.0])
    # Every column is the same.
    assert np.all(grid == grid[:, :1])


def test_equator_row_is_clamped():
    field = EquatorDistanceGenerator(99).generate(2, 4)
    np.testing.assert_allclose(field.as_array()[:, 1], [0.0, 1.0 / 3.0, 2.0 / 3.0, 1.0])


def test_constant_generator():
    field = ConstantGenerator(0.25).generate(3, 2)
    assert np.all(field.data == 0.25)
    assert np.all(ConstantGenerator().generate(3, 2).data == 0.0)
