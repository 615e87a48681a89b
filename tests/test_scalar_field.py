# tests/test_scalar_field.py

import numpy as np
import pytest

from planet_generator import config as DEFAULTS
from planet_generator.scalar_field import ScalarField, normalize_over_land


def test_invalid_dimensions_fall_back_to_defaults():
    field = ScalarField(0, -3)
    assert field.width == DEFAULTS.DEFAULT_WIDTH
    assert field.height == DEFAULTS.DEFAULT_HEIGHT
    assert len(field) == DEFAULTS.DEFAULT_WIDTH * DEFAULTS.DEFAULT_HEIGHT


def test_from_array_rejects_non_2d():
    with pytest.raises(ValueError):
        ScalarField.from_array([1.0, 2.0, 3.0])


def test_cell_access_by_coordinates_and_index(make_field):
    field = make_field([[0.0, 1.0, 2.0], [3.0, 4.0, 5.0]])
    assert field.get(2, 1) == 5.0
    assert field.get(4) == 4.0
    assert field.coords_of(4) == (1, 1)
    assert field.index_of(1, 1) == 4

    field.set(0, 1, 9.0)
    field.set(2, 7.0)
    assert field.get(3) == 9.0
    assert field.get(2, 0) == 7.0


def test_get_wrapped(make_field):
    field = make_field([[0.0, 1.0, 2.0], [3.0, 4.0, 5.0]])
    assert field.get_wrapped(-1, 0) == 2.0
    assert field.get_wrapped(3, 2) == 0.0


def test_normalize_spans_zero_to_one(rng):
    field = ScalarField.from_array(rng.random((8, 16)) * 10.0 - 3.0)
    field.normalize()
    assert field.min_value() == 0.0
    assert field.max_value() == 1.0


def test_normalize_is_idempotent(rng):
    field = ScalarField.from_array(rng.random((8, 16)))
    once = field.copy().normalize()
    twice = once.copy().normalize()
    np.testing.assert_allclose(once.data, twice.data)


def test_normalize_constant_field_gives_zeros():
    field = ScalarField(4, 4, fill=5.0)
    field.normalize()
    assert np.all(field.data == 0.0)


def test_combine_with_sums_squares(make_field):
    a = make_field([[1.0, 2.0]])
    b = make_field([[2.0, 2.0]])
    result = a.combine_with([b])
    assert list(result.data) == [5.0, 8.0]
    # The inputs are untouched.
    assert list(a.data) == [1.0, 2.0]


def test_combine_with_mismatched_or_empty_returns_none():
    a = ScalarField(4, 4)
    assert a.combine_with([ScalarField(4, 5)]) is None
    assert a.combine_with([]) is None
    assert a.combine_with([None]) is None


def test_invert_and_scale(make_field):
    field = make_field([[1.0, 3.0, 2.0]])
    field.invert()
    assert list(field.data) == [2.0, 0.0, 1.0]
    field.scale_by(0.5)
    assert list(field.data) == [1.0, 0.0, 0.5]


def test_blur_preserves_total_and_wraps():
    field = ScalarField(5, 5)
    field.set(0, 0, 9.0)
    field.blur(1)
    assert field.data.sum() == pytest.approx(9.0)
    # The box around (0, 0) wraps to the opposite corner.
    assert field.get(4, 4) == pytest.approx(1.0)
    assert field.get(2, 2) == pytest.approx(0.0, abs=1e-12)


def test_blur_with_zero_radius_is_noop(make_field):
    field = make_field([[1.0, 5.0]])
    field.blur(0)
    assert list(field.data) == [1.0, 5.0]


def test_sorted_indices_are_stable(make_field):
    field = make_field([[1.0, 0.0, 1.0, 0.0]])
    order, values = field.sorted_indices()
    assert list(order) == [1, 3, 0, 2]
    assert list(values) == [0.0, 0.0, 1.0, 1.0]


def test_normalize_over_land(make_field):
    heights = make_field([[0.1, 0.5, 0.9]])
    values = make_field([[10.0, 2.0, 4.0]])
    result = normalize_over_land(values, heights, 0.369)
    assert list(result.data) == [0.0, 0.0, 1.0]


def test_normalize_over_land_without_land_gives_zeros(make_field):
    heights = make_field([[0.1, 0.2]])
    values = make_field([[3.0, 4.0]])
    assert list(normalize_over_land(values, heights, 0.369).data) == [0.0, 0.0]


def test_normalize_over_land_mismatch_returns_none():
    assert normalize_over_land(ScalarField(2, 2), ScalarField(3, 2), 0.5) is None
