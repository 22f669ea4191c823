import math

import numpy as np
import pytest

from lco_api.computation.decay import (
    TOP_RATING,
    DecayCurve,
    decay_table_from_curve,
    fit_decay_table,
    fit_quadratic,
    validate_curve,
)
from lco_api.computation.errors import InsufficientDataError, ModelFittingError
from lco_api.computation.schemas import ConditionSample


def samples(ratings, first_year=2000):
    return [ConditionSample(year=first_year + t, rating=r) for t, r in enumerate(ratings)]


class TestFitQuadratic:
    def test_reproduces_exact_quadratic(self, history):
        curve = fit_quadratic(history)
        assert curve.a == pytest.approx(-0.5, abs=1e-9)
        assert curve.b == pytest.approx(0.5, abs=1e-9)
        assert curve.c == pytest.approx(9.0, abs=1e-9)

    def test_time_is_relative_to_first_sample(self, history):
        shifted = [ConditionSample(year=s.year + 37, rating=s.rating) for s in history]
        assert fit_quadratic(shifted) == pytest.approx(fit_quadratic(history))

    def test_sample_order_does_not_matter(self, history):
        assert fit_quadratic(list(reversed(history))) == pytest.approx(fit_quadratic(history))

    def test_too_few_samples(self):
        with pytest.raises(InsufficientDataError) as exc:
            fit_quadratic(samples([9, 8]))
        assert exc.value.variant == InsufficientDataError.SAMPLES
        assert str(exc.value) == "More ratings are needed."

    def test_single_inspection_year_is_degenerate(self):
        same_year = [ConditionSample(year=2005, rating=r) for r in (8, 7, 7)]
        with pytest.raises(InsufficientDataError) as exc:
            fit_quadratic(same_year)
        assert exc.value.variant == InsufficientDataError.DEGENERATE


class TestValidateCurve:
    def test_upward_curve_bottoming_above_floor_needs_low_data(self):
        # a ~ 0.357, vertex ~ 5.74: never reaches rating 4
        curve = fit_quadratic(samples([9, 7, 6, 6, 6]))
        assert curve.a > 0
        with pytest.raises(InsufficientDataError) as exc:
            validate_curve(curve, min_rating=4)
        assert exc.value.variant == InsufficientDataError.LOW
        assert "low condition rating" in str(exc.value)

    def test_upward_curve_is_fine_when_floor_is_above_vertex(self):
        validate_curve(fit_quadratic(samples([9, 7, 6, 6, 6])), min_rating=6)

    def test_downward_curve_peaking_below_top_needs_high_data(self):
        # rating = -0.5 t^2 + 0.5 t + 7, vertex 7.125
        with pytest.raises(InsufficientDataError) as exc:
            fit_decay_table(samples([7, 7, 6, 4, 1]), min_rating=4)
        assert exc.value.variant == InsufficientDataError.HIGH
        assert isinstance(exc.value, ModelFittingError)

    def test_flat_line_needs_high_data(self):
        with pytest.raises(InsufficientDataError) as exc:
            validate_curve(DecayCurve(0.0, 0.0, 7.0), min_rating=4)
        assert exc.value.variant == InsufficientDataError.HIGH

    def test_falling_line_is_accepted(self, linear_curve):
        validate_curve(linear_curve, min_rating=1)


class TestDecayTable:
    def test_linear_curve_entries(self, decay):
        expected = {1: 22, 2: 44, 3: 66, 4: 88, 5: 111}
        for i in range(TOP_RATING, 4, -1):
            for drop, years in expected.items():
                if i - drop >= 4:
                    assert decay[i, i - drop] == years

    def test_diagonal_is_zero(self, decay):
        for r in range(4, TOP_RATING + 1):
            assert decay[r, r] == 0

    def test_non_negative_and_strictly_decreasing_in_target(self, decay):
        for i in range(TOP_RATING, 4, -1):
            row = [decay[i, j] for j in range(i, 3, -1)]
            assert all(years >= 0 for years in row)
            assert all(later > earlier for earlier, later in zip(row, row[1:]))

    def test_fitted_table_is_non_increasing_in_target(self, history):
        table = fit_decay_table(history, min_rating=4)
        for i in range(TOP_RATING, 4, -1):
            row = [table[i, j] for j in range(i, 3, -1)]
            assert all(years >= 0 for years in row)
            assert all(later >= earlier for earlier, later in zip(row, row[1:]))

    def test_matches_curve_times(self, history):
        table = fit_decay_table(history, min_rating=4)
        curve = table.curve
        assert table[9, 4] == math.floor(curve.time_at(4) - curve.time_at(9))

    @pytest.mark.parametrize("key", [(5, 6), (6, 3), (10, 5)])
    def test_undefined_entries_raise(self, decay, key):
        with pytest.raises(KeyError):
            decay[key]

    def test_table_is_read_only(self, decay):
        with pytest.raises(ValueError):
            decay._years[9, 4] = 0
        assert isinstance(decay._years, np.ndarray)

    def test_rows_start_at_top_rating(self, decay):
        rows = decay.to_rows()
        assert len(rows) == TOP_RATING - 4 + 1
        assert rows[0][0] == 0
        assert rows[0][-1] == decay[9, 4]
