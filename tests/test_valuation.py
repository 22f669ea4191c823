import pytest

from lco_api.computation.errors import CatalogLookupError, ImprovementCoefficientError
from lco_api.computation.schemas import RepairAction, RepairCategory
from lco_api.computation.valuation import (
    DEFAULT_CATEGORY_MEMBERS,
    RepairValuator,
    find_catalog_row,
    valuate,
    with_overrides,
)


def action(repair_id, lower=4, upper=6, repair_mean=2.0, traffic_mean=0.5, duration=10):
    return RepairAction(
        repair_id=repair_id,
        lower_bound=lower,
        upper_bound=upper,
        improvement=1,
        repair_mean=repair_mean,
        traffic_mean=traffic_mean,
        duration=duration,
    )


# traffic term at elapsed=0: 0.5 * 1000 * 10 = 5000
TRAFFIC = 5000.0
AREA = 80.0


class TestFormulas:
    @pytest.mark.parametrize(
        "repair_id, expected",
        [
            (1, 2.0 * AREA * 0.10 + TRAFFIC),        # one
            (2, 2.0 * 10 * 8 * 0.10 + TRAFFIC),      # two
            (22, 2.0 * 8 * TRAFFIC),                 # three
            (10, 2.0 * 10 * 2 * 0.10),               # four
            (5, 2.0 * AREA),                         # five
            (38, 2.0 * AREA * 0.10),                 # six
            (51, 2.0),                               # eight
            (13, 2.0 * 10 * 2 * 0.10 * TRAFFIC),     # nine
            (35, 2.0 * AREA + TRAFFIC),              # ten
            (0, 2.0 * AREA * 0.10 * TRAFFIC),        # eleven
        ],
    )
    def test_category_formula_at_rating_five(self, profile, repair_id, expected):
        catalog = [action(repair_id)]
        assert valuate(profile, 0, repair_id, 5, catalog) == pytest.approx(expected)

    def test_traffic_grows_with_elapsed_years(self, profile):
        catalog = [action(35)]
        later = valuate(profile, 10, 35, 5, catalog)
        assert later == pytest.approx(2.0 * AREA + TRAFFIC * 1.02 ** 10)

    def test_improvement_coefficient_depends_on_rating(self, profile):
        catalog = [action(6)]
        assert valuate(profile, 0, 6, 4, catalog) == pytest.approx(2.0 * AREA * 0.15)
        assert valuate(profile, 0, 6, 6, catalog) == pytest.approx(2.0 * AREA * 0.05)

    def test_injected_coefficients(self, profile):
        catalog = [action(6, lower=3, upper=3)]
        value = valuate(profile, 0, 6, 3, catalog, improvement_coefficients={3: 0.5})
        assert value == pytest.approx(2.0 * AREA * 0.5)


class TestNoContribution:
    def test_no_data_category_is_zero_without_lookup(self, profile):
        # no catalog row at all: the no-data bucket never looks one up
        assert valuate(profile, 0, 8, 5, []) == 0.0

    def test_uncategorized_repair_is_zero(self, profile):
        assert valuate(profile, 0, 45, 5, [action(45)]) == 0.0


class TestLookupErrors:
    def test_first_matching_row_wins(self):
        rows = [action(5, 6, 7, repair_mean=9.0), action(5, 4, 6, repair_mean=1.0), action(5, 4, 6, repair_mean=3.0)]
        assert find_catalog_row(rows, 5, 5).repair_mean == 1.0
        assert find_catalog_row(rows, 5, 6).repair_mean == 9.0

    def test_missing_row_raises(self, profile):
        with pytest.raises(CatalogLookupError):
            valuate(profile, 0, 5, 3, [action(5)])

    def test_missing_coefficient_raises(self, profile):
        catalog = [action(6, lower=1, upper=8)]
        with pytest.raises(ImprovementCoefficientError) as exc:
            valuate(profile, 0, 6, 7, catalog)
        assert exc.value.rating == 7
        assert isinstance(exc.value, CatalogLookupError)

    def test_formula_without_coefficient_ignores_table(self, profile):
        catalog = [action(5, lower=1, upper=8)]
        assert valuate(profile, 0, 5, 7, catalog) == pytest.approx(2.0 * AREA)


class TestMembership:
    def test_default_sets_are_disjoint(self):
        seen = set()
        for members in DEFAULT_CATEGORY_MEMBERS.values():
            assert not seen & members
            seen |= members

    def test_overlapping_membership_is_rejected(self):
        with pytest.raises(ValueError):
            RepairValuator(categories={RepairCategory.ONE: [1, 2], RepairCategory.TWO: [2]})

    def test_override_moves_repair(self):
        members = with_overrides({"five": [5, 45]})
        valuator = RepairValuator(categories=members)
        assert valuator.category_of(45) is RepairCategory.FIVE
        assert valuator.category_of(1) is RepairCategory.ONE

    def test_override_removes_id_from_default_category(self):
        members = with_overrides({"seven": [1]})
        assert 1 not in members[RepairCategory.ONE]
        assert RepairValuator(categories=members).category_of(1) is RepairCategory.SEVEN

    def test_no_overrides_keeps_defaults(self):
        assert with_overrides(None) == DEFAULT_CATEGORY_MEMBERS
