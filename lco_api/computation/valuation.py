# lco_api/computation/valuation.py

import logging
from typing import Callable, Dict, Iterable, Mapping, Optional, Sequence

from .errors import CatalogLookupError, ImprovementCoefficientError
from .schemas import AssetProfile, RepairAction, RepairCategory

logger = logging.getLogger(__name__)

NO_DATA_CATEGORY = RepairCategory.SEVEN

DEFAULT_CATEGORY_MEMBERS: Dict[RepairCategory, frozenset] = {
    RepairCategory.ONE: frozenset({1, 7, 15, 16}),
    RepairCategory.TWO: frozenset({2}),
    RepairCategory.THREE: frozenset({3, *range(22, 35)}),
    RepairCategory.FOUR: frozenset({4, 10}),
    RepairCategory.FIVE: frozenset({5}),
    RepairCategory.SIX: frozenset({6, 37, 38, 39, 40}),
    RepairCategory.SEVEN: frozenset({8, 9, 41, 42, 43, 44, 46, 47, 48, 49, 50}),
    RepairCategory.EIGHT: frozenset({11, 51}),
    RepairCategory.NINE: frozenset({12, 13, 14}),
    RepairCategory.TEN: frozenset({17, 18, 19, 20, 21, 35, 36}),
    RepairCategory.ELEVEN: frozenset({0}),
}

DEFAULT_IMPROVEMENT_COEFFICIENTS: Dict[int, float] = {4: 0.15, 5: 0.10, 6: 0.05}


def with_overrides(overrides: Optional[Mapping[str, Iterable[int]]]) -> Dict[RepairCategory, frozenset]:
    """
    Default membership with the named categories replaced.

    An id listed in an override leaves whatever default category held it.
    """
    if not overrides:
        return dict(DEFAULT_CATEGORY_MEMBERS)

    replaced = {RepairCategory(name): frozenset(ids) for name, ids in overrides.items()}
    moved = frozenset().union(*replaced.values())

    members = {
        category: ids - moved
        for category, ids in DEFAULT_CATEGORY_MEMBERS.items()
        if category not in replaced
    }
    members.update(replaced)
    return members


class RepairTerms:
    """Quantities a category formula combines for one repair at one rating."""

    def __init__(
        self,
        profile: AssetProfile,
        row: RepairAction,
        elapsed_years: int,
        rating: int,
        coefficients: Mapping[int, float],
    ):
        self.repair = row.repair_mean
        self.length = profile.length
        self.width = profile.width
        # traffic disruption, compounded with traffic growth since the start year
        self.traffic = (
            row.traffic_mean
            * profile.aadt
            * row.duration
            * (1 + profile.traffic_growth_rate) ** elapsed_years
        )
        self._rating = rating
        self._coefficients = coefficients

    @property
    def k(self) -> float:
        try:
            return self._coefficients[self._rating]
        except KeyError:
            raise ImprovementCoefficientError(self._rating) from None


FORMULAS: Dict[RepairCategory, Callable[[RepairTerms], float]] = {
    RepairCategory.ONE: lambda t: t.repair * t.length * t.width * t.k + t.traffic,
    RepairCategory.TWO: lambda t: t.repair * 10 * t.width * t.k + t.traffic,
    RepairCategory.THREE: lambda t: t.repair * t.width * t.traffic,
    RepairCategory.FOUR: lambda t: t.repair * t.length * 2 * t.k,
    RepairCategory.FIVE: lambda t: t.repair * t.length * t.width,
    RepairCategory.SIX: lambda t: t.repair * t.length * t.width * t.k,
    RepairCategory.SEVEN: lambda t: 0.0,
    RepairCategory.EIGHT: lambda t: t.repair,
    RepairCategory.NINE: lambda t: t.repair * t.length * 2 * t.k * t.traffic,
    RepairCategory.TEN: lambda t: t.repair * t.length * t.width + t.traffic,
    RepairCategory.ELEVEN: lambda t: t.repair * t.length * t.width * t.k * t.traffic,
}


def find_catalog_row(catalog: Iterable[RepairAction], repair_id: int, rating: int) -> RepairAction:
    """First catalog row for repair_id whose applicability bounds contain rating."""
    for row in catalog:
        if row.repair_id == repair_id and row.applies_to(rating):
            return row
    raise CatalogLookupError(f"No catalog entry for repair {repair_id} at rating {rating}.")


class RepairValuator:
    """Values a single repair with the formula of its category."""

    def __init__(
        self,
        categories: Optional[Mapping[RepairCategory, Iterable[int]]] = None,
        improvement_coefficients: Optional[Mapping[int, float]] = None,
    ):
        if categories is None:
            categories = DEFAULT_CATEGORY_MEMBERS
        if improvement_coefficients is None:
            improvement_coefficients = DEFAULT_IMPROVEMENT_COEFFICIENTS

        self._category_of: Dict[int, RepairCategory] = {}
        for category, members in categories.items():
            category = RepairCategory(category)
            for repair_id in members:
                if repair_id in self._category_of:
                    raise ValueError(
                        f"Repair {repair_id} is assigned to both "
                        f"'{self._category_of[repair_id].value}' and '{category.value}'."
                    )
                self._category_of[repair_id] = category

        self.improvement_coefficients = dict(improvement_coefficients)
        self._uncategorized_seen = set()

    def category_of(self, repair_id: int) -> Optional[RepairCategory]:
        return self._category_of.get(repair_id)

    def valuate(
        self,
        profile: AssetProfile,
        elapsed_years: int,
        repair_id: int,
        rating: int,
        catalog: Sequence[RepairAction],
    ) -> float:
        category = self._category_of.get(repair_id)

        if category is None:
            if repair_id not in self._uncategorized_seen:
                self._uncategorized_seen.add(repair_id)
                logger.debug("Repair %s has no valuation category; valued at 0", repair_id)
            return 0.0
        if category is NO_DATA_CATEGORY:
            return 0.0

        row = find_catalog_row(catalog, repair_id, rating)
        terms = RepairTerms(profile, row, elapsed_years, rating, self.improvement_coefficients)
        return float(FORMULAS[category](terms))


def valuate(
    profile: AssetProfile,
    elapsed_years: int,
    repair_id: int,
    rating: int,
    catalog: Sequence[RepairAction],
    improvement_coefficients: Optional[Mapping[int, float]] = None,
) -> float:
    """One-off valuation with the default category membership."""
    valuator = RepairValuator(improvement_coefficients=improvement_coefficients)
    return valuator.valuate(profile, elapsed_years, repair_id, rating, catalog)
