# lco_api/computation/scheduler.py

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .decay import DecayTable
from .errors import CatalogLookupError
from .schemas import AssetProfile, FinalConditionOption, RepairAction, Schedule, ScheduleEntry
from .valuation import RepairValuator

logger = logging.getLogger(__name__)

HORIZON = 100             # last year (relative to the start year) of the plan
MAX_RATING = 8            # highest rating tracked by the tables
TOP_TIER = 7              # rating reached by a "raise to top tier" repair
TOP_TIER_IMPROVEMENT = 7  # improvement value marking a top-tier repair
NO_PREDECESSOR = -1
NO_REPAIR = 0


def present_value(value: float, cost_factor: float, discount_rate: float, elapsed_years: int) -> float:
    """Cost of a valuation spent `elapsed_years` after the start year, in start-year money."""
    return value * cost_factor / (1 + discount_rate) ** elapsed_years


class _Tables:
    """
    M[year, rating]: minimum cumulative objective for the component to be at
    `rating` in `year`, with predecessor pointers for path reconstruction.
    """

    def __init__(self):
        shape = (HORIZON + 1, MAX_RATING + 1)
        self.best = np.zeros(shape, dtype=float)
        self.pre_year = np.full(shape, NO_PREDECESSOR, dtype=int)
        self.pre_rating = np.zeros(shape, dtype=int)
        self.pre_repair = np.full(shape, NO_REPAIR, dtype=int)


class Scheduler:
    """
    Dynamic program over (year, rating) that elects when to apply which repair.

    `discounted=False` minimizes cumulative environmental impact and accepts
    ties (a later equal candidate replaces the current one).
    `discounted=True` minimizes discounted cost: each valuation is scaled by
    the repair's cost factor and divided by (1 + discount_rate)^year; only a
    strict improvement replaces the current candidate.
    """

    def __init__(
        self,
        profile: AssetProfile,
        decay: DecayTable,
        catalog: Sequence[RepairAction],
        min_rating: Optional[int] = None,
        valuator: Optional[RepairValuator] = None,
        discounted: bool = False,
    ):
        if min_rating is None:
            min_rating = decay.min_rating
        if min_rating < decay.min_rating:
            raise ValueError(
                f"Rating floor {min_rating} is below the decay table floor {decay.min_rating}."
            )

        self.profile = profile
        self.decay = decay
        self.catalog = tuple(catalog)
        self.min_rating = min_rating
        self.valuator = valuator or RepairValuator()
        self.discounted = discounted

    # ------------------------------------------------------------
    # Repair pricing
    # ------------------------------------------------------------

    def _candidate_rows(self) -> Dict[Tuple[int, int], List[RepairAction]]:
        """Catalog rows able to lift the component from rating j to rating i."""
        candidates = {}
        for i in range(self.min_rating + 1, MAX_RATING + 1):
            for j in range(self.min_rating, i):
                candidates[(i, j)] = [
                    row for row in self.catalog
                    if row.applies_to(j)
                    and (
                        row.improvement == i - j
                        or (i == TOP_TIER and row.improvement == TOP_TIER_IMPROVEMENT)
                    )
                ]
        return candidates

    def _price(self, row: RepairAction, elapsed: int, rating: int, cache: dict) -> Optional[float]:
        key = (elapsed, row.repair_id, rating)
        if key not in cache:
            try:
                cache[key] = self.valuator.valuate(
                    self.profile, elapsed, row.repair_id, rating, self.catalog
                )
            except CatalogLookupError as exc:
                logger.debug("Excluding repair %s at rating %s: %s", row.repair_id, rating, exc)
                cache[key] = None

        value = cache[key]
        if value is None or not self.discounted:
            return value
        if row.cost_factor is None:
            return None
        return present_value(value, row.cost_factor, self.profile.discount_rate, elapsed)

    def _cheapest_repair(self, rows, elapsed: int, rating: int, cache: dict):
        cost, repair_id = math.inf, None
        for row in rows:
            price = self._price(row, elapsed, rating, cache)
            if price is not None and price < cost:
                cost, repair_id = price, row.repair_id
        return cost, repair_id

    # ------------------------------------------------------------
    # DP
    # ------------------------------------------------------------

    def _set_boundary(self, tables: _Tables) -> None:
        """Years in which the component still holds its rating without any repair."""
        start = self.profile.start_rating
        for rating in range(start - 1, self.min_rating - 1, -1):
            first = self.decay[start, rating + 1]
            last = min(self.decay[start, rating], HORIZON)
            for year in range(first, last + 1):
                for i in range(1, MAX_RATING + 1):
                    tables.best[year, i] = 0.0 if i >= rating else math.inf
                    tables.pre_year[year, i] = NO_PREDECESSOR
                    tables.pre_rating[year, i] = 0
                    tables.pre_repair[year, i] = NO_REPAIR

    def _fill(self, tables: _Tables) -> None:
        start = self.profile.start_rating
        candidates = self._candidate_rows()
        cache: dict = {}
        accept_ties = not self.discounted

        for year in range(HORIZON + 1):
            for rating in range(self.min_rating, MAX_RATING + 1):
                if rating <= start and self.decay[start, rating] >= year:
                    continue

                best = math.inf
                for i in range(rating + 1, MAX_RATING + 1):
                    year_decay = year - self.decay[i, rating]
                    if year_decay < 0:
                        break

                    # a zero-year decay reads this year's row, filled only below `rating`
                    last_j = min(i, rating) if year_decay == year else i
                    for j in range(self.min_rating, last_j):
                        repair_cost, repair_id = self._cheapest_repair(
                            candidates[(i, j)], year_decay, j, cache
                        )
                        if repair_id is None:
                            continue

                        tentative = tables.best[year_decay, j] + repair_cost
                        if not math.isfinite(tentative) or tentative == 0:
                            continue
                        # one repair per year
                        if tables.pre_year[year_decay, j] == year_decay:
                            continue

                        if tentative < best or (accept_ties and tentative == best):
                            best = tentative
                            tables.pre_year[year, rating] = year_decay
                            tables.pre_rating[year, rating] = j
                            tables.pre_repair[year, rating] = repair_id

                tables.best[year, rating] = best

    def _backtrack(self, tables: _Tables, rating: int) -> List[ScheduleEntry]:
        entries = []
        year = HORIZON
        visited = set()
        while True:
            if (year, rating) in visited:
                raise RuntimeError(f"Predecessor cycle at year {year}, rating {rating}.")
            visited.add((year, rating))

            prev_year = int(tables.pre_year[year, rating])
            if prev_year <= NO_PREDECESSOR:
                break
            repair_id = int(tables.pre_repair[year, rating])
            if repair_id != NO_REPAIR:
                entries.append(
                    ScheduleEntry(repair_year=prev_year + self.profile.start_year, repair_id=repair_id)
                )
            year, rating = prev_year, int(tables.pre_rating[year, rating])
        entries.reverse()
        return entries

    def run(self) -> Schedule:
        tables = _Tables()
        self._set_boundary(tables)
        self._fill(tables)

        best_rating = None
        best_value = math.inf
        alternatives = []
        for rating in range(self.min_rating, TOP_TIER + 1):
            value = float(tables.best[HORIZON, rating])
            if value < best_value:
                best_value, best_rating = value, rating
            alternatives.append(
                FinalConditionOption(
                    final_rating=rating,
                    objective=value,
                    entries=self._backtrack(tables, rating) if math.isfinite(value) else [],
                )
            )

        if best_rating is None:
            logger.info(
                "No feasible schedule for bridge %s above rating %d",
                self.profile.bridge_id, self.min_rating,
            )
            return Schedule(entries=[], objective=math.inf, alternatives=alternatives)

        entries = next(a.entries for a in alternatives if a.final_rating == best_rating)
        logger.info(
            "Optimal schedule for bridge %s: objective %.4f, final rating %d, %d repairs",
            self.profile.bridge_id, best_value, best_rating, len(entries),
        )
        return Schedule(
            entries=entries,
            objective=best_value,
            final_rating=best_rating,
            alternatives=alternatives,
        )


def find_impact_schedule(
    profile: AssetProfile,
    decay: DecayTable,
    catalog: Sequence[RepairAction],
    min_rating: Optional[int] = None,
    valuator: Optional[RepairValuator] = None,
) -> Schedule:
    return Scheduler(profile, decay, catalog, min_rating, valuator, discounted=False).run()


def find_cost_schedule(
    profile: AssetProfile,
    decay: DecayTable,
    catalog: Sequence[RepairAction],
    min_rating: Optional[int] = None,
    valuator: Optional[RepairValuator] = None,
) -> Schedule:
    return Scheduler(profile, decay, catalog, min_rating, valuator, discounted=True).run()
