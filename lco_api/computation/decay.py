# lco_api/computation/decay.py

import logging
import math
from typing import NamedTuple, Sequence

import numpy as np

from .errors import InsufficientDataError
from .schemas import ConditionSample

logger = logging.getLogger(__name__)

TOP_RATING = 9
MIN_SAMPLES = 3


class DecayCurve(NamedTuple):
    """Fitted condition curve: rating = a*t^2 + b*t + c, t in years since the first inspection."""

    a: float
    b: float
    c: float

    def rating_at(self, t: float) -> float:
        return self.a * t * t + self.b * t + self.c

    @property
    def vertex_rating(self) -> float:
        return (4 * self.a * self.c - self.b ** 2) / (4 * self.a)

    def time_at(self, rating: float) -> float:
        """
        Time at which the curve falls to `rating` on its decaying branch.

        Uses the cancellation-free form of the root whenever the slope term
        is negative (always the case for a linear curve).
        """
        a, b, c = self
        disc = max(b * b - 4 * a * (c - rating), 0.0)
        root = math.sqrt(disc)
        if b < 0 or a == 0:
            return 2 * (c - rating) / (-b + root)
        return (-b - root) / (2 * a)


class DecayTable:
    """
    Years needed to decay from one rating to a lower one absent repair.

    Indexed as table[from_rating, to_rating] with
    TOP_RATING >= from_rating >= to_rating >= min_rating.
    """

    def __init__(self, years: np.ndarray, min_rating: int, curve: DecayCurve):
        self._years = years
        self._years.setflags(write=False)
        self.min_rating = min_rating
        self.curve = curve

    def __getitem__(self, key) -> int:
        from_rating, to_rating = key
        if not (self.min_rating <= to_rating <= from_rating <= TOP_RATING):
            raise KeyError(key)
        return int(self._years[from_rating, to_rating])

    def years(self, from_rating: int, to_rating: int) -> int:
        return self[from_rating, to_rating]

    def to_rows(self):
        """Lower-triangular rows, highest rating first."""
        return [
            [int(self._years[i, j]) for j in range(i, self.min_rating - 1, -1)]
            for i in range(TOP_RATING, self.min_rating - 1, -1)
        ]


# ------------------------------------------------------------
# Least-squares fit
# ------------------------------------------------------------

def _solve_by_elimination(aug: np.ndarray) -> np.ndarray:
    """Gaussian elimination without pivoting on an augmented [A | y] matrix."""
    aug = aug.astype(float)
    m = aug.shape[0]
    scale = max(1.0, float(np.abs(aug).max()))

    for k in range(m):
        if abs(aug[k, k]) <= 1e-12 * scale:
            raise InsufficientDataError(InsufficientDataError.DEGENERATE)
        for i in range(k + 1, m):
            aug[i, k:] -= aug[k, k:] * (aug[i, k] / aug[k, k])

    solution = np.zeros(m)
    for row in range(m - 1, -1, -1):
        solution[row] = (aug[row, m] - aug[row, row + 1:m] @ solution[row + 1:]) / aug[row, row]
    return solution


def fit_quadratic(samples: Sequence[ConditionSample]) -> DecayCurve:
    if len(samples) < MIN_SAMPLES:
        raise InsufficientDataError(InsufficientDataError.SAMPLES)

    ordered = sorted(samples, key=lambda s: s.year)
    base_year = ordered[0].year
    t = np.array([s.year - base_year for s in ordered], dtype=float)
    y = np.array([s.rating for s in ordered], dtype=float)

    # Normal equations for unknowns (c, b, a): sum t^(i+j) * coef_j = sum y * t^i
    order = 3
    aug = np.empty((order, order + 1))
    for i in range(order):
        for j in range(order):
            aug[i, j] = np.sum(t ** (i + j))
        aug[i, order] = np.sum(y * t ** i)

    c, b, a = _solve_by_elimination(aug)
    return DecayCurve(float(a), float(b), float(c))


def validate_curve(curve: DecayCurve, min_rating: int) -> None:
    """Reject curves whose decaying branch does not span [min_rating, TOP_RATING]."""
    if curve.a > 0:
        # bottoms out before reaching the floor
        if curve.vertex_rating > min_rating:
            raise InsufficientDataError(InsufficientDataError.LOW)
    elif curve.a < 0:
        # peaks below the top of the scale
        if curve.vertex_rating < TOP_RATING:
            raise InsufficientDataError(InsufficientDataError.HIGH)
    elif curve.b >= 0:
        raise InsufficientDataError(InsufficientDataError.HIGH)


def decay_table_from_curve(curve: DecayCurve, min_rating: int) -> DecayTable:
    validate_curve(curve, min_rating)

    times = {r: curve.time_at(r) for r in range(TOP_RATING, min_rating - 1, -1)}

    years = np.full((TOP_RATING + 1, TOP_RATING + 1), -1, dtype=int)
    for i in range(TOP_RATING, min_rating - 1, -1):
        for j in range(i, min_rating - 1, -1):
            years[i, j] = math.floor(times[j] - times[i])

    return DecayTable(years, min_rating, curve)


def fit_decay_table(samples: Sequence[ConditionSample], min_rating: int) -> DecayTable:
    """
    Fit the deterioration curve and derive the rating-to-rating decay table.

    Raises InsufficientDataError when the history cannot support a curve that
    covers every rating between min_rating and TOP_RATING.
    """
    curve = fit_quadratic(samples)
    logger.debug(
        "Fitted decay curve a=%.5f b=%.5f c=%.5f from %d samples (floor %d)",
        curve.a, curve.b, curve.c, len(samples), min_rating,
    )
    return decay_table_from_curve(curve, min_rating)
