# lco_api/computation/errors.py

from typing import Optional


class OptimizationError(Exception):
    """Base class for every failure raised by the optimization core."""


# ============================================================
# Curve fitting
# ============================================================

class ModelFittingError(OptimizationError):
    """The inspection history cannot produce a usable deterioration curve."""


class InsufficientDataError(ModelFittingError):
    LOW = "low"
    HIGH = "high"
    SAMPLES = "samples"
    DEGENERATE = "degenerate"

    def __init__(self, variant: str, message: Optional[str] = None):
        if message is None:
            message = {
                self.LOW: "Need more low condition rating data.",
                self.HIGH: "Need more high condition rating data.",
                self.SAMPLES: "More ratings are needed.",
                self.DEGENERATE: "Condition ratings are degenerate; the curve cannot be fitted.",
            }.get(variant, "Insufficient condition rating data.")
        super().__init__(message)
        self.variant = variant


# ============================================================
# Catalog
# ============================================================

class CatalogLookupError(OptimizationError):
    """No catalog row (or coefficient) exists for a requested repair/rating."""


class ImprovementCoefficientError(CatalogLookupError):
    def __init__(self, rating: int):
        super().__init__(f"No improvement coefficient configured for rating {rating}.")
        self.rating = rating


class UnsupportedComponentError(OptimizationError):
    """The component type has no catalog tag mapping."""
