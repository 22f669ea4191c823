from uuid import UUID

import pytest

from lco_api.computation.decay import DecayCurve, decay_table_from_curve
from lco_api.computation.schemas import (
    AssetProfile,
    CatalogBasicInfo,
    CatalogSource,
    ConditionSample,
    RepairAction,
    RepairCoefficients,
    RepairSelection,
)

BRIDGE_ID = UUID("5f1c8a0e-2b7d-4a44-9d0c-3c1e7a9b6f10")


@pytest.fixture
def profile():
    """Bridge used across the scheduler tests (10 m x 8 m deck)."""
    return AssetProfile(
        bridge_id=BRIDGE_ID,
        length=10,
        width=8,
        aadt=1000,
        traffic_growth_rate=0.02,
        discount_rate=0.05,
        start_rating=7,
        start_year=2000,
    )


@pytest.fixture
def linear_curve():
    # one rating every 22.2 years; rating 4 reached at t = 100
    return DecayCurve(a=0.0, b=-0.045, c=8.5)


@pytest.fixture
def decay(linear_curve):
    return decay_table_from_curve(linear_curve, min_rating=4)


@pytest.fixture
def deck_patch():
    """Repair 5 (area formula) lifting ratings 4-6 by two."""
    return RepairAction(
        repair_id=5,
        component="Deck",
        lower_bound=4,
        upper_bound=6,
        improvement=2,
        repair_mean=1.0,
        traffic_mean=0.0,
        duration=0,
    )


@pytest.fixture
def history():
    # lies on rating = -0.5 t^2 + 0.5 t + 9
    return [
        ConditionSample(year=1990 + t, rating=r)
        for t, r in enumerate([9, 9, 8, 6, 3])
    ]


@pytest.fixture
def catalog_source():
    return CatalogSource(
        basic_info=[
            CatalogBasicInfo(repair_id=5, component="Deck", lower_bound=4, upper_bound=6, improvement=2),
            CatalogBasicInfo(repair_id=5, component="Joint", lower_bound=4, upper_bound=5, improvement=1),
            CatalogBasicInfo(repair_id=8, component="Barrier", lower_bound=4, upper_bound=6, improvement=1),
        ],
        coefficients=[
            RepairCoefficients(coefficient_set="GW", repair_id=5, repair_mean=1.0, traffic_mean=0.0),
            RepairCoefficients(coefficient_set="GW", repair_id=8, repair_mean=3.0, traffic_mean=0.0),
            RepairCoefficients(coefficient_set="ER", repair_id=5, repair_mean=2.0, traffic_mean=0.0),
            RepairCoefficients(coefficient_set="ER", repair_id=8, repair_mean=1.0, traffic_mean=0.0),
        ],
    )


@pytest.fixture
def selections():
    return [
        RepairSelection(repair_id=5, available=True, duration=0, cost=2.0),
        RepairSelection(repair_id=8, available=True, duration=0, cost=1.0),
    ]
