# lco_api/computation/provider.py

from typing import List, Protocol
from uuid import UUID

from .schemas import AssetProfile, CatalogSource, ConditionSample


class DataProvider(Protocol):
    """Everything one optimization run reads about a bridge."""

    def fetch_profile(self, bridge_id: UUID) -> AssetProfile:
        ...

    def fetch_component_type(self, bridge_id: UUID, component_id: int) -> str:
        """Component type value, e.g. "deck" or "span"."""
        ...

    def fetch_history(self, bridge_id: UUID, component_id: int) -> List[ConditionSample]:
        ...

    def fetch_catalog(self, bridge_id: UUID) -> CatalogSource:
        ...
