"""
Catalog Dependencies

Builds the adapter, the compound directory client and every resource
model from settings. ``get_catalog`` is the dependency an HTTP layer
injects.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from universe.core.config import Settings, settings
from universe.domain.models import (
    CompoundModel,
    PlanetModel,
    PlanetTypeModel,
    PlanetarySystemModel,
    StarModel,
    UserModel,
)
from universe.infrastructure.adapters import BaseAdapter, adapter_from_url
from universe.infrastructure.pubchem import PubChemClient

logger = logging.getLogger(__name__)


@dataclass
class Catalog:
    adapter: BaseAdapter
    pubchem: PubChemClient
    compounds: CompoundModel
    stars: StarModel
    systems: PlanetarySystemModel
    planets: PlanetModel
    planet_types: PlanetTypeModel
    users: UserModel

    def close(self) -> None:
        self.pubchem.close()
        self.adapter.disconnect()


def build_catalog(
    config: Optional[Settings] = None,
    adapter: Optional[BaseAdapter] = None,
    pubchem: Optional[PubChemClient] = None
) -> Catalog:
    """Wire every model onto one adapter."""
    config = config or settings

    if adapter is None:
        adapter = adapter_from_url(config.active_database_url(), pool_size=config.db_pool_size)
    if not adapter.is_connected():
        adapter.connect()

    pubchem = pubchem or PubChemClient(
        base_url=config.pubchem_base_url,
        timeout=config.pubchem_timeout
    )

    compounds = CompoundModel(adapter, fetcher=pubchem.fetch_compound)
    stars = StarModel(adapter)

    logger.info(f"Catalog ready on {adapter.ENGINE} ({config.environment})")

    return Catalog(
        adapter=adapter,
        pubchem=pubchem,
        compounds=compounds,
        stars=stars,
        systems=PlanetarySystemModel(adapter, stars=stars),
        planets=PlanetModel(adapter, compounds=compounds),
        planet_types=PlanetTypeModel(adapter),
        users=UserModel(adapter),
    )


@lru_cache
def get_catalog() -> Catalog:
    return build_catalog()
