"""
Nested-Resource Synchronization

Transaction-scoped reconciliation of a planet's compounds and atmosphere.
"""

from universe.domain.sync.planet_sync import (
    ATMOSPHERE_FIELDS,
    CompoundResolver,
    atmosphere_exists,
    delete_atmosphere,
    sync_planet_children,
    update_planet_atmosphere,
    update_planet_compounds,
)

__all__ = [
    "ATMOSPHERE_FIELDS",
    "CompoundResolver",
    "atmosphere_exists",
    "delete_atmosphere",
    "sync_planet_children",
    "update_planet_atmosphere",
    "update_planet_compounds",
]
