"""
Shared Types

Query option/config records and typed resource payloads.
"""

from universe.shared.types.query import QueryClauses, QueryConfig, QueryOptions, SQLFragment
from universe.shared.types.models import (
    UNSET,
    AtmosphereInput,
    AtmospherePatch,
    Compound,
    CompoundShare,
    PlanetInput,
    PlanetPatch,
    PlanetarySystemInput,
    PlanetarySystemPatch,
    StarInput,
    StarPatch,
    UserCreate,
    UserPatch,
    UserUpdate,
    sent_fields,
)

__all__ = [
    "QueryClauses",
    "QueryConfig",
    "QueryOptions",
    "SQLFragment",
    "UNSET",
    "AtmosphereInput",
    "AtmospherePatch",
    "Compound",
    "CompoundShare",
    "PlanetInput",
    "PlanetPatch",
    "PlanetarySystemInput",
    "PlanetarySystemPatch",
    "StarInput",
    "StarPatch",
    "UserCreate",
    "UserPatch",
    "UserUpdate",
    "sent_fields",
]
