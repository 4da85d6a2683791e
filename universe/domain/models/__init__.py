"""
Resource Models

One class per table, each bound to a database adapter.
"""

from universe.domain.models.base import ResourceModel
from universe.domain.models.compound import CompoundModel
from universe.domain.models.planet import PlanetModel
from universe.domain.models.planet_type import PlanetTypeModel
from universe.domain.models.planetary_system import PlanetarySystemModel
from universe.domain.models.star import StarModel
from universe.domain.models.user import UserModel

__all__ = [
    "ResourceModel",
    "CompoundModel",
    "PlanetModel",
    "PlanetTypeModel",
    "PlanetarySystemModel",
    "StarModel",
    "UserModel",
]
