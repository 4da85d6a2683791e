"""
Pytest configuration and shared fixtures for the catalog tests.
"""

import pytest

from universe.domain.models import (
    CompoundModel,
    PlanetModel,
    PlanetTypeModel,
    PlanetarySystemModel,
    StarModel,
    UserModel,
)
from universe.errors import compound_not_found
from universe.infrastructure.adapters.sqlite_adapter import SQLiteAdapter
from universe.infrastructure.schema import create_schema
from universe.shared.types.models import PlanetInput, PlanetarySystemInput, UserCreate


KNOWN_COMPOUNDS = {
    1: {"CID": 1, "name": "Acetylcarnitine", "formula": "C9H17NO4"},
    280: {"CID": 280, "name": "Carbon Dioxide", "formula": "CO2"},
    297: {"CID": 297, "name": "Methane", "formula": "CH4"},
    947: {"CID": 947, "name": "Nitrogen", "formula": "N2"},
    962: {"CID": 962, "name": "Water", "formula": "H2O"},
    977: {"CID": 977, "name": "Oxygen", "formula": "O2"},
}


class StubCompoundDirectory:
    """Stands in for PubChem; records every CID it is asked for."""

    def __init__(self, compounds=None):
        self.compounds = dict(compounds or KNOWN_COMPOUNDS)
        self.calls = []

    def fetch_compound(self, cid):
        self.calls.append(cid)
        if cid not in self.compounds:
            raise compound_not_found(cid)
        return dict(self.compounds[cid])


@pytest.fixture
def adapter():
    """In-memory SQLite database with the catalog schema."""
    db = SQLiteAdapter({"database": ":memory:"})
    db.connect()
    create_schema(db)
    yield db
    db.disconnect()


@pytest.fixture
def directory():
    return StubCompoundDirectory()


@pytest.fixture
def compounds(adapter, directory):
    return CompoundModel(adapter, fetcher=directory.fetch_compound)


@pytest.fixture
def stars(adapter):
    return StarModel(adapter)


@pytest.fixture
def systems(adapter, stars):
    return PlanetarySystemModel(adapter, stars=stars)


@pytest.fixture
def planets(adapter, compounds):
    return PlanetModel(adapter, compounds=compounds)


@pytest.fixture
def planet_types(adapter):
    return PlanetTypeModel(adapter)


@pytest.fixture
def users(adapter):
    return UserModel(adapter)


@pytest.fixture
def user(users):
    """A registered user."""
    return users.create(
        UserCreate(username="astrid", email="astrid@example.com"),
        password_hash="$2b$10$hash"
    )


@pytest.fixture
def system(systems, user):
    """A planetary system (with its default star) owned by ``user``."""
    return systems.create(
        PlanetarySystemInput(name="Kepler-186", description="Red dwarf system", distance_ly=582.0),
        user_id=user["user_id"]
    )


@pytest.fixture
def planet_type(adapter):
    """A planet type to attach planets to."""
    result = adapter.execute(
        "INSERT INTO planet_types (name, min_mass, max_mass, min_radius, max_radius, "
        "has_rings, has_surface, max_moons) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
        ["Terrestrial", 0.1, 10.0, 0.5, 2.5, False, True, 5]
    )
    return {"planet_type_id": result.last_insert_id, "name": "Terrestrial"}


@pytest.fixture
def make_planet_input(system, planet_type):
    """Build a valid PlanetInput; keyword arguments override fields."""

    def _make(**overrides):
        data = {
            "name": "Kepler-186f",
            "description": "Earth-sized, in the habitable zone",
            "mass_earth": 1.4,
            "radius_earth": 1.17,
            "inclination_deg": 89.9,
            "rotation_speed_kms": 0.4,
            "albedo": 0.3,
            "star_distance_au": 0.43,
            "has_rings": False,
            "moon_count": 0,
            "planetary_system_id": system["planetary_system_id"],
            "planet_type_id": planet_type["planet_type_id"],
        }
        data.update(overrides)
        return PlanetInput(**data)

    return _make


@pytest.fixture
def planet(planets, make_planet_input):
    """A planet with two compounds and no atmosphere."""
    return planets.create(make_planet_input(
        compounds=[{"CID": 962, "percentage": 30}, {"CID": 280, "percentage": 10}]
    ))
