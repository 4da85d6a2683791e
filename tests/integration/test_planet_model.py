"""
Tests for PlanetModel: list queries, reads and transactional writes.
"""

import pytest

from universe.errors import ErrorCode, UniverseError
from universe.shared.types.models import PlanetPatch
from universe.shared.types.query import QueryOptions


@pytest.fixture
def three_planets(planets, make_planet_input):
    """Three planets with different masses; only Saturnish has rings."""
    created = [
        planets.create(make_planet_input(name="Rocky", mass_earth=0.8)),
        planets.create(make_planet_input(
            name="Saturnish",
            description="Ringed gas giant",
            mass_earth=95.0,
            has_rings=True,
            moon_count=3,
            compounds=[{"CID": 947, "percentage": 10}],
            atmosphere={"pressure_atm": 3.0, "greenhouse_factor": 0.2, "texture_url": "gas.png",
                        "compounds": [{"CID": 297, "percentage": 60}]},
        )),
        planets.create(make_planet_input(name="Ocean World", mass_earth=4.2, description="Covered in ice")),
    ]
    return created


class TestCreate:
    """Planet creation with children."""

    def test_create_with_compounds(self, planet):
        assert planet["name"] == "Kepler-186f"
        assert planet["atmosphere"] is None
        assert [c["CID"] for c in planet["compounds"]] == [280, 962]
        assert planet["compounds"][1]["name"] == "Water"

    def test_create_with_atmosphere(self, planets, make_planet_input):
        created = planets.create(make_planet_input(
            atmosphere={"pressure_atm": 0.9, "greenhouse_factor": 1.1, "texture_url": "haze.png",
                        "compounds": [{"CID": 977, "percentage": 21}]}
        ))

        atmosphere = created["atmosphere"]
        assert atmosphere["pressure_atm"] == 0.9
        assert atmosphere["compounds"] == [
            {"CID": 977, "percentage": 21, "name": "Oxygen", "formula": "O2"}
        ]

    def test_unknown_compound_creates_nothing(self, adapter, planets, make_planet_input):
        with pytest.raises(UniverseError):
            planets.create(make_planet_input(compounds=[{"CID": 31337, "percentage": 1}]))

        assert adapter.execute("SELECT COUNT(*) AS n FROM planets").first()["n"] == 0


class TestGetAll:
    """Search, filters, sort and pagination against real rows."""

    def test_attaches_children(self, planets, three_planets):
        rows = {p["name"]: p for p in planets.get_all()}

        assert rows["Saturnish"]["compounds"][0]["formula"] == "N2"
        assert rows["Saturnish"]["atmosphere"]["compounds"][0]["name"] == "Methane"
        assert rows["Rocky"]["compounds"] == []
        assert rows["Rocky"]["atmosphere"] is None

    def test_default_sort_is_planet_id(self, planets, three_planets):
        ids = [p["planet_id"] for p in planets.get_all()]
        assert ids == sorted(ids)

    def test_sort_descending(self, planets, three_planets):
        names = [p["name"] for p in planets.get_all(QueryOptions(sort="-mass_earth"))]
        assert names == ["Saturnish", "Ocean World", "Rocky"]

    def test_unknown_sort_uses_default(self, planets, three_planets):
        names = [p["name"] for p in planets.get_all(QueryOptions(sort="surface_texture_url"))]
        assert names == ["Rocky", "Saturnish", "Ocean World"]

    def test_boolean_filter_from_query_string(self, planets, three_planets):
        rows = planets.get_all(QueryOptions(filters={"has_rings": "true"}))
        assert [p["name"] for p in rows] == ["Saturnish"]

    def test_numeric_filter_from_query_string(self, planets, three_planets):
        rows = planets.get_all(QueryOptions(filters={"moon_count": "3"}))
        assert [p["name"] for p in rows] == ["Saturnish"]

    def test_unknown_filter_is_ignored(self, planets, three_planets):
        rows = planets.get_all(QueryOptions(filters={"thumbnail_url": "x"}))
        assert len(rows) == 3

    def test_invalid_filter_value(self, planets, three_planets):
        with pytest.raises(UniverseError) as exc_info:
            planets.get_all(QueryOptions(filters={"mass_earth": "heavy"}))
        assert exc_info.value.code == ErrorCode.ERR_INVALID_FILTER

    def test_search_spans_name_and_description(self, planets, three_planets):
        rows = planets.get_all(QueryOptions(search="ice"))
        assert [p["name"] for p in rows] == ["Ocean World"]

    def test_pagination(self, planets, three_planets):
        rows = planets.get_all(QueryOptions(page=2, limit=2))
        assert [p["name"] for p in rows] == ["Ocean World"]

    def test_empty_result(self, planets):
        assert planets.get_all(QueryOptions(search="nothing")) == []


class TestReads:
    def test_get_by_id_missing(self, planets):
        assert planets.get_by_id(404) is None

    def test_get_by_id_selects_requested_fields(self, planets, planet):
        row = planets.get_by_id(planet["planet_id"], ["planet_id", "name"])

        assert row["name"] == "Kepler-186f"
        assert "mass_earth" not in row

    def test_get_by_id_ignores_fields_outside_allow_list(self, planets, planet, user):
        smuggled = "name` , (SELECT password FROM users LIMIT 1) AS `leak"

        row = planets.get_by_id(planet["planet_id"], [smuggled])

        assert "leak" not in row
        assert "$2b$10$hash" not in row.values()
        assert row["mass_earth"] == 1.4

    def test_get_full(self, planets, planet, system, user):
        full = planets.get_full(planet["planet_id"])

        assert full["system"]["name"] == "Kepler-186"
        assert full["system"]["star"]["name"] == "Kepler-186"
        assert full["system"]["user"]["username"] == user["username"]
        assert "email" not in full["system"]["user"]


class TestUpdate:
    """Full replacement."""

    def test_missing_planet_returns_false(self, planets, make_planet_input):
        assert planets.update(404, make_planet_input()) is False

    def test_replaces_columns_and_keeps_unsent_children(self, planets, planet, make_planet_input):
        assert planets.update(planet["planet_id"], make_planet_input(name="Renamed", moon_count=2)) is True

        reread = planets.get_by_id(planet["planet_id"])
        assert reread["name"] == "Renamed"
        assert reread["moon_count"] == 2
        assert len(reread["compounds"]) == 2

    def test_sent_children_are_replaced(self, planets, planet, make_planet_input):
        planets.update(planet["planet_id"], make_planet_input(compounds=[{"CID": 297, "percentage": 1}]))

        reread = planets.get_by_id(planet["planet_id"])
        assert [c["CID"] for c in reread["compounds"]] == [297]

    def test_failure_in_children_rolls_back_columns(self, planets, planet, make_planet_input):
        with pytest.raises(UniverseError):
            planets.update(
                planet["planet_id"],
                make_planet_input(name="Never", compounds=[{"CID": 31337, "percentage": 1}])
            )

        reread = planets.get_by_id(planet["planet_id"])
        assert reread["name"] == "Kepler-186f"
        assert len(reread["compounds"]) == 2


class TestPatch:
    """Partial updates with the atmosphere tri-state."""

    def test_only_sent_columns_change(self, planets, planet):
        planets.patch(planet["planet_id"], PlanetPatch(name="Io"))

        reread = planets.get_by_id(planet["planet_id"])
        assert reread["name"] == "Io"
        assert reread["mass_earth"] == 1.4
        assert len(reread["compounds"]) == 2

    def test_missing_planet_returns_false(self, planets):
        assert planets.patch(404, PlanetPatch(name="Io")) is False

    def test_children_only(self, planets, planet):
        assert planets.patch(planet["planet_id"], PlanetPatch(compounds=[])) is True
        assert planets.get_by_id(planet["planet_id"])["compounds"] == []

    def test_create_then_clear_atmosphere(self, planets, planet):
        planets.patch(planet["planet_id"], PlanetPatch(
            atmosphere={"pressure_atm": 1.0, "greenhouse_factor": 0.5, "texture_url": "x"}
        ))
        assert planets.get_by_id(planet["planet_id"])["atmosphere"]["pressure_atm"] == 1.0

        planets.patch(planet["planet_id"], PlanetPatch.model_validate({"atmosphere": None}))
        assert planets.get_by_id(planet["planet_id"])["atmosphere"] is None

    def test_absent_atmosphere_is_kept(self, planets, planet):
        planets.patch(planet["planet_id"], PlanetPatch(
            atmosphere={"pressure_atm": 1.0, "greenhouse_factor": 0.5, "texture_url": "x"}
        ))
        planets.patch(planet["planet_id"], PlanetPatch(name="Still cloudy"))

        assert planets.get_by_id(planet["planet_id"])["atmosphere"] is not None

    def test_partial_atmosphere_rolls_back_planet_columns(self, planets, planet):
        with pytest.raises(UniverseError) as exc_info:
            planets.patch(planet["planet_id"], PlanetPatch(name="Changed", atmosphere={"pressure_atm": 2}))

        assert exc_info.value.code == ErrorCode.ERR_ATMOSPHERE_INCOMPLETE

        reread = planets.get_by_id(planet["planet_id"])
        assert reread["name"] == "Kepler-186f"
        assert reread["atmosphere"] is None


class TestDelete:
    def test_delete_cascades_children(self, adapter, planets, planet):
        planets.patch(planet["planet_id"], PlanetPatch(
            atmosphere={"pressure_atm": 1.0, "greenhouse_factor": 0.5, "texture_url": "x",
                        "compounds": [{"CID": 947, "percentage": 70}]}
        ))

        assert planets.delete(planet["planet_id"]) is True
        assert planets.delete(planet["planet_id"]) is False

        for table in ("planets_compounds", "atmospheres", "atmospheres_compounds"):
            count = adapter.execute(f"SELECT COUNT(*) AS n FROM {table}").first()["n"]
            assert count == 0, table
