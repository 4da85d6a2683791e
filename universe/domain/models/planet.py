"""
Planet Model

Planets carry two child aggregates: a compound list and an optional
atmosphere with its own compound list. Every write that touches them
runs the parent row change and the child synchronization on one
transaction, so a failure anywhere leaves the planet exactly as it was.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from universe.domain.models.base import ResourceModel
from universe.domain.models.compound import CompoundModel
from universe.domain.query.builder import build_in_clause, placeholders_for, row_values
from universe.domain.query.parse import format_sql_columns, parse_bool, parse_number
from universe.domain.sync.planet_sync import sync_planet_children
from universe.shared.types.models import PlanetInput, PlanetPatch, sent_fields
from universe.shared.types.query import QueryConfig, QueryOptions

logger = logging.getLogger(__name__)

# Columns written on create and full update
PLANET_FIELDS = (
    "name", "description", "mass_earth", "radius_earth", "inclination_deg",
    "rotation_speed_kms", "albedo", "star_distance_au", "has_rings", "moon_count",
    "surface_texture_url", "height_texture_url", "thumbnail_url",
    "planetary_system_id", "planet_type_id",
)

CHILD_FIELDS = ("compounds", "atmosphere")


class PlanetModel(ResourceModel):
    TABLE = "planets"
    PRIMARY_KEY = "planet_id"
    SELECT_FIELDS = ("planet_id", *PLANET_FIELDS)

    QUERY_CONFIG = QueryConfig(
        searchable=("name", "description"),
        filterable=(
            "name", "description", "mass_earth", "radius_earth", "inclination_deg",
            "rotation_speed_kms", "albedo", "star_distance_au", "has_rings", "moon_count",
            "planetary_system_id", "planet_type_id",
        ),
        sortable=(
            "planet_id", "name", "mass_earth", "radius_earth", "inclination_deg",
            "rotation_speed_kms", "albedo", "star_distance_au", "moon_count",
        ),
        default_sort="planet_id",
    )

    FILTER_PARSERS = {
        "name": str,
        "description": str,
        "mass_earth": parse_number,
        "radius_earth": parse_number,
        "inclination_deg": parse_number,
        "rotation_speed_kms": parse_number,
        "albedo": parse_number,
        "star_distance_au": parse_number,
        "has_rings": parse_bool,
        "moon_count": parse_number,
        "planetary_system_id": parse_number,
        "planet_type_id": parse_number,
    }

    def __init__(self, adapter, compounds: CompoundModel):
        super().__init__(adapter)
        self.compounds = compounds

    # =========================================================================
    # Reads
    # =========================================================================

    def get_all(self, options: Optional[QueryOptions] = None) -> List[Dict[str, Any]]:
        """
        List planets, each with ``compounds`` and ``atmosphere`` attached.

        Children for the whole page are loaded with three IN queries rather
        than per planet.
        """
        planets = super().get_all(options)
        if not planets:
            return []

        planet_ids = [p["planet_id"] for p in planets]
        in_clause = build_in_clause("planet_id", planet_ids)

        compound_rows = self.adapter.execute(
            "SELECT pc.planet_id, pc.CID, pc.percentage, c.name, c.formula "
            "FROM planets_compounds pc JOIN compounds c ON pc.CID = c.CID "
            f"WHERE pc.{in_clause.sql}",
            in_clause.values
        ).rows
        atmosphere_rows = self.adapter.execute(
            "SELECT planet_id, pressure_atm, greenhouse_factor, texture_url "
            f"FROM atmospheres WHERE {in_clause.sql}",
            in_clause.values
        ).rows
        atmosphere_compound_rows = self.adapter.execute(
            "SELECT ac.planet_id, ac.CID, ac.percentage, c.name, c.formula "
            "FROM atmospheres_compounds ac JOIN compounds c ON ac.CID = c.CID "
            f"WHERE ac.{in_clause.sql}",
            in_clause.values
        ).rows

        compounds_by_planet: Dict[int, List[Dict[str, Any]]] = {}
        for row in compound_rows:
            compounds_by_planet.setdefault(row["planet_id"], []).append(_compound_entry(row))

        atmospheres: Dict[int, Dict[str, Any]] = {}
        for row in atmosphere_rows:
            atmospheres[row["planet_id"]] = {
                "pressure_atm": row["pressure_atm"],
                "greenhouse_factor": row["greenhouse_factor"],
                "texture_url": row["texture_url"],
                "compounds": [],
            }
        for row in atmosphere_compound_rows:
            atmosphere = atmospheres.get(row["planet_id"])
            if atmosphere is not None:
                atmosphere["compounds"].append(_compound_entry(row))

        for planet in planets:
            planet["compounds"] = compounds_by_planet.get(planet["planet_id"], [])
            planet["atmosphere"] = atmospheres.get(planet["planet_id"])

        return planets

    def get_by_id(self, id: int, fields: Optional[Sequence[str]] = None) -> Optional[Dict[str, Any]]:
        """Planet with its compounds and atmosphere, or None."""
        planet = super().get_by_id(id, fields)
        if not planet:
            return None

        planet["compounds"] = self.adapter.execute(
            "SELECT pc.CID, pc.percentage, c.name, c.formula "
            "FROM planets_compounds pc JOIN compounds c ON pc.CID = c.CID "
            "WHERE pc.planet_id = ? ORDER BY pc.CID",
            [id]
        ).rows

        atmosphere = self.adapter.execute(
            "SELECT pressure_atm, greenhouse_factor, texture_url FROM atmospheres WHERE planet_id = ?",
            [id]
        ).first()

        if atmosphere:
            atmosphere["compounds"] = self.adapter.execute(
                "SELECT ac.CID, ac.percentage, c.name, c.formula "
                "FROM atmospheres_compounds ac JOIN compounds c ON ac.CID = c.CID "
                "WHERE ac.planet_id = ? ORDER BY ac.CID",
                [id]
            ).rows
        planet["atmosphere"] = atmosphere

        return planet

    def get_full(self, id: int) -> Optional[Dict[str, Any]]:
        """Planet plus its system, the system's star and owner."""
        planet = self.get_by_id(id)
        if not planet:
            return None

        row = self.adapter.execute(
            """
            SELECT
                ps.planetary_system_id, ps.name AS system_name,
                ps.description AS system_description, ps.distance_ly,
                ps.thumbnail_url AS system_thumbnail, ps.user_id, ps.star_id,
                s.name AS star_name, s.description AS star_description,
                s.mass_solar, s.radius_solar, s.thumbnail_url AS star_thumbnail,
                u.username, u.profile_picture_url, u.created_at
            FROM planetary_systems ps
            JOIN stars s ON ps.star_id = s.star_id
            JOIN users u ON ps.user_id = u.user_id
            WHERE ps.planetary_system_id = ?
            """,
            [planet["planetary_system_id"]]
        ).first()

        if not row:
            return None

        planet["system"] = {
            "planetary_system_id": row["planetary_system_id"],
            "name": row["system_name"],
            "description": row["system_description"],
            "distance_ly": row["distance_ly"],
            "thumbnail_url": row["system_thumbnail"],
            "user_id": row["user_id"],
            "star_id": row["star_id"],
            "user": {
                "user_id": row["user_id"],
                "username": row["username"],
                "profile_picture_url": row["profile_picture_url"],
                "created_at": row["created_at"],
            },
            "star": {
                "star_id": row["star_id"],
                "name": row["star_name"],
                "description": row["star_description"],
                "mass_solar": row["mass_solar"],
                "radius_solar": row["radius_solar"],
                "thumbnail_url": row["star_thumbnail"],
            },
        }
        return planet

    # =========================================================================
    # Writes
    # =========================================================================

    def create(self, data: PlanetInput) -> Dict[str, Any]:
        """Insert a planet with its compounds and atmosphere."""
        payload = sent_fields(data)
        planet = data.model_dump(include=set(PLANET_FIELDS))

        with self.adapter.transaction() as conn:
            result = conn.execute(
                f"INSERT INTO planets ({format_sql_columns(PLANET_FIELDS)}) "
                f"VALUES ({placeholders_for(PLANET_FIELDS)})",
                row_values(planet, PLANET_FIELDS)
            )
            planet_id = result.last_insert_id

            sync_planet_children(planet_id, payload, conn, self.compounds)

        logger.info(f"Created planet {planet_id} ({data.name!r})")
        return self.get_by_id(planet_id)

    def update(self, id: int, data: PlanetInput) -> bool:
        """
        Replace every planet column, then synchronize children.

        Returns False, writing nothing, when the planet does not exist.
        Children that were not sent are left as they are.
        """
        payload = sent_fields(data)
        planet = data.model_dump(include=set(PLANET_FIELDS))

        with self.adapter.transaction() as conn:
            if not self.exists(id, conn):
                return False

            self._patch_row(id, {f: planet[f] for f in PLANET_FIELDS}, conn)
            sync_planet_children(id, payload, conn, self.compounds)

        logger.info(f"Updated planet {id}")
        return True

    def patch(self, id: int, updates: PlanetPatch) -> bool:
        """
        Apply only the sent planet columns, then synchronize children.

        ``atmosphere: null`` deletes the atmosphere; an absent one is left
        alone. Returns False when the planet does not exist.
        """
        payload = sent_fields(updates)
        planet_updates = {k: v for k, v in payload.items() if k not in CHILD_FIELDS}

        with self.adapter.transaction() as conn:
            if not self.exists(id, conn):
                return False

            if planet_updates:
                self._patch_row(id, planet_updates, conn)
            sync_planet_children(id, payload, conn, self.compounds)

        logger.info(f"Patched planet {id}: {sorted(payload)}")
        return True


def _compound_entry(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "CID": row["CID"],
        "percentage": row["percentage"],
        "name": row["name"],
        "formula": row["formula"],
    }
