import logging
from typing import Any, Dict, Optional

from universe.domain.models.base import ResourceModel
from universe.domain.models.star import StarModel
from universe.domain.query.parse import parse_number
from universe.shared.types.models import (
    PlanetarySystemInput,
    PlanetarySystemPatch,
    StarInput,
    sent_fields,
)
from universe.shared.types.query import QueryConfig

logger = logging.getLogger(__name__)

DEFAULT_STAR_THUMBNAIL = "https://example.com/default-star.jpg"

_PLANET_COLUMNS = (
    "planet_id", "description", "mass_earth", "radius_earth", "inclination_deg",
    "rotation_speed_kms", "albedo", "star_distance_au", "has_rings", "moon_count",
    "surface_texture_url", "height_texture_url", "planet_type_id",
)


class PlanetarySystemModel(ResourceModel):
    """
    ``planetary_systems`` table.

    A system owns exactly one star: creating a system creates a default
    star named after it, and deleting the system deletes the star.
    """

    TABLE = "planetary_systems"
    PRIMARY_KEY = "planetary_system_id"
    SELECT_FIELDS = (
        "planetary_system_id",
        "name",
        "description",
        "distance_ly",
        "thumbnail_url",
        "user_id",
        "star_id",
    )

    QUERY_CONFIG = QueryConfig(
        searchable=("name", "description"),
        filterable=("name", "distance_ly", "user_id", "star_id"),
        sortable=("planetary_system_id", "name", "distance_ly"),
        default_sort="planetary_system_id",
    )

    FILTER_PARSERS = {
        "name": str,
        "distance_ly": parse_number,
        "user_id": parse_number,
        "star_id": parse_number,
    }

    def __init__(self, adapter, stars: Optional[StarModel] = None):
        super().__init__(adapter)
        self.stars = stars or StarModel(adapter)

    def create(self, data: PlanetarySystemInput, user_id: int) -> Dict[str, Any]:
        """Insert the system and its default star in one transaction."""
        with self.adapter.transaction() as conn:
            star = self.stars.create(
                StarInput(
                    name=data.name,
                    description=None,
                    mass_solar=1.0,
                    radius_solar=1.0,
                    thumbnail_url=DEFAULT_STAR_THUMBNAIL,
                ),
                conn=conn
            )

            result = conn.execute(
                "INSERT INTO planetary_systems "
                "(name, description, distance_ly, thumbnail_url, user_id, star_id) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                [data.name, data.description, data.distance_ly, data.thumbnail_url,
                 user_id, star["star_id"]]
            )

        logger.info(f"Created planetary system {result.last_insert_id} with star {star['star_id']}")

        return {
            "planetary_system_id": result.last_insert_id,
            **data.model_dump(),
            "user_id": user_id,
            "star_id": star["star_id"],
        }

    def get_full(self, id: int) -> Optional[Dict[str, Any]]:
        """System with its owner, its star and every planet in it."""
        planet_select = ", ".join(f"p.{col}" for col in _PLANET_COLUMNS)
        rows = self.adapter.execute(
            f"""
            SELECT
                ps.planetary_system_id, ps.name AS system_name,
                ps.description AS system_description, ps.distance_ly,
                ps.thumbnail_url AS system_thumbnail, ps.user_id,
                u.username, u.profile_picture_url, u.created_at,
                s.star_id, s.name AS star_name, s.description AS star_description,
                s.mass_solar, s.radius_solar, s.thumbnail_url AS star_thumbnail,
                p.name AS planet_name, p.thumbnail_url AS planet_thumbnail,
                {planet_select}
            FROM planetary_systems ps
            JOIN users u ON ps.user_id = u.user_id
            JOIN stars s ON ps.star_id = s.star_id
            LEFT JOIN planets p ON ps.planetary_system_id = p.planetary_system_id
            WHERE ps.planetary_system_id = ?
            ORDER BY p.planet_id
            """,
            [id]
        ).rows

        if not rows:
            return None

        base = rows[0]
        system = {
            "planetary_system_id": base["planetary_system_id"],
            "name": base["system_name"],
            "description": base["system_description"],
            "distance_ly": base["distance_ly"],
            "thumbnail_url": base["system_thumbnail"],
            "user_id": base["user_id"],
            "star_id": base["star_id"],
            "user": {
                "user_id": base["user_id"],
                "username": base["username"],
                "profile_picture_url": base["profile_picture_url"],
                "created_at": base["created_at"],
            },
            "star": {
                "star_id": base["star_id"],
                "name": base["star_name"],
                "description": base["star_description"],
                "mass_solar": base["mass_solar"],
                "radius_solar": base["radius_solar"],
                "thumbnail_url": base["star_thumbnail"],
            },
            "planets": [],
        }

        for row in rows:
            if row["planet_id"] is None:
                continue
            planet = {col: row[col] for col in _PLANET_COLUMNS}
            planet["name"] = row["planet_name"]
            planet["thumbnail_url"] = row["planet_thumbnail"]
            system["planets"].append(planet)

        return system

    def update(self, id: int, data: PlanetarySystemInput) -> bool:
        return self._patch_row(id, {
            "name": data.name,
            "description": data.description,
            "distance_ly": data.distance_ly,
            "thumbnail_url": data.thumbnail_url,
        })

    def patch(self, id: int, updates: PlanetarySystemPatch) -> bool:
        return self._patch_row(id, sent_fields(updates))

    def delete(self, id: int) -> bool:
        """Delete the system, its planets (cascade) and its star atomically."""
        system = self.get_by_id(id, ["planetary_system_id", "star_id"])
        if not system:
            return False

        with self.adapter.transaction() as tx:
            if not super().delete(id, conn=tx):
                return False
            self.stars.delete(system["star_id"], conn=tx)

        return True
