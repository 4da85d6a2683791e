import logging
from typing import Any, Dict, Optional

from universe.domain.models.base import ResourceModel
from universe.domain.query.parse import parse_number
from universe.infrastructure.adapters.base import TransactionConnection
from universe.shared.types.models import StarInput, StarPatch, sent_fields
from universe.shared.types.query import QueryConfig

logger = logging.getLogger(__name__)

STAR_FIELDS = ("name", "description", "mass_solar", "radius_solar", "thumbnail_url")


class StarModel(ResourceModel):
    """``stars`` table. Every star belongs to exactly one planetary system."""

    TABLE = "stars"
    PRIMARY_KEY = "star_id"
    SELECT_FIELDS = ("star_id", *STAR_FIELDS)

    QUERY_CONFIG = QueryConfig(
        searchable=("name", "description"),
        filterable=("name", "mass_solar", "radius_solar"),
        sortable=("star_id", "name", "mass_solar", "radius_solar"),
        default_sort="star_id",
    )

    FILTER_PARSERS = {
        "name": str,
        "mass_solar": parse_number,
        "radius_solar": parse_number,
    }

    def get_full(self, id: int) -> Optional[Dict[str, Any]]:
        """Star with its planetary system and the system's owner."""
        row = self.adapter.execute(
            """
            SELECT
                s.star_id, s.name AS star_name, s.description AS star_description,
                s.mass_solar, s.radius_solar, s.thumbnail_url AS star_thumbnail,
                ps.planetary_system_id, ps.name AS system_name,
                ps.description AS system_description, ps.distance_ly,
                ps.thumbnail_url AS system_thumbnail, ps.user_id,
                u.username, u.profile_picture_url, u.created_at
            FROM stars s
            JOIN planetary_systems ps ON ps.star_id = s.star_id
            JOIN users u ON ps.user_id = u.user_id
            WHERE s.star_id = ?
            """,
            [id]
        ).first()

        if not row:
            return None

        return {
            "star_id": row["star_id"],
            "name": row["star_name"],
            "description": row["star_description"],
            "mass_solar": row["mass_solar"],
            "radius_solar": row["radius_solar"],
            "thumbnail_url": row["star_thumbnail"],
            "system": {
                "planetary_system_id": row["planetary_system_id"],
                "star_id": row["star_id"],
                "name": row["system_name"],
                "description": row["system_description"],
                "distance_ly": row["distance_ly"],
                "thumbnail_url": row["system_thumbnail"],
                "user_id": row["user_id"],
                "user": {
                    "user_id": row["user_id"],
                    "username": row["username"],
                    "profile_picture_url": row["profile_picture_url"],
                    "created_at": row["created_at"],
                },
            },
        }

    def create(self, star: StarInput, conn: Optional[TransactionConnection] = None) -> Dict[str, Any]:
        data = star.model_dump()
        result = self._executor(conn).execute(
            "INSERT INTO stars (name, description, mass_solar, radius_solar, thumbnail_url) "
            "VALUES (?, ?, ?, ?, ?)",
            [data[f] for f in STAR_FIELDS]
        )
        return {"star_id": result.last_insert_id, **data}

    def update(self, id: int, star: StarInput) -> bool:
        data = star.model_dump()
        return self._patch_row(id, {f: data[f] for f in STAR_FIELDS})

    def patch(self, id: int, updates: StarPatch) -> bool:
        return self._patch_row(id, sent_fields(updates))
