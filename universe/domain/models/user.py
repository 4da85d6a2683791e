"""
User Model

Public reads never return ``email`` or ``password``. Password hashing
belongs to the caller; this model only stores the hash it is given.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from universe.domain.models.base import ResourceModel
from universe.domain.query.parse import filter_allowed_fields, format_sql_columns
from universe.shared.types.models import UserCreate, UserPatch, UserUpdate, sent_fields
from universe.shared.types.query import QueryConfig

logger = logging.getLogger(__name__)


class UserModel(ResourceModel):
    TABLE = "users"
    PRIMARY_KEY = "user_id"
    SELECT_FIELDS = ("user_id", "username", "profile_picture_url", "created_at")
    SELECT_FIELDS_PRIVATE = ("user_id", "username", "email", "profile_picture_url", "created_at")

    # Columns a caller may ask for by name
    ALLOWED_FIELDS = frozenset(SELECT_FIELDS)

    QUERY_CONFIG = QueryConfig(
        searchable=("username",),
        filterable=("username", "created_at"),
        sortable=("user_id", "username", "created_at"),
        default_sort="user_id",
    )

    FILTER_PARSERS = {
        "username": str,
        "email": str,
    }

    def get_by_id(self, id: int, fields: Optional[Sequence[str]] = None) -> Optional[Dict[str, Any]]:
        """User by id; requested ``fields`` outside the public set are dropped."""
        selected = filter_allowed_fields(fields, self.ALLOWED_FIELDS) if fields else []
        return super().get_by_id(id, selected or self.SELECT_FIELDS)

    def get_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        return self.adapter.execute(
            f"SELECT {format_sql_columns(self.SELECT_FIELDS)} FROM users WHERE username = ?",
            [username]
        ).first()

    def get_full(self, id: int) -> Optional[Dict[str, Any]]:
        """User with the planetary systems they own."""
        user = super().get_by_id(id)
        if not user:
            return None

        systems = self.adapter.execute(
            "SELECT planetary_system_id, name, description, distance_ly, thumbnail_url, star_id "
            "FROM planetary_systems WHERE user_id = ? ORDER BY planetary_system_id",
            [id]
        ).rows

        return {**user, "planetary_systems": systems}

    def create(self, user: UserCreate, password_hash: str) -> Dict[str, Any]:
        result = self.adapter.execute(
            "INSERT INTO users (username, email, password, profile_picture_url) VALUES (?, ?, ?, ?)",
            [user.username, user.email, password_hash, user.profile_picture_url]
        )
        logger.info(f"Created user {user.username!r}")

        created = self.adapter.execute(
            f"SELECT {format_sql_columns(self.SELECT_FIELDS_PRIVATE)} FROM users WHERE user_id = ?",
            [result.last_insert_id]
        )
        return created.first()

    def update(self, id: int, data: UserUpdate) -> bool:
        return self._patch_row(id, {
            "username": data.username,
            "email": data.email,
            "password": data.password,
            "profile_picture_url": data.profile_picture_url,
        })

    def patch(self, id: int, updates: UserPatch) -> bool:
        return self._patch_row(id, sent_fields(updates))
