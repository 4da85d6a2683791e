from typing import Any, Dict, List, Optional

from universe.domain.models.base import ResourceModel


class PlanetTypeModel(ResourceModel):
    """Read-only planet type definitions (mass/radius ranges, rings, moons)."""

    TABLE = "planet_types"
    PRIMARY_KEY = "planet_type_id"
    SELECT_FIELDS = (
        "planet_type_id",
        "name",
        "min_mass",
        "max_mass",
        "min_radius",
        "max_radius",
        "has_rings",
        "has_surface",
        "max_moons",
    )

    def get_all(self, options=None) -> List[Dict[str, Any]]:
        return self.adapter.execute(
            f"SELECT {', '.join(self.SELECT_FIELDS)} FROM planet_types ORDER BY planet_type_id"
        ).rows

    def get_by_id(self, id: int, fields=None) -> Optional[Dict[str, Any]]:
        return self.adapter.execute(
            f"SELECT {', '.join(self.SELECT_FIELDS)} FROM planet_types WHERE planet_type_id = ?",
            [id]
        ).first()
