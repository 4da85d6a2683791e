"""
Catalog Schema

DDL for every table the resource models read and write. The same
statements run on SQLite and MySQL; only the auto-increment primary key
and the table options differ per engine.
"""

import logging
from typing import Dict, List

from universe.infrastructure.adapters.base import BaseAdapter

logger = logging.getLogger(__name__)


_ENGINE_TOKENS: Dict[str, Dict[str, str]] = {
    "sqlite": {
        "pk": "INTEGER PRIMARY KEY AUTOINCREMENT",
        "options": "",
    },
    "mysql": {
        "pk": "INT AUTO_INCREMENT PRIMARY KEY",
        "options": " ENGINE=InnoDB DEFAULT CHARSET=utf8mb4",
    },
}


# Creation order respects foreign keys.
TABLES: List[str] = [
    """
    CREATE TABLE IF NOT EXISTS users (
        user_id {pk},
        username VARCHAR(50) NOT NULL UNIQUE,
        email VARCHAR(255) NOT NULL UNIQUE,
        password VARCHAR(255) NOT NULL,
        profile_picture_url VARCHAR(255),
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    ){options}
    """,
    """
    CREATE TABLE IF NOT EXISTS stars (
        star_id {pk},
        name VARCHAR(100) NOT NULL,
        description TEXT,
        mass_solar DOUBLE NOT NULL,
        radius_solar DOUBLE NOT NULL,
        thumbnail_url VARCHAR(255)
    ){options}
    """,
    """
    CREATE TABLE IF NOT EXISTS planetary_systems (
        planetary_system_id {pk},
        name VARCHAR(100) NOT NULL,
        description TEXT,
        distance_ly DOUBLE NOT NULL,
        thumbnail_url VARCHAR(255),
        user_id INT NOT NULL,
        star_id INT NOT NULL,
        FOREIGN KEY (user_id) REFERENCES users(user_id) ON DELETE CASCADE,
        FOREIGN KEY (star_id) REFERENCES stars(star_id)
    ){options}
    """,
    """
    CREATE TABLE IF NOT EXISTS planet_types (
        planet_type_id {pk},
        name VARCHAR(50) NOT NULL UNIQUE,
        min_mass DOUBLE,
        max_mass DOUBLE,
        min_radius DOUBLE,
        max_radius DOUBLE,
        has_rings BOOLEAN NOT NULL DEFAULT FALSE,
        has_surface BOOLEAN NOT NULL DEFAULT TRUE,
        max_moons INT
    ){options}
    """,
    """
    CREATE TABLE IF NOT EXISTS planets (
        planet_id {pk},
        name VARCHAR(100) NOT NULL,
        description TEXT,
        mass_earth DOUBLE NOT NULL,
        radius_earth DOUBLE NOT NULL,
        inclination_deg DOUBLE NOT NULL DEFAULT 0,
        rotation_speed_kms DOUBLE NOT NULL DEFAULT 0,
        albedo DOUBLE NOT NULL DEFAULT 0,
        star_distance_au DOUBLE NOT NULL,
        has_rings BOOLEAN NOT NULL DEFAULT FALSE,
        moon_count INT NOT NULL DEFAULT 0,
        surface_texture_url VARCHAR(255),
        height_texture_url VARCHAR(255),
        thumbnail_url VARCHAR(255),
        planetary_system_id INT NOT NULL,
        planet_type_id INT NOT NULL,
        FOREIGN KEY (planetary_system_id) REFERENCES planetary_systems(planetary_system_id) ON DELETE CASCADE,
        FOREIGN KEY (planet_type_id) REFERENCES planet_types(planet_type_id)
    ){options}
    """,
    """
    CREATE TABLE IF NOT EXISTS compounds (
        CID INT PRIMARY KEY,
        name VARCHAR(100) NOT NULL,
        formula VARCHAR(50) NOT NULL
    ){options}
    """,
    """
    CREATE TABLE IF NOT EXISTS planets_compounds (
        planet_id INT NOT NULL,
        CID INT NOT NULL,
        percentage DOUBLE NOT NULL,
        PRIMARY KEY (planet_id, CID),
        FOREIGN KEY (planet_id) REFERENCES planets(planet_id) ON DELETE CASCADE,
        FOREIGN KEY (CID) REFERENCES compounds(CID)
    ){options}
    """,
    """
    CREATE TABLE IF NOT EXISTS atmospheres (
        planet_id INT PRIMARY KEY,
        pressure_atm DOUBLE NOT NULL,
        greenhouse_factor DOUBLE NOT NULL,
        texture_url VARCHAR(255) NOT NULL,
        FOREIGN KEY (planet_id) REFERENCES planets(planet_id) ON DELETE CASCADE
    ){options}
    """,
    """
    CREATE TABLE IF NOT EXISTS atmospheres_compounds (
        planet_id INT NOT NULL,
        CID INT NOT NULL,
        percentage DOUBLE NOT NULL,
        PRIMARY KEY (planet_id, CID),
        FOREIGN KEY (planet_id) REFERENCES atmospheres(planet_id) ON DELETE CASCADE,
        FOREIGN KEY (CID) REFERENCES compounds(CID)
    ){options}
    """,
]


def render_schema(engine: str) -> List[str]:
    """Return the DDL statements for an engine."""
    tokens = _ENGINE_TOKENS.get(engine, _ENGINE_TOKENS["mysql"])
    return [ddl.format(**tokens).strip() for ddl in TABLES]


def create_schema(adapter: BaseAdapter) -> None:
    """Create every catalog table that does not exist yet."""
    statements = render_schema(adapter.ENGINE)
    with adapter.transaction() as conn:
        for ddl in statements:
            conn.execute(ddl)
    logger.info(f"Catalog schema ready on {adapter.ENGINE} ({len(statements)} tables)")
