"""
Planet Child Synchronization

Reconciles a planet's compound list and its optional atmosphere against a
create/update/patch payload. Every statement runs on the caller's
transaction handle; these functions never commit or roll back, so any
exception leaves the caller to roll back the whole unit of work.

Payload states:
    UNSET  - field not sent, nothing changes
    None   - atmosphere explicitly cleared (deleted with its compounds)
    value  - compound list: full replace
             atmosphere: create, or update only the fields that were sent

Usage:
    with adapter.transaction() as conn:
        conn.execute("UPDATE planets SET name = ? WHERE planet_id = ?", ["Io", 3])
        update_planet_compounds(3, [{"CID": 962, "percentage": 40}], conn, compounds)
        update_planet_atmosphere(3, None, conn, compounds)
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

from pydantic import BaseModel

from universe.domain.query.builder import build_set_clause
from universe.errors import atmosphere_incomplete
from universe.infrastructure.adapters.base import TransactionConnection
from universe.shared.types.models import UNSET, CompoundShare

logger = logging.getLogger(__name__)

ATMOSPHERE_FIELDS = ("pressure_atm", "greenhouse_factor", "texture_url")


class CompoundResolver(Protocol):
    """Anything that can make sure a compound row exists for a CID."""

    def ensure(self, cid: int, conn: Optional[TransactionConnection] = None) -> Dict[str, Any]:
        ...


def _as_dict(payload: Any) -> Dict[str, Any]:
    if isinstance(payload, BaseModel):
        return payload.model_dump(exclude_unset=True)
    return dict(payload)


def _share(entry: Any) -> CompoundShare:
    if isinstance(entry, CompoundShare):
        return entry
    return CompoundShare.model_validate(entry)


def _replace_compounds(
    table: str,
    planet_id: int,
    compounds: Iterable[Any],
    conn: TransactionConnection,
    resolver: CompoundResolver
) -> None:
    shares = [_share(entry) for entry in compounds]

    # Every CID is resolved before the DELETE takes row locks
    for share in shares:
        resolver.ensure(share.CID, conn)

    conn.execute(f"DELETE FROM {table} WHERE planet_id = ?", [planet_id])

    for share in shares:
        conn.execute(
            f"INSERT INTO {table} (planet_id, CID, percentage) VALUES (?, ?, ?)",
            [planet_id, share.CID, share.percentage]
        )

    logger.debug(f"Replaced {table} for planet {planet_id}: {len(shares)} compound(s)")


# =============================================================================
# PLANET COMPOUNDS
# =============================================================================

def update_planet_compounds(
    planet_id: int,
    compounds: Any,
    conn: TransactionConnection,
    resolver: CompoundResolver
) -> None:
    """
    Replace the planet's compound associations.

    ``UNSET`` (or None) leaves them untouched; a list, even an empty one,
    replaces every existing row. Every CID is resolved on ``conn`` before
    the existing rows are deleted.
    """
    if compounds is UNSET or compounds is None:
        return

    _replace_compounds("planets_compounds", planet_id, compounds, conn, resolver)


# =============================================================================
# ATMOSPHERE
# =============================================================================

def atmosphere_exists(planet_id: int, conn: TransactionConnection) -> bool:
    result = conn.execute(
        "SELECT COUNT(*) AS count FROM atmospheres WHERE planet_id = ?",
        [planet_id]
    )
    row = result.first()
    return bool(row and row["count"] > 0)


def delete_atmosphere(planet_id: int, conn: TransactionConnection) -> None:
    conn.execute("DELETE FROM atmospheres_compounds WHERE planet_id = ?", [planet_id])
    conn.execute("DELETE FROM atmospheres WHERE planet_id = ?", [planet_id])
    logger.debug(f"Deleted atmosphere of planet {planet_id}")


def update_planet_atmosphere(
    planet_id: int,
    atmosphere: Any,
    conn: TransactionConnection,
    resolver: CompoundResolver
) -> None:
    """
    Create, update or delete the planet's atmosphere.

    Args:
        planet_id: Planet that owns the atmosphere
        atmosphere: ``UNSET``, ``None``, or a mapping / pydantic model with
            any of pressure_atm, greenhouse_factor, texture_url, compounds
        conn: Open transaction handle
        resolver: Compound resolver used for atmosphere compounds

    Raises:
        UniverseError: the planet has no atmosphere and the payload is
            missing one of the required fields (nothing is written)
    """
    if atmosphere is UNSET:
        return

    if atmosphere is None:
        delete_atmosphere(planet_id, conn)
        return

    data = _as_dict(atmosphere)
    fields: Dict[str, Any] = {
        name: data[name] for name in ATMOSPHERE_FIELDS if data.get(name) is not None
    }

    exists = atmosphere_exists(planet_id, conn)

    if not exists:
        missing: List[str] = [name for name in ATMOSPHERE_FIELDS if name not in fields]
        if missing:
            raise atmosphere_incomplete(missing)

        conn.execute(
            "INSERT INTO atmospheres (planet_id, pressure_atm, greenhouse_factor, texture_url) "
            "VALUES (?, ?, ?, ?)",
            [planet_id, fields["pressure_atm"], fields["greenhouse_factor"], fields["texture_url"]]
        )
        logger.debug(f"Created atmosphere for planet {planet_id}")

    elif fields:
        set_clause = build_set_clause(fields)
        conn.execute(
            f"UPDATE atmospheres SET {set_clause.sql} WHERE planet_id = ?",
            [*set_clause.values, planet_id]
        )
        logger.debug(f"Updated atmosphere of planet {planet_id}: {sorted(fields)}")

    compounds = data.get("compounds")
    if isinstance(compounds, list):
        _replace_compounds("atmospheres_compounds", planet_id, compounds, conn, resolver)


def sync_planet_children(
    planet_id: int,
    payload: Mapping[str, Any],
    conn: TransactionConnection,
    resolver: CompoundResolver
) -> None:
    """Apply the ``compounds`` and ``atmosphere`` entries of a sent-fields mapping."""
    update_planet_compounds(planet_id, payload.get("compounds", UNSET), conn, resolver)
    update_planet_atmosphere(planet_id, payload.get("atmosphere", UNSET), conn, resolver)
