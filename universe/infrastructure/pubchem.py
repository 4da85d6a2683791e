"""
PubChem Compound Directory Client

Looks compounds up by CID through the PUG-View REST API and extracts the
two fields the catalog stores:

- name: ``Record.RecordTitle``
- formula: "Names and Identifiers" > "Molecular Formula"

Usage:
    client = PubChemClient()
    client.fetch_compound(962)
    # {"CID": 962, "name": "Water", "formula": "H2O"}
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from universe.errors import compound_not_found

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://pubchem.ncbi.nlm.nih.gov/rest/pug_view/data/compound"

NAME_MAX_LENGTH = 100
FORMULA_MAX_LENGTH = 50


def _find_section(sections: Optional[List[Dict[str, Any]]], heading: str) -> Optional[Dict[str, Any]]:
    for section in sections or []:
        if section.get("TOCHeading") == heading:
            return section
    return None


def extract_formula(record: Dict[str, Any]) -> str:
    """Molecular formula from a PUG-View record, ``"Unknown"`` when absent."""
    identifiers = _find_section(record.get("Section"), "Names and Identifiers")
    formula_section = _find_section((identifiers or {}).get("Section"), "Molecular Formula")

    try:
        info = formula_section["Information"][0]
        return info["Value"]["StringWithMarkup"][0]["String"]
    except (TypeError, KeyError, IndexError):
        return "Unknown"


def parse_compound_record(cid: int, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Turn a PUG-View response body into a compound row."""
    record = payload.get("Record") if isinstance(payload, dict) else None
    if not record:
        raise compound_not_found(cid, reason="PubChem returned no record")

    name = record.get("RecordTitle") or f"CID-{cid}"
    formula = extract_formula(record)

    return {
        "CID": cid,
        "name": name[:NAME_MAX_LENGTH],
        "formula": formula[:FORMULA_MAX_LENGTH],
    }


class PubChemClient:
    """PubChem PUG-View client."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(timeout=timeout, transport=transport)

    def fetch_compound(self, cid: int) -> Dict[str, Any]:
        """
        Fetch one compound by CID.

        Raises:
            UniverseError: PubChem answered with a non-2xx status or an
                empty record
            httpx.RequestError: PubChem could not be reached
        """
        url = f"{self.base_url}/{cid}/JSON"
        response = self.client.get(url)

        if response.is_error:
            logger.warning(f"PubChem lookup for CID {cid} failed with HTTP {response.status_code}")
            raise compound_not_found(cid, reason=f"HTTP {response.status_code}")

        compound = parse_compound_record(cid, response.json())
        logger.info(f"Fetched compound {cid} from PubChem: {compound['name']}")
        return compound

    def close(self) -> None:
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
