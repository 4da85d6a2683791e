"""
Structured Error Handling

Clear, actionable errors for the catalog data layer and the HTTP layer
that sits on top of it.

ERROR DESIGN PRINCIPLES:
------------------------
1. Every error has a unique code for log searching
2. Messages are human-readable and actionable
3. Client mistakes (bad filter values, partial atmospheres) are 4xx
4. Database failures propagate as adapter errors; uniqueness violations
   are translated into a 400 naming the offending field

ERROR RESPONSE FORMAT:
----------------------
{
    "error": {
        "code": "ERR_2001",
        "message": "Invalid value for filter 'mass_earth'. Must be a number.",
        "details": {"field": "mass_earth"},
        "suggestion": "Check the filter value type",
        "request_id": "abc-123"
    }
}
"""

import logging
import re
import sqlite3
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from universe.infrastructure.adapters.base import AdapterError

logger = logging.getLogger(__name__)


# =============================================================================
# ERROR CODES
# =============================================================================

class ErrorCode(str, Enum):
    """Unique error codes for every error type."""

    # Request values (1xxx)
    ERR_INVALID_ID = "ERR_1001"
    ERR_INVALID_FILTER = "ERR_1002"

    # Resource payloads (2xxx)
    ERR_ATMOSPHERE_INCOMPLETE = "ERR_2001"
    ERR_DUPLICATE_VALUE = "ERR_2002"

    # Lookups (3xxx)
    ERR_RESOURCE_NOT_FOUND = "ERR_3001"
    ERR_COMPOUND_NOT_FOUND = "ERR_3002"

    # Configuration (4xxx)
    ERR_DATABASE_URL_MISSING = "ERR_4001"

    # Internal (9xxx)
    ERR_INTERNAL = "ERR_9001"


# =============================================================================
# ERROR RESPONSE
# =============================================================================

@dataclass
class UniverseError(Exception):
    """
    Structured error with all context needed for debugging.

    Attributes:
        code: Unique error code for searching logs
        message: Human-readable error message
        status_code: HTTP status code
        details: Additional context (dict)
        suggestion: How to fix the issue
        request_id: Request tracing ID
    """
    code: ErrorCode
    message: str
    status_code: int = 400
    details: Dict[str, Any] = field(default_factory=dict)
    suggestion: Optional[str] = None
    request_id: Optional[str] = None

    def __post_init__(self):
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API response format."""
        error_dict = {
            "code": self.code.value,
            "message": self.message,
        }

        if self.details:
            error_dict["details"] = self.details

        if self.suggestion:
            error_dict["suggestion"] = self.suggestion

        if self.request_id:
            error_dict["request_id"] = self.request_id

        error_dict["timestamp"] = datetime.now(timezone.utc).isoformat()

        return {"error": error_dict}

    def to_response(self) -> JSONResponse:
        """Convert to FastAPI JSONResponse."""
        return JSONResponse(
            status_code=self.status_code,
            content=self.to_dict()
        )

    def log(self, level: str = "error"):
        """Log the error with context."""
        log_msg = f"[{self.code.value}] {self.message}"
        if self.details:
            log_msg += f" | details={self.details}"
        if self.request_id:
            log_msg += f" | request_id={self.request_id}"

        getattr(logger, level)(log_msg)


# =============================================================================
# ERROR FACTORY FUNCTIONS
# =============================================================================

def invalid_id(value: Any, request_id: Optional[str] = None) -> UniverseError:
    """Create invalid identifier error."""
    return UniverseError(
        code=ErrorCode.ERR_INVALID_ID,
        message="The provided ID is not valid.",
        status_code=400,
        details={"value": str(value)},
        suggestion="Identifiers are positive integers",
        request_id=request_id
    )


def filter_invalid(
    field_name: str,
    expected: Optional[str] = None,
    request_id: Optional[str] = None
) -> UniverseError:
    """Create invalid filter value error."""
    message = f"Invalid value for filter '{field_name}'."
    if expected:
        message = f"Invalid value for filter '{field_name}'. Must be a {expected}."

    details: Dict[str, Any] = {"field": field_name}
    if expected:
        details["expected"] = expected

    return UniverseError(
        code=ErrorCode.ERR_INVALID_FILTER,
        message=message,
        status_code=400,
        details=details,
        suggestion="Check the filter value type",
        request_id=request_id
    )


def atmosphere_incomplete(
    missing: List[str],
    request_id: Optional[str] = None
) -> UniverseError:
    """Create partial atmosphere creation error."""
    return UniverseError(
        code=ErrorCode.ERR_ATMOSPHERE_INCOMPLETE,
        message="Cannot create partial atmosphere; all fields are required",
        status_code=400,
        details={"missing": missing},
        suggestion="Send pressure_atm, greenhouse_factor and texture_url when the planet has no atmosphere yet",
        request_id=request_id
    )


def duplicate_value(field_name: str, request_id: Optional[str] = None) -> UniverseError:
    """Create uniqueness violation error."""
    return UniverseError(
        code=ErrorCode.ERR_DUPLICATE_VALUE,
        message=f"The value of field '{field_name}' is already in use.",
        status_code=400,
        details={"field": field_name},
        request_id=request_id
    )


def resource_not_found(
    resource: str,
    resource_id: Any,
    request_id: Optional[str] = None
) -> UniverseError:
    """Create resource not found error."""
    return UniverseError(
        code=ErrorCode.ERR_RESOURCE_NOT_FOUND,
        message=f"{resource} {resource_id} not found",
        status_code=404,
        details={"resource": resource, "id": resource_id},
        request_id=request_id
    )


def compound_not_found(
    cid: int,
    reason: Optional[str] = None,
    request_id: Optional[str] = None
) -> UniverseError:
    """Create compound not found error."""
    details: Dict[str, Any] = {"CID": cid}
    if reason:
        details["reason"] = reason

    return UniverseError(
        code=ErrorCode.ERR_COMPOUND_NOT_FOUND,
        message=f"Compound with CID {cid} not found in PubChem.",
        status_code=404,
        details=details,
        suggestion="Look the compound up on pubchem.ncbi.nlm.nih.gov and use its CID",
        request_id=request_id
    )


def database_url_missing(environment: str) -> UniverseError:
    """Create missing database URL error."""
    return UniverseError(
        code=ErrorCode.ERR_DATABASE_URL_MISSING,
        message="Database URL is not defined for current environment",
        status_code=500,
        details={"environment": environment},
        suggestion="Set DATABASE_URL (or TEST_DATABASE_URL when ENV=test)"
    )


def internal_error(
    message: str = "An unexpected error occurred",
    details: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None
) -> UniverseError:
    """Create internal error - use sparingly, prefer specific errors."""
    return UniverseError(
        code=ErrorCode.ERR_INTERNAL,
        message=message,
        status_code=500,
        details=details or {},
        request_id=request_id
    )


# =============================================================================
# DATABASE ERROR TRANSLATION
# =============================================================================

_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: (?:\w+\.)?(\w+)")
_MYSQL_DUPLICATE = re.compile(r"Duplicate entry '.*' for key '(?:[\w]+\.)?([\w]+)'")
_MYSQL_ER_DUP_ENTRY = 1062


def translate_database_error(exc: Exception) -> Optional[UniverseError]:
    """
    Map a uniqueness violation to a duplicate_value error.

    Accepts either a raw driver error or an AdapterError wrapping one.
    Returns None for every other failure.
    """
    original = exc.original_error if isinstance(exc, AdapterError) else exc
    if original is None:
        return None

    message = str(original)

    if isinstance(original, sqlite3.IntegrityError):
        match = _SQLITE_UNIQUE.search(message)
        if match:
            return duplicate_value(match.group(1))
        return None

    if getattr(original, "errno", None) == _MYSQL_ER_DUP_ENTRY:
        match = _MYSQL_DUPLICATE.search(message)
        return duplicate_value(match.group(1) if match else "unknown")

    return None


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())[:8]


async def universe_error_handler(request: Request, exc: UniverseError) -> JSONResponse:
    """Handle UniverseError and return structured response."""
    if not exc.request_id:
        exc.request_id = _request_id(request)

    exc.log(level="warning" if exc.status_code < 500 else "error")

    return exc.to_response()


async def adapter_error_handler(request: Request, exc: AdapterError) -> JSONResponse:
    """Handle database failures, translating uniqueness violations."""
    request_id = _request_id(request)

    translated = translate_database_error(exc)
    if translated is not None:
        translated.request_id = request_id
        translated.log(level="warning")
        return translated.to_response()

    logger.error(f"[{exc.engine}] {exc} | request_id={request_id}")

    error = internal_error(
        message="Internal server error",
        details={"engine": exc.engine},
        request_id=request_id
    )
    return error.to_response()


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTPException and convert to structured format."""
    request_id = _request_id(request)

    error_response = {
        "error": {
            "code": f"ERR_HTTP_{exc.status_code}",
            "message": str(exc.detail),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "request_id": request_id
        }
    }

    logger.error(f"[ERR_HTTP_{exc.status_code}] {exc.detail} | request_id={request_id}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    request_id = _request_id(request)

    logger.exception(f"Unhandled exception | request_id={request_id}")

    error = internal_error(
        message="Internal server error",
        details={"exception_type": type(exc).__name__},
        request_id=request_id
    )

    return error.to_response()


# =============================================================================
# HELPER TO INSTALL HANDLERS
# =============================================================================

def install_error_handlers(app):
    """Install error handlers on FastAPI app."""
    app.add_exception_handler(UniverseError, universe_error_handler)
    app.add_exception_handler(AdapterError, adapter_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Structured error handlers installed")
