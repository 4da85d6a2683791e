from typing import Annotated, Any, Dict, List, Optional

from pydantic import AfterValidator, BaseModel, Field, field_validator


class _Unset:
    """Marker for a payload field that was not sent at all."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def _check_total(shares: List["CompoundShare"]) -> List["CompoundShare"]:
    if sum(share.percentage for share in shares) > 100:
        raise ValueError("Total percentage of compounds must not exceed 100")
    return shares


def _reject_null(value: Any) -> Any:
    if value is None:
        raise ValueError("may not be null")
    return value


# =============================================================================
# COMPOUNDS
# =============================================================================

class CompoundShare(BaseModel):
    """One compound of a planet or atmosphere, by PubChem CID."""
    CID: int = Field(gt=0)
    percentage: float = Field(ge=0, le=100)


# Shares of one planet or atmosphere; they may not add up to more than 100%.
CompoundList = Annotated[List[CompoundShare], AfterValidator(_check_total)]


class Compound(BaseModel):
    CID: int
    name: str
    formula: str


# =============================================================================
# ATMOSPHERES
# =============================================================================

class AtmosphereInput(BaseModel):
    pressure_atm: float = Field(ge=0)
    greenhouse_factor: float = Field(ge=0)
    texture_url: str = Field(max_length=200)
    compounds: CompoundList = Field(default_factory=list)


class AtmospherePatch(BaseModel):
    """Partial atmosphere; only the fields that were sent are applied."""
    pressure_atm: Optional[float] = Field(default=None, ge=0)
    greenhouse_factor: Optional[float] = Field(default=None, ge=0)
    texture_url: Optional[str] = Field(default=None, max_length=200)
    compounds: Optional[CompoundList] = None


# =============================================================================
# PLANETS
# =============================================================================

class PlanetInput(BaseModel):
    """Full planet payload for create and PUT."""
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    mass_earth: float
    radius_earth: float
    inclination_deg: float = Field(le=180)
    rotation_speed_kms: float
    albedo: float = Field(ge=0, le=1)
    star_distance_au: float
    has_rings: bool
    moon_count: int = Field(ge=0)
    surface_texture_url: Optional[str] = None
    height_texture_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    planetary_system_id: int = Field(gt=0)
    planet_type_id: int = Field(gt=0)
    compounds: CompoundList = Field(default_factory=list)
    atmosphere: Optional[AtmosphereInput] = None


class PlanetPatch(BaseModel):
    """
    Partial planet payload.

    Fields that were not sent stay out of ``model_dump(exclude_unset=True)``;
    an explicit ``atmosphere: null`` is kept and means "delete it".
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    mass_earth: Optional[float] = None
    radius_earth: Optional[float] = None
    inclination_deg: Optional[float] = Field(default=None, le=180)
    rotation_speed_kms: Optional[float] = None
    albedo: Optional[float] = Field(default=None, ge=0, le=1)
    star_distance_au: Optional[float] = None
    has_rings: Optional[bool] = None
    moon_count: Optional[int] = Field(default=None, ge=0)
    surface_texture_url: Optional[str] = None
    height_texture_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    planetary_system_id: Optional[int] = Field(default=None, gt=0)
    planet_type_id: Optional[int] = Field(default=None, gt=0)
    compounds: Optional[CompoundList] = None
    atmosphere: Optional[AtmospherePatch] = None

    @field_validator(
        "name", "mass_earth", "radius_earth", "inclination_deg", "rotation_speed_kms",
        "albedo", "star_distance_au", "has_rings", "moon_count",
        "planetary_system_id", "planet_type_id",
    )
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        return _reject_null(value)


# =============================================================================
# STARS & SYSTEMS
# =============================================================================

class StarInput(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    mass_solar: float = Field(gt=0)
    radius_solar: float = Field(gt=0)
    thumbnail_url: Optional[str] = None


class StarPatch(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    mass_solar: Optional[float] = Field(default=None, gt=0)
    radius_solar: Optional[float] = Field(default=None, gt=0)
    thumbnail_url: Optional[str] = None

    @field_validator("name", "mass_solar", "radius_solar")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        return _reject_null(value)


class PlanetarySystemInput(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    distance_ly: float = Field(gt=0)
    thumbnail_url: Optional[str] = None


class PlanetarySystemPatch(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    distance_ly: Optional[float] = Field(default=None, gt=0)
    thumbnail_url: Optional[str] = None

    @field_validator("name", "distance_ly")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        return _reject_null(value)


# =============================================================================
# USERS
# =============================================================================

class UserCreate(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: str = Field(max_length=100)
    profile_picture_url: Optional[str] = None


class UserUpdate(BaseModel):
    """Full user replacement; ``password`` is an already-hashed value."""
    username: str = Field(min_length=3, max_length=50)
    email: str = Field(max_length=100)
    password: str
    profile_picture_url: Optional[str] = None


class UserPatch(BaseModel):
    username: Optional[str] = Field(default=None, min_length=3, max_length=50)
    email: Optional[str] = Field(default=None, max_length=100)
    password: Optional[str] = None
    profile_picture_url: Optional[str] = None

    @field_validator("username", "email", "password")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        return _reject_null(value)


def sent_fields(payload: BaseModel) -> Dict[str, Any]:
    """Fields the client actually sent, nested models dumped to dicts."""
    return payload.model_dump(exclude_unset=True)
