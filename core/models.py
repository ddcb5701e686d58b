from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Any, Literal, Union
import datetime

from core.utils import normalize_hex6, parse_coordinate, coerce_radius

# --- Utility Functions ---

def _required_text(value: Any, label: str) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        raise ValueError(f"{label} is required.")
    return text

def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None

# --- Core Data Models (rows owned by Supabase) ---

class Category(BaseModel):
    """Top-level grouping users browse before tours."""
    id: str
    name: str
    created_at: Optional[datetime.datetime] = None

    class Config:
        from_attributes = True

class TourSummary(BaseModel):
    """Row shape used by the tour list."""
    id: str
    title: Optional[str] = None
    city: Optional[str] = None
    is_published: Optional[bool] = None
    created_at: Optional[datetime.datetime] = None

class Tour(BaseModel):
    """A tour row including its media pointers and button colors."""
    id: str
    title: Optional[str] = None
    city: Optional[str] = None
    is_published: Optional[bool] = None
    category_id: Optional[str] = None
    intro_audio_url: Optional[str] = Field(None, description="Public URL of the intro audio object")
    cover_image_url: Optional[str] = None
    highlights_image_url: Optional[str] = None
    map_image_url: Optional[str] = None
    start_image_url: Optional[str] = None
    start_touring_color_hex: Optional[str] = None
    highlights_button_color_hex: Optional[str] = None
    map_button_color_hex: Optional[str] = None
    where_starts_button_color_hex: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    class Config:
        from_attributes = True

class Stop(BaseModel):
    """A waypoint of a tour. lat/lng may hold legacy text values."""
    id: str
    tour_id: str
    title: Optional[str] = None
    lat: Optional[Union[float, str]] = None
    lng: Optional[Union[float, str]] = None
    radius_m: Optional[float] = None
    pass_by: Optional[bool] = False
    audio_url: Optional[str] = None
    image_url: Optional[str] = None
    sort_order: Optional[int] = 0

    @field_validator("pass_by", mode="before")
    @classmethod
    def null_pass_by(cls, v):
        return False if v is None else v

    @field_validator("sort_order", mode="before")
    @classmethod
    def null_sort_order(cls, v):
        return 0 if v is None else v

    class Config:
        from_attributes = True

class TourDetail(Tour):
    """A tour together with its category name and ordered stops."""
    category_name: Optional[str] = None
    stops: List[Stop] = Field(default_factory=list)

# --- Admin API Request Models ---

class CategoryCreate(BaseModel):
    name: str

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return _required_text(v, "Category name")

class TourCreate(BaseModel):
    title: str
    city: Optional[str] = None
    is_published: bool = True

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return _required_text(v, "Title")

    @field_validator("city", mode="before")
    @classmethod
    def strip_city(cls, v):
        return _optional_text(v)

class TourUpdate(BaseModel):
    """Editable tour fields. Color hex values are normalised; empty or invalid become null."""
    title: str
    city: Optional[str] = None
    is_published: bool
    category_id: Optional[str] = None
    start_touring_color_hex: Optional[str] = None
    highlights_button_color_hex: Optional[str] = None
    map_button_color_hex: Optional[str] = None
    where_starts_button_color_hex: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return _required_text(v, "Tour title")

    @field_validator("city", "category_id", mode="before")
    @classmethod
    def strip_optional(cls, v):
        return _optional_text(v)

    @field_validator(
        "start_touring_color_hex", "highlights_button_color_hex",
        "map_button_color_hex", "where_starts_button_color_hex",
        mode="before",
    )
    @classmethod
    def normalize_color(cls, v):
        return normalize_hex6(v) if isinstance(v, str) else None

class StopFields(BaseModel):
    """Fields shared by stop creation and stop editing."""
    title: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    radius_m: float = Field(default=None, validate_default=True)
    pass_by: bool = False

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return _required_text(v, "Stop title")

    @field_validator("lat", mode="before")
    @classmethod
    def check_lat(cls, v):
        return parse_coordinate(v, 90.0, "Latitude")

    @field_validator("lng", mode="before")
    @classmethod
    def check_lng(cls, v):
        return parse_coordinate(v, 180.0, "Longitude")

    @field_validator("radius_m", mode="before")
    @classmethod
    def default_radius(cls, v):
        return coerce_radius(v)

class StopCreate(StopFields):
    # Pre-uploaded (staged) media for a stop that does not exist yet
    audio_url: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("audio_url", "image_url", mode="before")
    @classmethod
    def strip_urls(cls, v):
        return _optional_text(v)

class StopUpdate(StopFields):
    pass

class StopMoveRequest(BaseModel):
    direction: Literal["up", "down"]

class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v):
        # Invisible whitespace from copy/paste breaks sign-in
        return _required_text(v, "Email")

# --- Admin API Response Models ---

class AdminSession(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    user_id: Optional[str] = None
    email: Optional[str] = None

class MediaUploadResult(BaseModel):
    slot: str
    url: str = Field(description="Public URL now stored in the slot's column")
    bucket: str
    path: str

class AdminResponse(BaseModel):
    """Standard response wrapper for the admin API."""
    status: str = Field(description="'success' or 'error'")
    data: Any | None = Field(default=None, description="The primary data payload (depends on the endpoint)")
    message: Optional[str] = Field(default=None, description="Optional status message or error details")
