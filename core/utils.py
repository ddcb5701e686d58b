# core/utils.py
"""
Core Utility Functions.

Small value helpers shared by the admin API models, CRUD layer and UI:
color hex normalisation, coordinate/radius coercion, and timestamps.
"""
import datetime
import math
import re
from typing import Optional, Union

from core.config import settings

HEX6_PATTERN = re.compile(r"^#?[0-9a-fA-F]{6}$")

def is_hex6(value: str) -> bool:
    return bool(HEX6_PATTERN.match(value.strip()))

def normalize_hex6(value: Optional[str]) -> Optional[str]:
    """Returns '#RRGGBB' upper-cased, or None for empty/invalid input."""
    if value is None:
        return None
    text = value.strip()
    if not text or not is_hex6(text):
        return None
    text = text.upper()
    return text if text.startswith("#") else f"#{text}"

def safe_color_for_picker(value: Optional[str], fallback: str = "#111111") -> str:
    """A color picker must always receive a valid #RRGGBB."""
    return normalize_hex6(value) or fallback


Coordinate = Union[str, int, float, None]

def parse_coordinate(value: Coordinate, limit: float, label: str = "coordinate") -> Optional[float]:
    """
    Coerces a pasted latitude/longitude into a float.

    Accepts numbers or numeric text (surrounding whitespace ignored). Empty
    text and None become None. Raises ValueError for non-numeric text,
    non-finite values, or values outside [-limit, limit].
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"{label} must be a number, got a boolean")
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            raise ValueError(f"{label} '{text}' is not a number")
    else:
        number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{label} must be finite")
    if abs(number) > limit:
        raise ValueError(f"{label} {number} is outside [-{limit:g}, {limit:g}]")
    return number

def coerce_radius(value) -> float:
    """Radius in meters; falls back to the configured default when missing or non-finite."""
    try:
        radius = float(value)
    except (TypeError, ValueError):
        return settings.DEFAULT_STOP_RADIUS_M
    if not math.isfinite(radius):
        return settings.DEFAULT_STOP_RADIUS_M
    return radius

def utc_now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()
