"""
Point-string codec for legacy location exports.

Older exports encode coordinates as WKT text, e.g. "POINT(-118.1445 34.1477)",
longitude first. Storage keeps a structured longitude/latitude pair; these
two functions are the only place the text form is read or written.
"""

import logging
import math
import re
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

_POINT_RE = re.compile(
    r'^\s*POINT\s*\(\s*([-+]?\d+(?:\.\d+)?)\s+([-+]?\d+(?:\.\d+)?)\s*\)\s*$',
    re.IGNORECASE,
)


def parse_wkt_point(text: Optional[str]) -> Optional[Tuple[float, float]]:
    """
    Parse a WKT point into ``(longitude, latitude)``.

    Args:
        text: WKT string such as "POINT(-118.144516 34.147785)"

    Returns:
        Tuple of (longitude, latitude), or None when the value is empty,
        not a point, or out of range
    """
    if not text or not isinstance(text, str):
        return None

    match = _POINT_RE.match(text)
    if not match:
        logger.warning(f"Could not parse WKT point: {text!r}")
        return None

    longitude, latitude = float(match.group(1)), float(match.group(2))
    if not validate_coordinates(longitude, latitude):
        logger.warning(f"WKT point out of range: {text!r}")
        return None
    return longitude, latitude


def format_wkt_point(longitude: float, latitude: float) -> str:
    """Format a coordinate pair as WKT, longitude first."""
    return f"POINT({float(longitude)} {float(latitude)})"


def validate_coordinates(longitude: float, latitude: float) -> bool:
    """Check that a pair is numeric, finite and inside WGS84 bounds."""
    try:
        longitude, latitude = float(longitude), float(latitude)
    except (TypeError, ValueError):
        return False
    if not (math.isfinite(longitude) and math.isfinite(latitude)):
        return False
    return -180 <= longitude <= 180 and -90 <= latitude <= 90
