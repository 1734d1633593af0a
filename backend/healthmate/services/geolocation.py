import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

import httpx

from healthmate.core.config import settings
from healthmate.core.errors import (
    GeolocationTimeout,
    NetworkError,
    NotFound,
    PermissionDenied,
    Unsupported,
    ValidationError,
)
from healthmate.services.distance import Coordinate
from healthmate.utils.time_utils import as_utc, utc_now

logger = logging.getLogger("healthmate.geolocation")


MAX_FIX_AGE = timedelta(minutes=10)
FIX_TIMEOUT = timedelta(seconds=10)

# Handed to navigator.geolocation.getCurrentPosition() by the front end.
POSITION_OPTIONS = {
    "enableHighAccuracy": True,
    "timeout": int(FIX_TIMEOUT.total_seconds() * 1000),
    "maximumAge": int(MAX_FIX_AGE.total_seconds() * 1000),
}

# GeolocationPositionError.code values
ERROR_PERMISSION_DENIED = 1
ERROR_POSITION_UNAVAILABLE = 2
ERROR_TIMEOUT = 3


@dataclass
class PositionReport:
    """
    What the browser tells us after asking the platform location API:
    either a fix or the error code it got back.
    """

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    accuracy_m: Optional[float] = None
    captured_at: Optional[datetime] = None
    error_code: Optional[int] = None


def _safe_float(value: Any) -> float | None:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


def validate_coordinate(latitude: float, longitude: float) -> Coordinate:
    if not (-90.0 <= latitude <= 90.0) or not (-180.0 <= longitude <= 180.0):
        raise ValidationError(
            f"Coordinate out of range: ({latitude}, {longitude})",
            user_message="That location doesn't look valid.",
        )
    return Coordinate(latitude=latitude, longitude=longitude)


def resolve_current_position(
    report: Optional[PositionReport],
    *,
    now: Optional[datetime] = None,
) -> Coordinate:
    if report is None:
        raise Unsupported("No position report: geolocation not available in this browser")

    if report.error_code is not None:
        if report.error_code == ERROR_PERMISSION_DENIED:
            raise PermissionDenied("Browser reported PERMISSION_DENIED")
        if report.error_code == ERROR_TIMEOUT:
            raise GeolocationTimeout("Browser reported TIMEOUT")
        raise Unsupported(f"Browser reported position error code {report.error_code}")

    if report.latitude is None or report.longitude is None:
        raise Unsupported("Position report carries neither a fix nor an error code")

    if report.captured_at is not None:
        age = (now or utc_now()) - as_utc(report.captured_at)
        if age > MAX_FIX_AGE:
            raise GeolocationTimeout(f"Position fix is stale ({int(age.total_seconds())}s old)")

    return validate_coordinate(report.latitude, report.longitude)


async def resolve_by_name(
    place_name: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> Coordinate:
    query = (place_name or "").strip()
    if not query:
        raise ValidationError("Empty place name", user_message="Please enter a city or area.")

    params = {"q": query, "format": "jsonv2", "limit": 1}
    headers = {"User-Agent": settings.GEOCODER_USER_AGENT}

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.GEOCODER_TIMEOUT_SECONDS)

    try:
        response = await client.get(settings.GEOCODER_URL, params=params, headers=headers)
        response.raise_for_status()
        rows = response.json() if response.content else []
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Geocoding failed for %r: %s", query, e)
        raise NetworkError(f"Geocoding request failed: {type(e).__name__}") from e
    finally:
        if owns_client:
            await client.aclose()

    if not isinstance(rows, list) or not rows or not isinstance(rows[0], dict):
        raise NotFound(f"No geocoding result for {query!r}")

    lat = _safe_float(rows[0].get("lat"))
    lon = _safe_float(rows[0].get("lon"))
    if lat is None or lon is None:
        raise NotFound(f"Geocoding result for {query!r} has no coordinates")

    return validate_coordinate(lat, lon)
