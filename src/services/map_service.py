"""Map marker data for the spot map widget."""

from typing import Any

from src.core.config import get_settings
from src.schemas.spot import (
    MapViewport,
    PointGeometry,
    SpotFeature,
    SpotFeatureCollection,
    SpotMarkerProperties,
)

DEFAULT_MARKER_COLOR = "#6b7280"

SPORT_COLORS: dict[str, str] = {
    "skateboarding": "#ef4444",  # red
    "surfing": "#3b82f6",  # blue
    "mountain_biking": "#22c55e",  # green
    "snowboarding": "#8b5cf6",  # purple
    "bmx": "#f59e0b",  # amber
    "rock_climbing": "#6b7280",  # gray
}


def sport_color(sport_type: str) -> str:
    """Marker colour for a spot category.

    Args:
        sport_type: Spot category value.

    Returns:
        str: Hex colour; gray for unknown categories.
    """
    return SPORT_COLORS.get(sport_type, DEFAULT_MARKER_COLOR)


def format_sport_type(sport_type: str) -> str:
    """Human label for a category value.

    Args:
        sport_type: Snake-case category, e.g. "mountain_biking".

    Returns:
        str: Title-cased label, e.g. "Mountain Biking".
    """
    return " ".join(word.capitalize() for word in sport_type.split("_"))


def default_viewport() -> MapViewport:
    """Camera used when there is nothing to frame (or no geolocation)."""
    settings = get_settings()
    return MapViewport(
        center=(settings.default_map_longitude, settings.default_map_latitude),
        zoom=settings.default_map_zoom,
    )


def viewport_for(spots: list[dict[str, Any]]) -> MapViewport:
    """Fit the camera to every spot, or fall back to the default centre.

    Args:
        spots: Spot rows with latitude and longitude.

    Returns:
        MapViewport: Centre and bounds of all spots, or the default camera
            when there are none.
    """
    if not spots:
        return default_viewport()

    longitudes = [float(s["longitude"]) for s in spots]
    latitudes = [float(s["latitude"]) for s in spots]
    west, east = min(longitudes), max(longitudes)
    south, north = min(latitudes), max(latitudes)

    return MapViewport(
        center=((west + east) / 2, (south + north) / 2),
        bounds=((west, south), (east, north)),
    )


def to_feature(spot: dict[str, Any]) -> SpotFeature:
    """Build the GeoJSON marker for one spot row.

    Args:
        spot: Spot row as stored.

    Returns:
        SpotFeature: Point geometry (lng, lat) with popup properties.
    """
    sport_type = spot.get("sport_type") or ""
    difficulty = spot.get("difficulty") or "beginner"
    return SpotFeature(
        geometry=PointGeometry(coordinates=(float(spot["longitude"]), float(spot["latitude"]))),
        properties=SpotMarkerProperties(
            id=spot["id"],
            name=spot["name"],
            description=spot.get("description"),
            sport_type=sport_type,
            sport_label=format_sport_type(sport_type),
            difficulty=difficulty,
            difficulty_label=difficulty.capitalize(),
            color=sport_color(sport_type),
            rating=spot.get("rating") or 0,
        ),
    )


def build_feature_collection(spots: list[dict[str, Any]]) -> SpotFeatureCollection:
    """Turn spot rows into GeoJSON markers plus a framing viewport.

    Args:
        spots: Spot rows as stored.

    Returns:
        SpotFeatureCollection: One feature per spot and the viewport.
    """
    return SpotFeatureCollection(
        features=[to_feature(spot) for spot in spots],
        viewport=viewport_for(spots),
    )
