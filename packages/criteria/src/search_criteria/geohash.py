"""
Geohash decoding.

Geohashes are decoded client-side so that bounding boxes are always sent
as ``"lat,lon"`` corners.
"""

from __future__ import annotations

_BASE32 = "0123456789bcdefghjkmnpqrstuvwxyz"
_DECODE_MAP = {char: index for index, char in enumerate(_BASE32)}

# Longest hash a double can resolve meaningfully.
MAX_PRECISION = 12


def is_geohash(text: str) -> bool:
    """True if *text* looks like a geohash (and not a ``"lat,lon"`` pair)."""
    candidate = text.strip().lower()
    return (
        0 < len(candidate) <= MAX_PRECISION
        and all(char in _DECODE_MAP for char in candidate)
    )


def bounds(geohash: str) -> tuple[float, float, float, float]:
    """
    Return the cell of *geohash* as ``(min_lat, min_lon, max_lat, max_lon)``.

    Raises:
        ValueError: on an empty hash or a character outside the geohash
            alphabet.
    """
    text = geohash.strip().lower()
    if not text:
        raise ValueError("geohash must not be empty")

    min_lat, max_lat = -90.0, 90.0
    min_lon, max_lon = -180.0, 180.0
    even = True

    for char in text:
        try:
            bits = _DECODE_MAP[char]
        except KeyError:
            raise ValueError(
                f"Invalid geohash character {char!r} in {geohash!r}"
            ) from None
        for shift in range(4, -1, -1):
            bit = (bits >> shift) & 1
            if even:
                mid = (min_lon + max_lon) / 2
                if bit:
                    min_lon = mid
                else:
                    max_lon = mid
            else:
                mid = (min_lat + max_lat) / 2
                if bit:
                    min_lat = mid
                else:
                    max_lat = mid
            even = not even

    return min_lat, min_lon, max_lat, max_lon


def decode(geohash: str) -> tuple[float, float]:
    """Decode *geohash* to the ``(lat, lon)`` centre of its cell."""
    min_lat, min_lon, max_lat, max_lon = bounds(geohash)
    return (min_lat + max_lat) / 2, (min_lon + max_lon) / 2


def to_lat_lon(geohash: str) -> str:
    """Decode *geohash* to ``"lat,lon"`` text (six decimals)."""
    lat, lon = decode(geohash)
    return f"{lat:f},{lon:f}"
