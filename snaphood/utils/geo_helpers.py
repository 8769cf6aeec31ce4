"""
Geographic helper utilities for coordinate bucketing.
"""
from ..config import CLUSTER_PRECISION


def cluster_key(lat: float, lng: float, precision: int = CLUSTER_PRECISION) -> str:
    """
    Build the cluster key for a coordinate.

    Both coordinates are rounded to a fixed number of decimals and joined,
    e.g. (37.77491, -122.41941) -> "37.775,-122.419".

    Args:
        lat: Latitude
        lng: Longitude
        precision: Decimal places kept

    Returns:
        str: The cluster key
    """
    return f"{lat:.{precision}f},{lng:.{precision}f}"


def key_to_position(key: str) -> tuple[float, float]:
    """Parse a cluster key back into its rounded (lat, lng)."""
    lat, lng = key.split(",")
    return float(lat), float(lng)


def format_position(lat: float, lng: float, precision: int = 5) -> str:
    return f"({lat:.{precision}f}, {lng:.{precision}f})"
