"""
Reverse-geocode cache keyed by snap id.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional

from ..config import SEARCHING_ADDRESS_LABEL, UNAVAILABLE_ADDRESS_LABEL
from ..models.snap import SnapView, coerce_coordinate
from .observable import Observable

logger = logging.getLogger(__name__)


class AddressStore(Observable):
    """
    Maps snap ids to display addresses.

    A snap id missing from the mapping has not been resolved yet ("searching");
    a snap id mapped to None was looked up and has no address ("unavailable").
    """

    def __init__(self, geocoding_service, max_workers: int = 8):
        super().__init__()
        self.geocoding_service = geocoding_service
        self.max_workers = max_workers
        self._addresses: dict[str, Optional[str]] = {}

    @property
    def addresses(self) -> dict[str, Optional[str]]:
        return self._addresses

    def has_key(self, snap_id: str) -> bool:
        return snap_id in self._addresses

    def value(self, snap_id: str) -> Optional[str]:
        return self._addresses.get(snap_id)

    def label(self, snap_id: str) -> str:
        if snap_id not in self._addresses:
            return SEARCHING_ADDRESS_LABEL
        return self._addresses[snap_id] or UNAVAILABLE_ADDRESS_LABEL

    def resolve(self, snap_id: str, lat, lng) -> Optional[str]:
        """
        Look up the address for one snap.

        Args:
            snap_id: Snap the lookup belongs to
            lat: Latitude, number or numeric string
            lng: Longitude, number or numeric string

        Returns:
            str: Display address, or None for invalid coordinates or a failed lookup
        """
        lat_value = coerce_coordinate(lat)
        lng_value = coerce_coordinate(lng)
        if lat_value is None or lng_value is None:
            return None

        try:
            return self.geocoding_service.reverse_geocode(lat_value, lng_value)
        except Exception as e:
            logger.error(f"Address lookup failed for snap {snap_id}: {e}")
            return None

    def resolve_all(self, snaps: Iterable[SnapView]):
        """
        Resolve one address per snap and replace the whole mapping.

        Lookups run concurrently and are not deduplicated by coordinate.
        """
        snaps = list(snaps)
        if not snaps:
            self._addresses = {}
            self.notify(self._addresses)
            return

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(snaps))) as pool:
            futures = {
                view.id: pool.submit(self.resolve, view.id, view.snap.lat, view.snap.lng)
                for view in snaps
            }
            addresses = {snap_id: future.result() for snap_id, future in futures.items()}

        self._addresses = addresses
        self.notify(self._addresses)
