"""
Data models for snaps and their author profiles.
"""
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


def coerce_coordinate(value: Any) -> Optional[float]:
    """
    Coerce a stored coordinate to a float.

    Firestore rows written by older clients may carry coordinates as numeric
    strings, so "37.7749" and 37.7749 must agree.

    Args:
        value: Raw coordinate value from a row

    Returns:
        float: The coordinate, or None when missing or non-numeric
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None

    try:
        number = float(value)
    except (ValueError, TypeError):
        return None

    if math.isnan(number) or math.isinf(number):
        return None

    return number


@dataclass(frozen=True)
class ProfileRow:
    """A row of the profiles collection."""
    id: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None

    @classmethod
    def from_firestore_doc(cls, doc_id: str, data: dict) -> 'ProfileRow':
        """Create from Firestore document."""
        return cls(
            id=doc_id,
            name=data.get("name"),
            avatar_url=data.get("avatar_url")
        )


@dataclass(frozen=True)
class SnapRow:
    """A row of the snaps collection."""
    id: str
    user_id: str
    image_url: str
    description: str
    lat: Optional[float]
    lng: Optional[float]
    created_at: Optional[datetime] = None

    @classmethod
    def from_firestore_doc(cls, doc_id: str, data: dict) -> 'SnapRow':
        """Create from Firestore document, coercing coordinates."""
        return cls(
            id=doc_id,
            user_id=data.get("user_id", ""),
            image_url=data.get("image_url", ""),
            description=data.get("description", ""),
            lat=coerce_coordinate(data.get("lat")),
            lng=coerce_coordinate(data.get("lng")),
            created_at=data.get("created_at")
        )

    @property
    def has_valid_coordinates(self) -> bool:
        return self.lat is not None and self.lng is not None


@dataclass(frozen=True)
class SnapView:
    """A snap joined with its author profile."""
    snap: SnapRow
    author: Optional[ProfileRow] = None

    @property
    def id(self) -> str:
        return self.snap.id

    @property
    def author_name(self) -> Optional[str]:
        return self.author.name if self.author else None


@dataclass
class SnapSubmission:
    """A validated snap ready to be written."""
    user_id: str
    image_path: str
    description: str
    lat: float
    lng: float

    def to_firestore_document(self) -> dict:
        """
        Convert to Firestore document format.

        Returns:
            dict: Document data for Firestore
        """
        from google.cloud import firestore as firestore_module

        return {
            "user_id": self.user_id,
            "image_url": self.image_path,
            "description": self.description,
            "lat": self.lat,
            "lng": self.lng,
            "created_at": firestore_module.SERVER_TIMESTAMP
        }


def join_profiles(snaps: list, profiles: dict) -> tuple:
    """
    Join snap rows with their author profiles.

    Args:
        snaps: SnapRow list in display order
        profiles: Mapping of user id to ProfileRow

    Returns:
        tuple: SnapView tuple in the same order; authors missing from
            profiles are joined as None
    """
    return tuple(SnapView(snap=snap, author=profiles.get(snap.user_id)) for snap in snaps)
