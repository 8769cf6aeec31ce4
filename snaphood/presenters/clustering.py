"""
Groups snaps into map markers and builds their popup view-models.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from ..config import (
    CLUSTER_PRECISION,
    FEED_DESCRIPTION_LENGTH,
    MAP_CENTER,
    MAP_ZOOM,
    POPUP_DESCRIPTION_LENGTH,
    TILE_ATTRIBUTION,
    TILE_URL,
)
from ..models.identity import Position
from ..models.snap import SnapView
from ..utils.geo_helpers import cluster_key, format_position, key_to_position


@dataclass(frozen=True)
class MarkerIcon:
    """A custom marker icon definition."""
    name: str
    html: str
    size: tuple[int, int] = (18, 18)
    anchor: tuple[int, int] = (9, 9)
    popup_anchor: tuple[int, int] = (0, -9)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "html": self.html,
            "iconSize": list(self.size),
            "iconAnchor": list(self.anchor),
            "popupAnchor": list(self.popup_anchor)
        }


@dataclass(frozen=True)
class MapIcons:
    """The shared icon set; built once and handed to the presenter."""
    snap: MarkerIcon
    user_location: MarkerIcon

    @classmethod
    def default(cls) -> 'MapIcons':
        return cls(
            snap=MarkerIcon(
                name="snap",
                html='<div style="width:18px;height:18px;background:#e11d48;border-radius:50%;border:2px solid #fff;box-shadow:0 0 4px #0003;"></div>'
            ),
            user_location=MarkerIcon(
                name="user-location",
                html='<div style="width:18px;height:18px;background:#fff;border-radius:50%;border:2px solid #2563eb;box-shadow:0 0 6px #2563eb99;"></div>'
            )
        )


def cluster_snaps(snaps: Iterable[SnapView], precision: int = CLUSTER_PRECISION) -> dict[str, list[SnapView]]:
    """
    Group snaps by rounded coordinate.

    Snaps without valid coordinates are not placed on the map and belong to no
    group. Every other snap belongs to exactly one group.

    Args:
        snaps: Snap collection in display order
        precision: Decimal places kept when rounding

    Returns:
        dict: Snaps keyed by "lat,lng" cluster key
    """
    clusters: dict[str, list[SnapView]] = {}
    for view in snaps:
        if not view.snap.has_valid_coordinates:
            continue
        key = cluster_key(view.snap.lat, view.snap.lng, precision)
        clusters.setdefault(key, []).append(view)
    return clusters


def truncate(text: str, length: int) -> str:
    return f"{text[:length]}..." if len(text) > length else text


def format_timestamp(value) -> str:
    """Render a creation time as MM/DD/YY HH:MM:SS."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return value
    if not isinstance(value, datetime):
        return ""
    return value.strftime("%m/%d/%y %H:%M:%S")


@dataclass
class SnapDetail:
    """Everything the single-snap popup or details view shows."""
    snap_id: str
    image_src: str
    author_name: Optional[str]
    description: str
    timestamp: str
    address: str
    comments: list = field(default_factory=list)
    comment_draft: str = ""
    comment_submitting: bool = False

    def to_dict(self) -> dict:
        return {
            "snap_id": self.snap_id,
            "image_src": self.image_src,
            "author_name": self.author_name,
            "description": self.description,
            "timestamp": self.timestamp,
            "address": self.address,
            "comments": [comment.to_dict() for comment in self.comments],
            "comment_draft": self.comment_draft,
            "comment_submitting": self.comment_submitting
        }


@dataclass
class SnapMarker:
    """An individually interactive marker for a lone snap."""
    position: tuple[float, float]
    icon: MarkerIcon
    detail: SnapDetail

    def to_dict(self) -> dict:
        return {
            "kind": "snap",
            "position": list(self.position),
            "icon": self.icon.name,
            "detail": self.detail.to_dict()
        }


@dataclass
class ClusterMarker:
    """An aggregate marker listing the snaps sharing a grid cell."""
    key: str
    position: tuple[float, float]
    icon: MarkerIcon
    members: list = field(default_factory=list)

    @property
    def title(self) -> str:
        return f"{len(self.members)} snaps here"

    def to_dict(self) -> dict:
        return {
            "kind": "cluster",
            "key": self.key,
            "position": list(self.position),
            "icon": self.icon.name,
            "title": self.title,
            "members": self.members
        }


class ClusterPresenter:
    """Builds marker view-models from the snap collection and store state."""

    def __init__(self, icons: MapIcons, storage_service):
        self.icons = icons
        self.storage_service = storage_service

    def detail(self, view: SnapView, address_store, comment_store, full_description: bool = True) -> SnapDetail:
        description = view.snap.description
        if not full_description:
            description = truncate(description, POPUP_DESCRIPTION_LENGTH)
        return SnapDetail(
            snap_id=view.id,
            image_src=self.storage_service.public_url(view.snap.image_url),
            author_name=view.author_name,
            description=description,
            timestamp=format_timestamp(view.snap.created_at),
            address=address_store.label(view.id),
            comments=list(comment_store.thread(view.id)),
            comment_draft=comment_store.draft(view.id),
            comment_submitting=comment_store.is_submitting(view.id)
        )

    def present(self, snaps: Iterable[SnapView], address_store, comment_store) -> list:
        """
        Render the snap collection as markers.

        Single-member groups become SnapMarkers positioned at the snap itself;
        larger groups become one ClusterMarker at the rounded cell position.
        """
        markers = []
        for key, members in cluster_snaps(snaps).items():
            if len(members) == 1:
                view = members[0]
                markers.append(SnapMarker(
                    position=(view.snap.lat, view.snap.lng),
                    icon=self.icons.snap,
                    detail=self.detail(view, address_store, comment_store, full_description=False)
                ))
            else:
                markers.append(ClusterMarker(
                    key=key,
                    position=key_to_position(key),
                    icon=self.icons.snap,
                    members=[
                        {"snap_id": view.id, "author_name": view.author_name, "description": view.snap.description}
                        for view in members
                    ]
                ))
        return markers

    def user_marker(self, position: Optional[Position]) -> Optional[dict]:
        if position is None:
            return None
        return {
            "kind": "user",
            "position": [position.latitude, position.longitude],
            "icon": self.icons.user_location.name,
            "label": f"You are here {format_position(position.latitude, position.longitude)}"
        }

    def map_frame(self) -> dict:
        return {
            "center": list(MAP_CENTER),
            "zoom": MAP_ZOOM,
            "tile_url": TILE_URL,
            "attribution": TILE_ATTRIBUTION,
            "icons": {icon.name: icon.to_dict() for icon in (self.icons.snap, self.icons.user_location)}
        }

    def feed(self, snaps: Iterable[SnapView]) -> list[dict]:
        """Newest-first list entries for the feed view."""
        return [
            {
                "snap_id": view.id,
                "image_src": self.storage_service.public_url(view.snap.image_url),
                "author_name": view.author_name,
                "description": truncate(view.snap.description, FEED_DESCRIPTION_LENGTH),
                "timestamp": format_timestamp(view.snap.created_at)
            }
            for view in snaps
        ]
