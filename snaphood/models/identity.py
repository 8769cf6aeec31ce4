"""
Signed-in identity and device position models.
"""
import time
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Identity:
    """The currently signed-in user."""
    id: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_userinfo(cls, userinfo: dict) -> 'Identity':
        """Create from a Slack OpenID Connect userInfo payload."""
        return cls(
            id=userinfo["sub"],
            name=userinfo.get("name"),
            avatar_url=userinfo.get("picture"),
            email=userinfo.get("email")
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "avatar_url": self.avatar_url,
            "email": self.email
        }


@dataclass(frozen=True)
class Position:
    """A device position fix."""
    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    timestamp: float = field(default_factory=time.time)

    def age(self, now: Optional[float] = None) -> float:
        return (now if now is not None else time.time()) - self.timestamp
