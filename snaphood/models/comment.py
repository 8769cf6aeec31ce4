"""
Data models for snap comments.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class CommentRow:
    """A row of the comments collection."""
    id: str
    snap_id: str
    user_id: str
    text: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_firestore_doc(cls, doc_id: str, data: dict) -> 'CommentRow':
        """Create from Firestore document."""
        return cls(
            id=doc_id,
            snap_id=data.get("snap_id", ""),
            user_id=data.get("user_id", ""),
            text=data.get("text", ""),
            created_at=data.get("created_at")
        )


@dataclass(frozen=True)
class CommentView:
    """A comment joined with the commenter's display name."""
    comment: CommentRow
    user_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.user_name:
            return self.user_name
        if self.comment.user_id:
            return self.comment.user_id[:6]
        return "user"

    def to_dict(self) -> dict:
        created_at = self.comment.created_at
        return {
            "id": self.comment.id,
            "user_id": self.comment.user_id,
            "user_name": self.display_name,
            "text": self.comment.text,
            "created_at": created_at.isoformat() if created_at else None
        }
