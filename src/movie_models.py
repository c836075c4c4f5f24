"""
Movie, user and group records, and their conversion to and from stored documents.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, Optional


def _parse_int(value):
    if value is None or value == "":
        return None
    return int(value)


def _parse_bool(value):
    if isinstance(value, bool):
        return value
    return str(value).strip().upper() in {"TRUE", "1", "YES"}


def _parse_datetime(value):
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _parse_text(value):
    if value is None or value == "":
        return None
    return str(value)


@dataclass
class Movie:
    """A proposed movie, the candidate for the weekly pick."""

    id: str
    title: str
    proposer_id: str
    proposal_intent: int
    proposed_at: datetime
    interest_score: Optional[int] = None
    watched: bool = False
    watched_at: Optional[datetime] = None
    notes: Optional[str] = None
    personal_rating: Optional[int] = None
    group_id: Optional[str] = None

    @property
    def is_scored(self):
        return bool(self.interest_score)

    def to_document(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Movie":
        """Build a Movie from a stored document, tolerating string-typed cells."""
        return cls(
            id=str(document["id"]),
            title=str(document["title"]),
            proposer_id=str(document["proposer_id"]),
            proposal_intent=int(document["proposal_intent"]),
            proposed_at=_parse_datetime(document["proposed_at"]),
            interest_score=_parse_int(document.get("interest_score")),
            watched=_parse_bool(document.get("watched", False)),
            watched_at=_parse_datetime(document.get("watched_at")),
            notes=_parse_text(document.get("notes")),
            personal_rating=_parse_int(document.get("personal_rating")),
            group_id=_parse_text(document.get("group_id")),
        )


@dataclass
class User:
    id: str
    username: str
    email: str
    name: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def display_name(self):
        return self.name or self.username

    def to_document(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "User":
        return cls(
            id=str(document["id"]),
            username=str(document["username"]),
            email=str(document["email"]),
            name=_parse_text(document.get("name")),
            created_at=_parse_datetime(document.get("created_at")),
        )


@dataclass
class Group:
    """A movie night group and its schedule."""

    id: str
    name: str
    schedule_type: str
    schedule_time: str
    schedule_day: Optional[int] = None
    schedule_date: Optional[datetime] = None
    current_proposer_index: int = 0
    last_movie_night: Optional[datetime] = None

    def to_document(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Group":
        return cls(
            id=str(document["id"]),
            name=str(document["name"]),
            schedule_type=str(document["schedule_type"]),
            schedule_time=str(document["schedule_time"]),
            schedule_day=_parse_int(document.get("schedule_day")),
            schedule_date=_parse_datetime(document.get("schedule_date")),
            current_proposer_index=_parse_int(document.get("current_proposer_index")) or 0,
            last_movie_night=_parse_datetime(document.get("last_movie_night")),
        )


@dataclass
class GroupMember:
    id: str
    group_id: str
    user_id: str
    joined_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "GroupMember":
        return cls(
            id=str(document["id"]),
            group_id=str(document["group_id"]),
            user_id=str(document["user_id"]),
            joined_at=_parse_datetime(document.get("joined_at")),
        )
