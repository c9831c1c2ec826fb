"""
Facility Reports Domain Model

Core principles:
1. Report = maintenance ticket filed by a member (the reporter)
2. Reporter fields are IMMUTABLE after creation
3. Deletion is a visibility flag, never a physical delete
4. Snapshots handed to callers are frozen
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_timestamp(value: Any) -> Optional[datetime]:
    """
    Normalize a store-native timestamp to an aware UTC datetime.

    Accepts datetimes (naive ones are taken as UTC), ISO-8601 strings,
    epoch milliseconds, and store timestamp objects exposing to_datetime().
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, bool):
        raise TypeError(f"Unsupported timestamp value: {value!r}")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str):
        # fromisoformat() rejects a trailing Z before Python 3.11
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return normalize_timestamp(datetime.fromisoformat(value))
    if hasattr(value, "to_datetime"):
        return normalize_timestamp(value.to_datetime())
    raise TypeError(f"Unsupported timestamp value: {value!r}")


# =============================================================================
# ENUMS
# =============================================================================

class Role(str, Enum):
    USER = "user"
    TECHNICIAN = "technician"
    ADMIN = "admin"


class ReportStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


# =============================================================================
# BASE
# =============================================================================

class Document(BaseModel):
    """
    Frozen snapshot of a stored document.

    Attributes are snake_case in Python and camelCase on the wire and in
    the store.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude={"id"})


# =============================================================================
# CORE MODELS
# =============================================================================

class Principal(BaseModel):
    """Authenticated identity handed over by the identity provider."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    email: str
    display_name: Optional[str] = None
    photo_url: Optional[str] = Field(default=None, alias="photoURL")


class User(Document):
    """Identity + role record, keyed by the principal id."""

    id: str
    email: str
    display_name: str
    photo_url: Optional[str] = Field(default=None, alias="photoURL")
    role: Role = Role.USER

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _normalize_timestamps(cls, value):
        return normalize_timestamp(value)


class Report(Document):
    """
    The maintenance ticket.

    Lifecycle: created by its reporter, mutated only through the
    lifecycle manager, hidden (never deleted) by an admin.
    """

    id: str

    # Reporter (immutable)
    reporter_id: str
    reporter_email: str
    reporter_name: str

    # Description
    location: str
    problem_type: str
    problem_details: str
    images: List[str] = Field(default_factory=list)

    status: ReportStatus = ReportStatus.PENDING

    # Assignment (null until first assign)
    assigned_to: Optional[str] = None
    assigned_to_name: Optional[str] = None
    assigned_by: Optional[str] = None
    assigned_at: Optional[datetime] = None

    # Soft delete
    hidden_from_admin: bool = False
    hidden_at: Optional[datetime] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator(
        "assigned_at", "hidden_at", "created_at", "updated_at", mode="before"
    )
    @classmethod
    def _normalize_timestamps(cls, value):
        return normalize_timestamp(value)


class NewReport(BaseModel):
    """Filing payload. Missing (null) and blank fields are both checked by the lifecycle manager."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    location: Optional[str] = None
    problem_type: Optional[str] = None
    problem_details: Optional[str] = None
    images: Optional[List[str]] = None
    reporter_name: Optional[str] = None


class AuthSession(BaseModel):
    """
    Resolved session passed explicitly into every engine call.

    There is no ambient "current user": callers hold this value.
    """

    model_config = ConfigDict(frozen=True)

    principal: Principal
    user: User
    role: Role

    @property
    def user_id(self) -> str:
        return self.user.id
