from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

ACCEPTED_REMOTE_STATUSES = {"granted", "approved", "accepted"}
REJECTED_REMOTE_STATUSES = {"rejected", "denied"}


class VisitStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


class DecisionAction(str, Enum):
    accept = "accept"
    reject = "reject"


def map_remote_status(raw: str | None) -> VisitStatus:
    value = (raw or "").strip().lower()
    if value in ACCEPTED_REMOTE_STATUSES:
        return VisitStatus.accepted
    if value in REJECTED_REMOTE_STATUSES:
        return VisitStatus.rejected
    return VisitStatus.pending


class RemoteVisit(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    visitor_name: str | None = None
    profile_image_url: str | None = None
    image_url: str | None = None
    timestamp: datetime | None = None
    status: str | None = None
    visitor_id: int | None = None
    owner_id: int | None = None
    detected_label: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value) if value is not None else value


class VisitPage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    visits: list[RemoteVisit] = []
    total_visits: int = 0

    @field_validator("visits", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return value or []

    @field_validator("total_visits", mode="before")
    @classmethod
    def _none_is_zero(cls, value):
        return value or 0


class Visit(BaseModel):
    id: str
    visitor_name: str
    photo_url: str
    date: str
    time: str
    status: VisitStatus = VisitStatus.pending
    visitor_id: int | None = None
    owner_id: int | None = None
    detected_label: str | None = None
    image_url: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == VisitStatus.pending

    @classmethod
    def from_remote(cls, remote: RemoteVisit, fallback_photo: str, now: datetime | None = None) -> "Visit":
        moment = remote.timestamp or now or datetime.now()
        if moment.tzinfo is not None:
            moment = moment.astimezone()
        return cls(
            id=remote.id,
            visitor_name=remote.visitor_name or "Unknown Visitor",
            photo_url=remote.profile_image_url or remote.image_url or fallback_photo,
            date=moment.strftime("%Y-%m-%d"),
            time=moment.strftime("%H:%M"),
            status=map_remote_status(remote.status),
            visitor_id=remote.visitor_id,
            owner_id=remote.owner_id,
            detected_label=remote.detected_label,
            image_url=remote.image_url,
        )


class PendingRequest(BaseModel):
    id: str
    name: str
    photos: list[str] = []


class DecisionVisit(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: str


class DecisionResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: str
    visit: DecisionVisit
