from pydantic import BaseModel, ConfigDict, field_validator


class VisitorCreateRequest(BaseModel):
    name: str
    profile_image_url: str


class UploadResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: str


class VisitorDetectedRequest(BaseModel):
    owner_id: int | str
    visitor_name: str = "Visitor"
    image_url: str | None = None
    detected_label: str | None = None


class NotificationData(BaseModel):
    """Data block attached to a visitor push notification."""

    model_config = ConfigDict(extra="ignore")

    visit_id: str | None = None
    visitor_name: str | None = None
    image_url: str | None = None
    detected_label: str | None = None
    timestamp: str | None = None
    action: str | None = None
    screen: str | None = None

    @field_validator("visit_id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value) if value is not None else value
