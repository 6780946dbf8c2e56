import logging
from typing import Any

from pydantic import ValidationError

from iotlock.core.exceptions import AppException, NotAuthenticated
from iotlock.core.http import ApiClient
from iotlock.core.results import Outcome
from iotlock.schemas.auth import User
from iotlock.schemas.visit import PendingRequest
from iotlock.schemas.visitor import NotificationData, VisitorDetectedRequest
from iotlock.services.session_store import SessionStore

logger = logging.getLogger(__name__)


def parse_notification(raw: dict[str, Any] | None) -> NotificationData | None:
    if not raw:
        return None
    try:
        return NotificationData.model_validate(raw)
    except ValidationError:
        logger.warning("Ignoring malformed notification data: %s", raw)
        return None


def pending_request_from_notification(
    raw: dict[str, Any] | NotificationData | None,
    fallback_photo: str = "",
) -> PendingRequest | None:
    data = raw if isinstance(raw, NotificationData) else parse_notification(raw)
    if data is None or not data.visit_id:
        return None
    photos = [data.image_url] if data.image_url else ([fallback_photo] if fallback_photo else [])
    return PendingRequest(id=data.visit_id, name=data.visitor_name or "Visitor", photos=photos)


class NotificationService:
    def __init__(self, api: ApiClient, store: SessionStore):
        self.api = api
        self.store = store

    def _require_user(self) -> User:
        user = self.store.user
        if user is None:
            raise NotAuthenticated("Please login first")
        return user

    async def send_test_notification(self) -> Outcome:
        try:
            user = self._require_user()
            data = await self.api.post(f"/api/notify/test/{user.id}", token=user.access_token)
        except AppException as exc:
            logger.error("Test notification failed: %s", exc.message)
            return Outcome.from_exception(exc)
        return Outcome.success(data, message="Test notification sent from server!")

    async def simulate_visitor_detection(
        self,
        visitor_name: str = "",
        image_url: str = "https://example.com/visitor-image.jpg",
        detected_label: str = "person",
    ) -> Outcome:
        try:
            user = self._require_user()
            payload = VisitorDetectedRequest(
                owner_id=user.owner_id,
                visitor_name=visitor_name.strip() or "John Doe",
                image_url=image_url,
                detected_label=detected_label,
            )
            data = await self.api.post(
                "/api/notifications/raspberry-pi/visitor-detected",
                json=payload.model_dump(),
                token=user.access_token,
            )
        except AppException as exc:
            logger.error("Visitor detection notification failed: %s", exc.message)
            return Outcome.from_exception(exc)
        return Outcome.success(data, message="Visitor detection notification sent!")

    async def notification_status(self) -> Outcome:
        try:
            user = self._require_user()
            data = await self.api.get(f"/api/notifications/status/{user.id}", token=user.access_token)
        except AppException as exc:
            logger.error("Notification status check failed: %s", exc.message)
            return Outcome.from_exception(exc)
        return Outcome.success(data)
