import logging
from enum import Enum

from pydantic import ValidationError

from iotlock.core.exceptions import ApiError, AppException, NotAuthenticated, ValidationFailed
from iotlock.core.http import ApiClient
from iotlock.core.results import BUSY, Outcome
from iotlock.schemas.visit import (
    DecisionAction,
    DecisionResponse,
    PendingRequest,
    Visit,
    VisitStatus,
    map_remote_status,
)
from iotlock.services.session_store import SessionStore
from iotlock.services.visit_service import VisitListController

logger = logging.getLogger(__name__)

DECISION_PATHS = {
    DecisionAction.accept: "/api/visits/approve/{visit_id}",
    DecisionAction.reject: "/api/visits/deny/{visit_id}",
}


class DecisionState(str, Enum):
    idle = "idle"
    processing = "processing"


class VisitorDecisionFlow:
    """Approve or deny one visitor and reconcile the visit list.

    Status changes locally only after the server confirms. While a decision
    is in flight further decisions are refused.
    """

    def __init__(
        self,
        api: ApiClient,
        store: SessionStore,
        visits: VisitListController,
        fallback_photo: str = "",
    ):
        self.api = api
        self.store = store
        self.visits = visits
        self.fallback_photo = fallback_photo
        self.state = DecisionState.idle
        self.request: PendingRequest | None = None
        self.error: str | None = None

    @property
    def is_processing(self) -> bool:
        return self.state == DecisionState.processing

    def open(self, visit: Visit) -> PendingRequest | None:
        if not visit.is_pending:
            return None
        return self.open_request(PendingRequest(id=visit.id, name=visit.visitor_name, photos=[visit.photo_url]))

    def open_request(self, request: PendingRequest) -> PendingRequest:
        photos = [photo for photo in request.photos if photo] or [self.fallback_photo]
        self.request = request.model_copy(update={"photos": photos})
        self.error = None
        return self.request

    def dismiss(self) -> None:
        if self.is_processing:
            return
        self.request = None
        self.error = None

    async def decide(self, action: DecisionAction | str) -> Outcome:
        if self.request is None:
            return Outcome.from_exception(ValidationFailed("Missing visitor ID or authentication token"))
        outcome = await self.decide_visit(self.request.id, action)
        if outcome:
            self.request = None
        return outcome

    async def decide_visit(self, visit_id: str, action: DecisionAction | str) -> Outcome:
        if self.is_processing:
            return BUSY

        action = DecisionAction(action)
        user = self.store.user
        if not visit_id:
            return self._fail(ValidationFailed("Missing visitor ID or authentication token"))
        known = self.visits.get(visit_id)
        if known is not None and not known.is_pending:
            return self._fail(ValidationFailed(f"Visit already {known.status.value}"))
        if user is None or not user.access_token:
            return self._fail(NotAuthenticated("Missing visitor ID or authentication token"))

        self.state = DecisionState.processing
        try:
            data = await self.api.post(
                DECISION_PATHS[action].format(visit_id=visit_id),
                token=user.access_token,
            )
            try:
                response = DecisionResponse.model_validate(data)
            except ValidationError as exc:
                raise ApiError("Failed to update status", status_code=502, payload=data) from exc
            status = map_remote_status(response.visit.status)
            if status == VisitStatus.pending:
                raise ApiError("Failed to update status", status_code=502, payload=data)
        except AppException as exc:
            verb = "approve" if action == DecisionAction.accept else "deny"
            logger.error("Failed to %s visit_id=%s: %s", verb, visit_id, exc.message)
            return self._fail(exc, prefix=f"Failed to {verb} visitor: ")
        finally:
            self.state = DecisionState.idle

        self.visits.apply_status(visit_id, status)
        self.error = None
        verb = "approved" if action == DecisionAction.accept else "denied"
        logger.info("Visit %s %s (status=%s)", visit_id, verb, status.value)
        return Outcome.success(status, message=f"Visitor {verb} successfully")

    def _fail(self, exc: AppException, prefix: str = "") -> Outcome:
        outcome = Outcome.failure(Outcome.from_exception(exc).kind, f"{prefix}{exc.message}")
        self.error = outcome.message
        return outcome
