import logging
from datetime import datetime

from pydantic import ValidationError

from iotlock.core.exceptions import ApiError, AppException, NotAuthenticated
from iotlock.core.http import ApiClient
from iotlock.core.results import BUSY, Outcome
from iotlock.schemas.visit import Visit, VisitPage, VisitStatus
from iotlock.services.session_store import SessionStore

logger = logging.getLogger(__name__)


class VisitListController:
    """Paginated visit history for the signed-in owner.

    Server order is preserved. Page 1 and refreshes replace the list, later
    pages append. A failed fetch stops pagination until the caller retries.
    """

    def __init__(
        self,
        api: ApiClient,
        store: SessionStore,
        page_size: int = 10,
        fallback_photo: str = "",
    ):
        self.api = api
        self.store = store
        self.page_size = page_size
        self.fallback_photo = fallback_photo

        self.visits: list[Visit] = []
        self.page = 1
        self.total = 0
        self.has_more = True
        self.is_loading = False
        self.is_refreshing = False
        self.error: str | None = None

    @property
    def pending_visits(self) -> list[Visit]:
        return [visit for visit in self.visits if visit.is_pending]

    @property
    def pending_count(self) -> int:
        return len(self.pending_visits)

    def get(self, visit_id: str) -> Visit | None:
        for visit in self.visits:
            if visit.id == visit_id:
                return visit
        return None

    def reset(self) -> None:
        self.visits = []
        self.page = 1
        self.total = 0
        self.has_more = True
        self.error = None

    async def fetch_page(self, page: int = 1, is_refresh: bool = False) -> Outcome:
        if self.is_loading or self.is_refreshing:
            return BUSY

        user = self.store.user
        if user is None or not user.access_token:
            exc = NotAuthenticated()
            self.error = exc.message
            return Outcome.from_exception(exc)

        replace = is_refresh or page == 1
        if is_refresh:
            self.is_refreshing = True
        else:
            self.is_loading = True
        if replace:
            self.error = None

        try:
            data = await self.api.get(
                f"/api/visits/{user.id}",
                params={"page": page, "limit": self.page_size},
                token=user.access_token,
            )
            try:
                result = VisitPage.model_validate(data)
            except ValidationError as exc:
                raise ApiError("Failed to fetch visitors", status_code=502, payload=data) from exc
        except AppException as exc:
            logger.error("Fetching visits page=%s failed: %s", page, exc.message)
            self.error = exc.message
            self.has_more = False
            return Outcome.from_exception(exc)
        finally:
            self.is_loading = False
            self.is_refreshing = False

        now = datetime.now()
        fetched = [Visit.from_remote(item, self.fallback_photo, now=now) for item in result.visits]
        if replace:
            self.visits = fetched
        else:
            known = {visit.id for visit in self.visits}
            self.visits = self.visits + [visit for visit in fetched if visit.id not in known]

        self.page = page
        self.total = result.total_visits
        self.has_more = len(self.visits) < self.total
        self.error = None
        logger.debug(
            "Fetched visits page=%s count=%s total=%s has_more=%s",
            page,
            len(fetched),
            self.total,
            self.has_more,
        )
        return Outcome.success(fetched)

    async def refresh(self) -> Outcome:
        self.has_more = True
        return await self.fetch_page(1, is_refresh=True)

    async def load_more(self) -> Outcome | None:
        if self.is_loading or self.is_refreshing or not self.has_more:
            return None
        return await self.fetch_page(self.page + 1)

    def apply_status(self, visit_id: str, status: VisitStatus) -> bool:
        for index, visit in enumerate(self.visits):
            if visit.id == visit_id:
                if not visit.is_pending:
                    return False
                self.visits[index] = visit.model_copy(update={"status": status})
                self.error = None
                return True
        return False
