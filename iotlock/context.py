"""Application context: one object that owns the session and every service.

Created at app start, passed to whatever drives the screens, and closed on
shutdown. Nothing in the services reaches for global state.
"""

import logging

import httpx

from iotlock.core.config import Settings, get_settings
from iotlock.core.http import ApiClient
from iotlock.core.results import Outcome
from iotlock.db.session import build_engine
from iotlock.schemas.auth import User
from iotlock.services.auth_service import AuthClient
from iotlock.services.decision_service import VisitorDecisionFlow
from iotlock.services.device_service import DeviceRegistration, PushTokenProvider
from iotlock.services.enrollment_service import EnrollmentService
from iotlock.services.notification_service import NotificationService
from iotlock.services.session_store import SessionStore
from iotlock.services.visit_service import VisitListController

logger = logging.getLogger(__name__)


class AppContext:
    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        token_provider: PushTokenProvider | None = None,
    ):
        self.settings = settings or get_settings()
        self.api = ApiClient(self.settings, transport=transport)
        self.store = SessionStore(
            build_engine(self.settings.SESSION_DATABASE_URL),
            storage_key=self.settings.SESSION_STORAGE_KEY,
        )
        self.devices = DeviceRegistration(
            self.api,
            self.store,
            platform=self.settings.PUSH_PLATFORM,
            token_provider=token_provider,
        )
        self.auth = AuthClient(
            self.api,
            self.store,
            self.devices,
            min_password_length=self.settings.MIN_PASSWORD_LENGTH,
        )
        self.visits = VisitListController(
            self.api,
            self.store,
            page_size=self.settings.VISITS_PAGE_SIZE,
            fallback_photo=self.settings.FALLBACK_AVATAR_URL,
        )
        self.decisions = VisitorDecisionFlow(
            self.api,
            self.store,
            self.visits,
            fallback_photo=self.settings.FALLBACK_PHOTO_URL,
        )
        self.enrollment = EnrollmentService(self.api)
        self.notifications = NotificationService(self.api, self.store)

    @property
    def user(self) -> User | None:
        return self.store.user

    async def start(self) -> User | None:
        user = self.store.load()
        if user is not None:
            logger.info("Restored session for user_id=%s", user.id)
            await self._register_device()
        return user

    async def login(self, email: str, password: str) -> Outcome:
        outcome = await self.auth.login(email, password)
        if outcome:
            self.visits.reset()
            await self._register_device()
        return outcome

    async def logout(self) -> None:
        await self.auth.logout()
        self.visits.reset()
        self.decisions.dismiss()

    async def on_push_token(self, token: str) -> Outcome | None:
        self.devices.push_token = token
        return await self._register_device()

    async def _register_device(self) -> Outcome | None:
        if self.store.user is None or not self.devices.acquire_token():
            return None
        return await self.devices.register()

    async def aclose(self) -> None:
        await self.api.aclose()
        self.store.dispose()

    async def __aenter__(self) -> "AppContext":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
