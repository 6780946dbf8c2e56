import logging
from typing import Callable

from iotlock.core.exceptions import AppException, NotAuthenticated, ValidationFailed
from iotlock.core.http import ApiClient
from iotlock.core.results import Outcome
from iotlock.schemas.device import DeviceRegisterRequest, DeviceUnregisterRequest
from iotlock.services.session_store import SessionStore

logger = logging.getLogger(__name__)

# Stands in for the platform push service: returns a token, or None when
# permission was refused or the device cannot receive pushes.
PushTokenProvider = Callable[[], str | None]


class DeviceRegistration:
    def __init__(
        self,
        api: ApiClient,
        store: SessionStore,
        platform: str = "android",
        token_provider: PushTokenProvider | None = None,
    ):
        self.api = api
        self.store = store
        self.platform = platform
        self.token_provider = token_provider
        self.push_token: str | None = None
        self.registered = False

    def acquire_token(self) -> str | None:
        if self.push_token is None and self.token_provider is not None:
            try:
                self.push_token = self.token_provider()
            except Exception:
                logger.exception("Push token provider failed")
                self.push_token = None
        return self.push_token

    async def register(self, push_token: str | None = None) -> Outcome:
        if push_token:
            self.push_token = push_token
        try:
            user = self.store.user
            if user is None:
                raise NotAuthenticated()
            token = self.acquire_token()
            if not token:
                raise ValidationFailed("No push token available")

            payload = DeviceRegisterRequest(owner_id=user.owner_id, push_token=token, platform=self.platform)
            await self.api.post("/api/device/register", json=payload.model_dump(), token=user.access_token)
        except AppException as exc:
            logger.warning("Device registration skipped: %s", exc.message)
            return Outcome.from_exception(exc)

        self.registered = True
        logger.info("Registered push token for owner_id=%s platform=%s", user.id, self.platform)
        return Outcome.success()

    async def unregister(self) -> Outcome:
        user = self.store.user
        token = self.push_token
        if user is None or not token:
            return Outcome.success()
        try:
            payload = DeviceUnregisterRequest(owner_id=user.owner_id, push_token=token)
            await self.api.post("/api/devices/unregister", json=payload.model_dump(), token=user.access_token)
        except AppException as exc:
            logger.warning("Device unregistration failed: %s", exc.message)
            return Outcome.from_exception(exc)
        finally:
            self.registered = False

        logger.info("Unregistered push token for owner_id=%s", user.id)
        return Outcome.success()
