import logging

from pydantic import ValidationError

from iotlock.core.exceptions import ApiError, AppException, NotAuthenticated, ValidationFailed
from iotlock.core.http import ApiClient
from iotlock.core.results import BUSY, Outcome
from iotlock.schemas.auth import ChangePasswordRequest, LoginRequest, LoginResponse, RegisterRequest, User
from iotlock.services.device_service import DeviceRegistration
from iotlock.services.session_store import SessionStore

logger = logging.getLogger(__name__)


def _validate_registration(
    name: str,
    email: str,
    password: str,
    confirm_password: str | None,
    min_length: int,
) -> RegisterRequest:
    if not name.strip() or not email.strip() or not password or confirm_password == "":
        raise ValidationFailed("Please fill in all fields")
    if confirm_password is not None and password != confirm_password:
        raise ValidationFailed("Passwords do not match")
    if len(password) < min_length:
        raise ValidationFailed(f"Password must be at least {min_length} characters long")
    try:
        return RegisterRequest(name=name.strip(), email=email.strip(), password=password)
    except ValidationError as exc:
        raise ValidationFailed("Please enter a valid email address") from exc


class AuthClient:
    def __init__(
        self,
        api: ApiClient,
        store: SessionStore,
        devices: DeviceRegistration,
        min_password_length: int = 6,
    ):
        self.api = api
        self.store = store
        self.devices = devices
        self.min_password_length = min_password_length
        self._login_in_flight = False

    @property
    def user(self) -> User | None:
        return self.store.user

    async def login(self, email: str, password: str) -> Outcome:
        if self._login_in_flight:
            return BUSY
        if not email or not password:
            return Outcome.from_exception(ValidationFailed("Please fill in all fields"))

        self._login_in_flight = True
        try:
            payload = LoginRequest(email=email.strip(), password=password)
            data = await self.api.post("/api/auth/login", json=payload.model_dump())
            try:
                response = LoginResponse.model_validate(data)
            except ValidationError as exc:
                raise ApiError("Unexpected login response", status_code=502, payload=data) from exc
            user = User.from_login(response)
            self.store.save(user)
        except AppException as exc:
            logger.error("Login failed for %s: %s", email, exc.message)
            return Outcome.from_exception(exc)
        finally:
            self._login_in_flight = False

        logger.info("Logged in user_id=%s", user.id)
        return Outcome.success(user)

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        confirm_password: str | None = None,
    ) -> Outcome:
        try:
            payload = _validate_registration(name, email, password, confirm_password, self.min_password_length)
            data = await self.api.post("/api/auth/register", json=payload.model_dump())
        except AppException as exc:
            logger.error("Registration failed for %s: %s", email, exc.message)
            return Outcome.from_exception(exc)

        logger.info("Registered account for %s", payload.email)
        return Outcome.success(data)

    async def logout(self) -> None:
        # Unregistration needs the token, so it runs before the session goes.
        try:
            await self.devices.unregister()
        finally:
            self.store.clear()
        logger.info("Session cleared")

    async def change_password(self, old_password: str, new_password: str) -> Outcome:
        try:
            user = self.store.user
            if user is None:
                raise NotAuthenticated()
            if not old_password or not new_password:
                raise ValidationFailed("Please fill in all fields")
            if len(new_password) < self.min_password_length:
                raise ValidationFailed(f"Password must be at least {self.min_password_length} characters long")
            payload = ChangePasswordRequest(old_password=old_password, new_password=new_password)
            data = await self.api.post(
                "/api/auth/change-password",
                json=payload.model_dump(),
                token=user.access_token,
            )
        except AppException as exc:
            logger.error("Password change failed: %s", exc.message)
            return Outcome.from_exception(exc)
        return Outcome.success(data, message="Password changed")
