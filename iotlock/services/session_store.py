import logging

from pydantic import ValidationError
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from iotlock.db.base import Base
from iotlock.db.models import StoredValue
from iotlock.db.session import build_sessionmaker
from iotlock.schemas.auth import User

logger = logging.getLogger(__name__)


class SessionStore:
    """Durable home of the single signed-in user.

    The user is serialized as JSON under one fixed key, so there is never more
    than one record. ``user`` mirrors what is on disk after ``load()``.
    """

    def __init__(self, engine: Engine, storage_key: str = "user"):
        self.storage_key = storage_key
        self._engine = engine
        self._sessions: sessionmaker = build_sessionmaker(engine)
        self._user: User | None = None
        self._is_loading = True
        Base.metadata.create_all(bind=engine, tables=[StoredValue.__table__])

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def load(self) -> User | None:
        db = self._sessions()
        try:
            row = db.get(StoredValue, self.storage_key)
            if row is None:
                self._user = None
                return None
            try:
                self._user = User.model_validate_json(row.value)
            except ValidationError:
                logger.warning("Discarding unreadable stored session under key=%s", self.storage_key)
                db.delete(row)
                db.commit()
                self._user = None
            return self._user
        finally:
            db.close()
            self._is_loading = False

    def save(self, user: User) -> None:
        db = self._sessions()
        try:
            row = db.get(StoredValue, self.storage_key)
            if row is None:
                db.add(StoredValue(key=self.storage_key, value=user.model_dump_json()))
            else:
                row.value = user.model_dump_json()
            db.commit()
        finally:
            db.close()
        self._user = user

    def clear(self) -> None:
        db = self._sessions()
        try:
            row = db.get(StoredValue, self.storage_key)
            if row is not None:
                db.delete(row)
                db.commit()
        finally:
            db.close()
        self._user = None

    def dispose(self) -> None:
        self._engine.dispose()
