"""Stand-in for the lock backend the mobile client talks to.

Implements the endpoints the client consumes so it can be exercised end to
end, locally with uvicorn or in-process through ``httpx.ASGITransport``.
"""

import logging

from fastapi import FastAPI

from iotlock.core.config import Settings, get_settings
from iotlock.core.exceptions import register_exception_handlers
from iotlock.core.logging import setup_logging
from iotlock.db.base import Base
from iotlock.db.models import Device, Notification, UploadedImage, User, Visit, Visitor
from iotlock.db.session import build_engine, build_sessionmaker
from iotlock.mock_api.routes import api_router

MOCK_TABLES = [
    User.__table__,
    Visitor.__table__,
    Visit.__table__,
    Device.__table__,
    Notification.__table__,
    UploadedImage.__table__,
]


def create_app(settings: Settings | None = None, database_url: str | None = None) -> FastAPI:
    settings = settings or get_settings()
    engine = build_engine(database_url or settings.MOCK_DATABASE_URL)
    Base.metadata.create_all(bind=engine, tables=MOCK_TABLES)

    app = FastAPI(title=f"{settings.APP_NAME} mock API", debug=settings.DEBUG)
    app.state.settings = settings
    app.state.engine = engine
    app.state.sessions = build_sessionmaker(engine)
    app.include_router(api_router)
    register_exception_handlers(app)
    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    setup_logging(logging.DEBUG if settings.DEBUG else logging.INFO)
    uvicorn.run(
        "iotlock.mock_api.main:create_app",
        factory=True,
        host=settings.BACKEND_HOST,
        port=settings.BACKEND_PORT,
        log_level="debug" if settings.DEBUG else "info",
    )


if __name__ == "__main__":
    run()
