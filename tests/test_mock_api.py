import logging

import httpx

from iotlock.core.logging import setup_logging
from iotlock.core.security import create_access_token, decode_token, hash_password
from iotlock.db.models import User
from iotlock.mock_api.main import create_app

from conftest import seed_visits


def _client(mock_app) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=mock_app), base_url="http://testserver")


async def test_health(mock_app):
    async with _client(mock_app) as client:
        response = await client.get("/health")
    assert response.json()["status"] == "ok"
    assert response.json()["apiKeyRequired"] is True


async def test_visits_are_private_to_their_owner(mock_app, settings, db, owner):
    seed_visits(db, owner.id, 1)
    async with _client(mock_app) as client:
        anonymous = await client.get(f"/api/visits/{owner.id}")
        stranger = await client.get(
            f"/api/visits/{owner.id + 1}",
            headers={"Authorization": f"Bearer {create_access_token(str(owner.id), settings=settings)}"},
        )
        forged = await client.get(
            f"/api/visits/{owner.id}",
            headers={"Authorization": "Bearer not-a-jwt"},
        )

    assert anonymous.status_code == 401
    assert stranger.status_code == 403
    assert forged.status_code == 401


async def test_decisions_only_apply_to_pending_visits(mock_app, settings, db, owner):
    [visit] = seed_visits(db, owner.id, 1)
    headers = {"Authorization": f"Bearer {create_access_token(str(owner.id), settings=settings)}"}
    async with _client(mock_app) as client:
        approved = await client.post(f"/api/visits/approve/{visit.id}", headers=headers)
        again = await client.post(f"/api/visits/deny/{visit.id}", headers=headers)
        missing = await client.post("/api/visits/deny/9999", headers=headers)

    assert approved.json()["status"] == "success"
    assert approved.json()["visit"]["status"] == "granted"
    assert again.status_code == 409
    assert again.json() == {"detail": "Visit already granted"}
    assert missing.status_code == 404


async def test_visitor_creation_needs_api_key(mock_app):
    async with _client(mock_app) as client:
        response = await client.post(
            "/api/visitors/create",
            json={"name": "Grandma", "profile_image_url": "https://img/1.jpg"},
        )
    assert response.status_code == 401


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    before = len(root.handlers)
    setup_logging(logging.DEBUG)
    setup_logging(logging.INFO)
    assert len(root.handlers) <= before + 1
    assert root.level == logging.INFO
    assert logging.getLogger("httpx").level == logging.WARNING


async def test_tokens_follow_the_app_secret(settings):
    custom = settings.model_copy(update={"JWT_SECRET_KEY": "rotated-secret"})
    app = create_app(custom, database_url="sqlite://")
    db = app.state.sessions()
    user = User(name="Bob", email="bob@example.com", password_hash=hash_password("secret123"))
    db.add(user)
    db.commit()
    db.refresh(user)
    try:
        async with _client(app) as client:
            login = await client.post("/api/auth/login", json={"email": "bob@example.com", "password": "secret123"})
            token = login.json()["access_token"]
            accepted = await client.get(f"/api/visits/{user.id}", headers={"Authorization": f"Bearer {token}"})
            stale = await client.get(
                f"/api/visits/{user.id}",
                headers={"Authorization": f"Bearer {create_access_token(str(user.id), settings=settings)}"},
            )
    finally:
        db.close()
        app.state.engine.dispose()

    assert decode_token(token, custom)["sub"] == str(user.id)
    assert accepted.status_code == 200
    assert stale.status_code == 401


async def test_uploaded_image_is_served(mock_app):
    async with _client(mock_app) as client:
        upload = await client.post(
            "/upload/upload-image",
            files={"file": ("face.jpg", b"\xff\xd8\xff-face", "image/jpeg")},
            headers={"X-API-Key": "test-key"},
        )
        image = await client.get(upload.json()["url"])
        missing = await client.get("/upload/images/9999")

    assert image.status_code == 200
    assert image.content == b"\xff\xd8\xff-face"
    assert image.headers["content-type"] == "image/jpeg"
    assert missing.status_code == 404
