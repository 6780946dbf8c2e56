import asyncio
import logging
import mimetypes
from pathlib import Path

from pydantic import ValidationError

from iotlock.core.exceptions import ApiError, AppException, ValidationFailed
from iotlock.core.http import ApiClient
from iotlock.core.results import BUSY, Outcome
from iotlock.schemas.visitor import UploadResponse, VisitorCreateRequest

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Teach the lock a known visitor's face from local photos."""

    def __init__(self, api: ApiClient):
        self.api = api
        self.is_processing = False

    async def upload_image(self, path: str | Path) -> str:
        path = Path(path)
        try:
            content = await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise ValidationFailed(f"Cannot read photo {path.name}") from exc
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        data = await self.api.post(
            "/upload/upload-image",
            files={"file": (path.name, content, content_type)},
            use_api_key=True,
            upload=True,
        )
        try:
            return UploadResponse.model_validate(data).url
        except ValidationError as exc:
            raise ApiError("Upload returned no image URL", status_code=502, payload=data) from exc

    async def memorize(self, name: str, photo_paths: list[str | Path]) -> Outcome:
        if self.is_processing:
            return BUSY
        name = (name or "").strip()
        if not name or not photo_paths:
            return Outcome.from_exception(ValidationFailed("Please add at least one photo and enter a name"))

        self.is_processing = True
        try:
            urls = [await self.upload_image(path) for path in photo_paths]
            payload = VisitorCreateRequest(name=name, profile_image_url=urls[0])
            data = await self.api.post("/api/visitors/create", json=payload.model_dump(), use_api_key=True)
        except AppException as exc:
            logger.error("Memorizing %s failed: %s", name, exc.message)
            return Outcome.from_exception(exc)
        finally:
            self.is_processing = False

        logger.info("Memorized %s with %s photo(s)", name, len(urls))
        return Outcome.success(
            {"visitor": data, "image_urls": urls},
            message=f"Successfully memorized {name} with {len(urls)} photo(s).",
        )
