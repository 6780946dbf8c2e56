from fastapi import APIRouter, Depends, File, Request, Response, UploadFile
from sqlalchemy.orm import Session

from iotlock.core.exceptions import AppException
from iotlock.db.models import UploadedImage, Visitor
from iotlock.mock_api.deps import get_db, require_api_key
from iotlock.schemas.visitor import VisitorCreateRequest

router = APIRouter(dependencies=[Depends(require_api_key)])
images_router = APIRouter()


@router.post("/upload/upload-image")
async def upload_image(request: Request, file: UploadFile = File(...), db: Session = Depends(get_db)):
    content = await file.read()
    if not content:
        raise AppException("Empty upload", status_code=400)
    row = UploadedImage(
        filename=file.filename or "",
        content_type=file.content_type or "application/octet-stream",
        size=len(content),
        content=content,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return {"url": str(request.url_for("get_image", image_id=row.id))}


@images_router.get("/upload/images/{image_id}", name="get_image")
def get_image(image_id: int, db: Session = Depends(get_db)):
    row = db.get(UploadedImage, image_id)
    if row is None:
        raise AppException("Image not found", status_code=404)
    return Response(content=row.content, media_type=row.content_type)


@router.post("/api/visitors/create")
def create_visitor(payload: VisitorCreateRequest, db: Session = Depends(get_db)):
    name = payload.name.strip()
    if not name:
        raise AppException("Name is required", status_code=400)
    visitor = Visitor(name=name, profile_image_url=payload.profile_image_url)
    db.add(visitor)
    db.commit()
    db.refresh(visitor)
    return {
        "status": "success",
        "visitor": {
            "id": visitor.id,
            "name": visitor.name,
            "profile_image_url": visitor.profile_image_url,
        },
    }
