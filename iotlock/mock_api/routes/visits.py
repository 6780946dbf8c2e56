from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from iotlock.core.exceptions import AppException
from iotlock.db.models import RemoteVisitStatus, User, Visit
from iotlock.mock_api.deps import get_current_user, get_db, require_same_owner

router = APIRouter()


def serialize_visit(row: Visit) -> dict:
    return {
        "id": row.id,
        "owner_id": row.owner_id,
        "visitor_id": row.visitor_id,
        "visitor_name": row.visitor_name,
        "profile_image_url": row.profile_image_url,
        "image_url": row.image_url,
        "detected_label": row.detected_label,
        "status": row.status,
        "timestamp": row.timestamp.isoformat() if row.timestamp else None,
    }


def _decide(db: Session, user: User, visit_id: int, new_status: RemoteVisitStatus) -> dict:
    row = db.query(Visit).filter(Visit.id == visit_id, Visit.owner_id == user.id).first()
    if not row:
        raise AppException("Visit not found", status_code=404)
    if row.status != RemoteVisitStatus.pending.value:
        raise AppException(f"Visit already {row.status}", status_code=409)
    row.status = new_status.value
    db.commit()
    db.refresh(row)
    return {"status": "success", "visit": serialize_visit(row)}


@router.get("/{user_id}")
def list_visits(
    user_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    require_same_owner(user_id, user)
    query = db.query(Visit).filter(Visit.owner_id == user.id)
    total = query.count()
    rows = (
        query.order_by(Visit.timestamp.desc(), Visit.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "visits": [serialize_visit(row) for row in rows],
        "total_visits": total,
        "page": page,
        "limit": limit,
    }


@router.post("/approve/{visit_id}")
def approve_visit(visit_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return _decide(db, user, visit_id, RemoteVisitStatus.granted)


@router.post("/deny/{visit_id}")
def deny_visit(visit_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return _decide(db, user, visit_id, RemoteVisitStatus.denied)
