import json

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from iotlock.db.models import Device, Notification, User, Visit
from iotlock.mock_api.deps import get_current_user, get_db, require_same_owner
from iotlock.schemas.visitor import VisitorDetectedRequest

router = APIRouter()


def _active_devices(db: Session, user_id: int) -> list[Device]:
    return db.query(Device).filter(Device.owner_id == user_id, Device.active.is_(True)).all()


def _notify(db: Session, user_id: int, kind: str, payload: dict) -> int:
    db.add(Notification(user_id=user_id, kind=kind, payload=json.dumps(payload)))
    return len(_active_devices(db, user_id))


@router.post("/notify/test/{user_id}")
def send_test_notification(user_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    require_same_owner(user_id, user)
    sent = _notify(db, user.id, "test", {"title": "Test notification", "body": "Hello from the server"})
    db.commit()
    return {"status": "success", "sent": sent}


@router.post("/notifications/raspberry-pi/visitor-detected")
def visitor_detected(
    payload: VisitorDetectedRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    require_same_owner(payload.owner_id, user)
    visit = Visit(
        owner_id=user.id,
        visitor_name=payload.visitor_name,
        image_url=payload.image_url,
        detected_label=payload.detected_label,
    )
    db.add(visit)
    db.flush()
    sent = _notify(
        db,
        user.id,
        "visitor.detected",
        {
            "visit_id": str(visit.id),
            "visitor_name": visit.visitor_name,
            "image_url": visit.image_url,
            "detected_label": visit.detected_label,
            "screen": "VisitorAlert",
        },
    )
    db.commit()
    return {"status": "success", "visit_id": visit.id, "notified_devices": sent}


@router.get("/notifications/status/{user_id}")
def notification_status(user_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    require_same_owner(user_id, user)
    devices = _active_devices(db, user.id)
    return {
        "notifications_enabled": bool(devices),
        "registered_devices": len(devices),
        "devices": [{"push_token": row.push_token, "platform": row.platform} for row in devices],
    }
