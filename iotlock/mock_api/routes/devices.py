import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from iotlock.db.models import Device, User
from iotlock.mock_api.deps import get_current_user, get_db, require_same_owner
from iotlock.schemas.device import DeviceRegisterRequest, DeviceUnregisterRequest

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/device/register")
def register_device(
    payload: DeviceRegisterRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    require_same_owner(payload.owner_id, user)
    device = db.query(Device).filter(Device.push_token == payload.push_token).first()
    if device:
        device.owner_id = user.id
        device.platform = payload.platform
        device.active = True
        device.revoked_at = None
    else:
        device = Device(owner_id=user.id, push_token=payload.push_token, platform=payload.platform)
        db.add(device)
    db.commit()
    db.refresh(device)
    logger.info("device.register owner_id=%s device_id=%s platform=%s", user.id, device.id, device.platform)
    return {"status": "success", "device_id": device.id}


@router.post("/devices/unregister")
def unregister_device(
    payload: DeviceUnregisterRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    require_same_owner(payload.owner_id, user)
    rows = (
        db.query(Device)
        .filter(Device.owner_id == user.id, Device.push_token == payload.push_token, Device.active.is_(True))
        .all()
    )
    now = datetime.utcnow()
    for row in rows:
        row.active = False
        row.revoked_at = now
    db.commit()
    return {"status": "success", "unregistered": len(rows)}
