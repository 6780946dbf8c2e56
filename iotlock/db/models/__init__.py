from iotlock.db.models.device import Device
from iotlock.db.models.notification import Notification, UploadedImage
from iotlock.db.models.stored_value import StoredValue
from iotlock.db.models.user import User
from iotlock.db.models.visit import RemoteVisitStatus, Visit, Visitor

__all__ = [
    "Device",
    "Notification",
    "RemoteVisitStatus",
    "StoredValue",
    "UploadedImage",
    "User",
    "Visit",
    "Visitor",
]
