from pydantic import BaseModel


class DeviceRegisterRequest(BaseModel):
    owner_id: int | str
    push_token: str
    platform: str = "android"


class DeviceUnregisterRequest(BaseModel):
    owner_id: int | str
    push_token: str
