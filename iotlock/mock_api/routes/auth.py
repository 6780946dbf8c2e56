from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from iotlock.core.config import Settings
from iotlock.core.exceptions import AppException
from iotlock.core.security import create_access_token, hash_password, verify_password
from iotlock.db.models import User
from iotlock.mock_api.deps import get_current_user, get_db, get_settings_dep
from iotlock.schemas.auth import ChangePasswordRequest, LoginRequest, LoginResponse, RegisterRequest

router = APIRouter()


@router.post("/register")
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise AppException("Email already registered", status_code=400)

    user = User(
        name=payload.name.strip(),
        email=email,
        password_hash=hash_password(payload.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return {"message": "User registered successfully", "user_id": user.id}


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    email = (payload.email or "").strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if not user or not user.is_active or not verify_password(payload.password, user.password_hash):
        raise AppException("Invalid email or password", status_code=401)
    return LoginResponse(
        user_id=str(user.id),
        name=user.name,
        email=user.email,
        access_token=create_access_token(str(user.id), settings=settings),
    )


@router.post("/change-password")
def change_password(
    payload: ChangePasswordRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if not verify_password(payload.old_password, user.password_hash):
        raise AppException("Current password is incorrect", status_code=400)
    user.password_hash = hash_password(payload.new_password)
    db.commit()
    return {"message": "Password changed successfully"}
