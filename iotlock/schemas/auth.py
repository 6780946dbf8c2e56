from pydantic import BaseModel, EmailStr, field_validator


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    name: str
    email: EmailStr
    password: str


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str


class LoginResponse(BaseModel):
    user_id: str
    name: str
    email: str
    access_token: str
    token_type: str = "bearer"

    @field_validator("user_id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value) if value is not None else value


class User(BaseModel):
    """The signed-in account as kept in the local session."""

    id: str
    name: str
    email: str
    access_token: str

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value) if value is not None else value

    @property
    def owner_id(self) -> int | str:
        return int(self.id) if self.id.isdigit() else self.id

    @classmethod
    def from_login(cls, response: LoginResponse) -> "User":
        return cls(
            id=response.user_id,
            name=response.name,
            email=response.email,
            access_token=response.access_token,
        )
