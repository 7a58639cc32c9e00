from datetime import datetime

from pydantic import Field

from app.models.common import CamelModel


class Session(CamelModel):
    """Profile of the signed-in user, as persisted for the current browser profile."""

    id: str
    email: str
    name: str
    institution: str = ""
    created_at: datetime


class Account(Session):
    """Persisted account entry. The password is kept in plaintext: this is a demo store."""

    password: str

    def to_session(self) -> Session:
        return Session.model_validate(self.model_dump(exclude={"password"}))


class RegisterRequest(CamelModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    institution: str = ""


class LoginRequest(CamelModel):
    email: str
    password: str


class AuthResponse(CamelModel):
    session: Session
    token: str
