from pydantic import field_validator

from app.core.validation import looks_like_email
from app.models.common import CamelModel


class DeliveryAck(CamelModel):
    """Acknowledgment returned by the simulated export and email actions."""

    success: bool = True
    message: str
    download_url: str | None = None


class EmailRequest(CamelModel):
    email: str

    @field_validator("email")
    @classmethod
    def must_contain_at(cls, v: str) -> str:
        v = v.strip()
        if not looks_like_email(v):
            raise ValueError("Veuillez saisir une adresse email valide.")
        return v
