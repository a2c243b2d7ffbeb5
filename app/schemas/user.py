from pydantic import BaseModel, ConfigDict

from app.core.constants import RoleEnum


class Principal(BaseModel):
    """Authenticated caller as supplied by the identity provider."""
    id: int
    role: RoleEnum


class UserSummary(BaseModel):
    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)
