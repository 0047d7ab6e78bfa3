from pydantic import BaseModel
from uuid import UUID

from app.models import UserRole


class Actor(BaseModel):
    """
    Authenticated identity making a request.
    Supplied by the identity provider, never persisted by this service.
    """
    id: UUID
    role: UserRole

    model_config = {
        "frozen": True
    }

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
