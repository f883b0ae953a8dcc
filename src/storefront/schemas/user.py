"""Identity schemas for users resolved from identity provider tokens."""

from typing import Literal

from storefront.schemas.base import APIModel

ADMIN_ROLE = "admin"


class Identity(APIModel):
    """Current user as supplied by the identity provider."""

    user_id: str
    email: str | None = None
    role: str = "customer"

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


class MeResponse(APIModel):
    """Schema for the current user and which storefront view to render."""

    user: Identity
    view: Literal["admin", "shopper"]
