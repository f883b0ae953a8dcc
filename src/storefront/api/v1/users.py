"""Current user endpoint."""

from fastapi import APIRouter

from storefront.api.deps import CurrentUser
from storefront.schemas.user import MeResponse

router = APIRouter()


@router.get("/me", response_model=MeResponse)
async def get_me(current_user: CurrentUser):
    """Get the current user and which storefront view to render."""
    return MeResponse(
        user=current_user,
        view="admin" if current_user.is_admin else "shopper",
    )
