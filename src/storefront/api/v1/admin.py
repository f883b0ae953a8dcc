"""Admin dashboard product management endpoints."""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Query

from storefront.api.deps import AdminUser, AdminWorkflowDep
from storefront.schemas.admin import AdminResult
from storefront.services.admin_service import AdminResult as WorkflowResult

router = APIRouter()


def _to_response(result: WorkflowResult) -> AdminResult:
    return AdminResult(
        message=result.message,
        product=result.product,
        data=result.items,
        pagination=result.pagination,
    )


@router.post("/products", response_model=AdminResult)
async def submit_product_form(
    workflow: AdminWorkflowDep,
    admin: AdminUser,
    form: dict[str, Any] = Body(...),
    page: int = Query(1, ge=1),
):
    """Create or update a product from the dashboard form and refresh the list."""
    return _to_response(await workflow.submit(form, page=page))


@router.delete("/products/{product_id}", response_model=AdminResult)
async def remove_product(
    product_id: UUID,
    workflow: AdminWorkflowDep,
    admin: AdminUser,
    page: int = Query(1, ge=1),
):
    """Delete a product and refresh the list."""
    return _to_response(await workflow.remove(product_id, page=page))


@router.post("/products/{product_id}/toggle-active", response_model=AdminResult)
async def toggle_product_active(
    product_id: UUID,
    workflow: AdminWorkflowDep,
    admin: AdminUser,
    page: int = Query(1, ge=1),
):
    """Activate or deactivate a product and refresh the list."""
    return _to_response(await workflow.toggle_active(product_id, page=page))
