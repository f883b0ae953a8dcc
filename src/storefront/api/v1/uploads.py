"""Image upload endpoint for the admin dashboard."""

from fastapi import APIRouter, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from storefront.api.deps import AdminUser, ImageStorageDep
from storefront.schemas.admin import UploadResponse

router = APIRouter()


@router.post("/images", response_model=UploadResponse)
async def upload_images(
    storage: ImageStorageDep,
    admin: AdminUser,
    files: list[UploadFile] = File(...),
):
    """Store product images and return their URLs in upload order."""
    urls = []
    for file in files:
        # One byte past the limit is enough for storage to reject it
        content = await file.read(storage.max_bytes + 1)
        urls.append(await run_in_threadpool(storage.save, file.filename or "", content))
    return UploadResponse(urls=urls)
