from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from ..auth.dependencies import get_current_user
from ..context import AppContext, get_context
from ..infrastructure.images import UploadedImage
from ..observability.logging import get_logger
from ..settings import Settings

router = APIRouter(tags=["upload"])
log = get_logger("uploads")

ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})


async def _read_image(file: UploadFile, settings: Settings) -> bytes:
    content_type = (file.content_type or "").lower()
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=400, detail="Only JPEG, PNG, GIF, and WebP images are allowed"
        )

    limit = int(settings.upload_max_bytes)
    data = await file.read(limit + 1)
    if len(data) > limit:
        raise HTTPException(
            status_code=413, detail=f"File too large (max {limit // (1024 * 1024)} MB)"
        )
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    return data


async def _upload(ctx: AppContext, file: UploadFile, data: bytes) -> UploadedImage:
    return await ctx.images.upload(
        data,
        filename=file.filename or "upload",
        content_type=(file.content_type or "").lower(),
    )


@router.post("/image")
async def upload_image(
    image: UploadFile = File(...),
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    data = await _read_image(image, ctx.settings)
    uploaded = await _upload(ctx, image, data)
    return {"message": "Image uploaded successfully", **uploaded.to_dict()}


@router.post("/images")
async def upload_images(
    images: list[UploadFile] = File(...),
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    max_files = int(ctx.settings.upload_max_files)
    if len(images) > max_files:
        raise HTTPException(status_code=400, detail=f"Too many files (max {max_files})")

    payloads = [(f, await _read_image(f, ctx.settings)) for f in images]

    # One upload per file, concurrently; the first failure cancels the rest.
    try:
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(_upload(ctx, f, data)) for f, data in payloads]
    except ExceptionGroup as eg:
        log.warning("image_batch_upload_failed", files=len(payloads), errors=len(eg.exceptions))
        raise eg.exceptions[0] from eg

    return {
        "message": "Images uploaded successfully",
        "images": [t.result().to_dict() for t in tasks],
    }


@router.delete("/image/{public_id:path}")
async def delete_image(
    public_id: str,
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    result = await ctx.images.destroy(public_id)
    if result == "ok":
        return {"message": "Image deleted successfully"}
    if result == "not found":
        raise HTTPException(status_code=404, detail="Image not found")
    log.info("image_delete_rejected", public_id=public_id, result=result)
    raise HTTPException(status_code=400, detail="Failed to delete image")
