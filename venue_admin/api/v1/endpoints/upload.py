"""
Media upload endpoint
"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile
import logging

from venue_admin.api.deps import get_storage
from venue_admin.config import settings
from venue_admin.core.exceptions import PayloadTooLargeError, ValidationError
from venue_admin.core.security import require_admin
from venue_admin.schemas.auth import SessionUser
from venue_admin.schemas.upload import StoredMedia
from venue_admin.services.storage_service import MediaStorage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=StoredMedia)
async def upload_media(
    file: Optional[UploadFile] = File(None),
    venue_id: Optional[str] = Form(None, alias="venueId"),
    storage: MediaStorage = Depends(get_storage),
    admin: SessionUser = Depends(require_admin)
) -> Any:
    """
    Upload an image. Without ``venueId`` it is stored under the temporary
    namespace and moved when the venue is created.
    """
    if file is None or not file.filename:
        raise ValidationError("No file provided")

    limit = settings.MAX_UPLOAD_SIZE_BYTES
    content = await file.read(limit + 1)
    if len(content) > limit:
        raise PayloadTooLargeError(limit)

    return await storage.upload(
        content,
        filename=file.filename,
        content_type=file.content_type,
        namespace=venue_id or None
    )
