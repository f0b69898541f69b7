"""Upload endpoints: /uploads/*."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from forum.auth.dependencies import get_current_user_id
from forum.config import get_settings
from forum.responses import Envelope
from forum.storage.s3 import BaseStorageProvider, get_storage, upload_key

router = APIRouter(prefix="/uploads", tags=["Uploads"])


class PresignResponse(BaseModel):
    upload_url: str
    key: str
    expires_at: datetime


@router.post("/presign", response_model=Envelope[PresignResponse])
async def presign_upload(
    file_name: str = Query(""),
    user_id: int = Depends(get_current_user_id),
    storage: BaseStorageProvider = Depends(get_storage),
) -> Envelope[PresignResponse]:
    """Issue a presigned PUT URL for ``{user_id}/{file_name}``."""
    key = upload_key(user_id, file_name)
    expires_in = get_settings().s3_presign_expiry_seconds
    url = await storage.create_presigned_upload_url(key, expires_in)
    return Envelope(
        data=PresignResponse(
            upload_url=url,
            key=key,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=expires_in),
        )
    )
