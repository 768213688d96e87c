from datetime import datetime

from pydantic import BaseModel


class SessionImageRead(BaseModel):
    id: int
    session_id: int
    storage_path: str
    url: str
    is_primary: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ImageUploadRead(BaseModel):
    filename: str
    image_id: int | None = None
    path: str | None = None
    url: str | None = None
    error: str | None = None


class ImageUploadResponse(BaseModel):
    uploads: list[ImageUploadRead]
    error_count: int
