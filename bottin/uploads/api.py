from typing import Optional
import logging
import re
import uuid

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from bottin.auth.dependencies import require_auth
from bottin.auth.models import User
from bottin.auth.schemas import UserOut
from bottin.auth.sessions import SessionRecord
from bottin.config import settings
from bottin.db.session import get_db
from bottin.media import services as media_services
from bottin.media.models import MediaType
from bottin.media.schemas import ProfileMediaOut
from bottin.uploads.storage import StorageBackend, StorageError, placeholder_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/upload", tags=["uploads"])

MB = 1024 * 1024
IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
IMAGE_MAX_SIZE = 5 * MB

# Types MIME et tailles maximales par type de média
MEDIA_RULES = {
    MediaType.IMAGE: (IMAGE_TYPES, 5 * MB),
    MediaType.VIDEO: ({"video/mp4", "video/quicktime", "video/x-msvideo"}, 50 * MB),
    MediaType.AUDIO: ({"audio/mpeg", "audio/wav", "audio/ogg"}, 10 * MB),
}


def get_storage(request: Request) -> StorageBackend:
    return request.app.state.storage


def pick_file(file: Optional[UploadFile], image: Optional[UploadFile]) -> UploadFile:
    # 'file' (nouveau client) ou 'image' (ancien client)
    upload = file or image
    if upload is None or not upload.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    return upload


def file_extension(filename: str) -> str:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return ext if re.fullmatch(r"[a-z0-9]{1,8}", ext) else "bin"


async def read_validated(upload: UploadFile, allowed_types: set, max_size: int) -> bytes:
    if upload.content_type not in allowed_types:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type. Accepted types: {', '.join(sorted(allowed_types))}",
        )

    content = await upload.read()
    if len(content) > max_size:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {max_size // MB}MB",
        )
    return content


async def store_file(storage: StorageBackend, file_path: str, content: bytes, content_type: str) -> str:
    try:
        return await storage.upload(file_path, content, content_type)
    except StorageError as e:
        if settings.ALLOW_FALLBACK_STORAGE:
            url = placeholder_url(file_path)
            logger.warning(f"Stockage indisponible ({e}), URL de remplacement : {url}")
            return url
        logger.error(f"Stockage indisponible pour {file_path} : {e}")
        raise HTTPException(status_code=500, detail="Storage service unavailable")


@router.post("/profile-image")
async def upload_profile_image(
    file: Optional[UploadFile] = File(None),
    image: Optional[UploadFile] = File(None),
    user_id: Optional[int] = Query(None, alias="userId"),
    session: SessionRecord = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
):
    upload = pick_file(file, image)

    # Modifier l'image d'un autre utilisateur: admin uniquement
    target_user_id = user_id or session.user_id
    if target_user_id != session.user_id and not session.is_admin:
        raise HTTPException(status_code=403, detail="Forbidden")

    user = await db.get(User, target_user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    content = await read_validated(upload, IMAGE_TYPES, IMAGE_MAX_SIZE)
    file_path = f"profile-images/{user.id}-{uuid.uuid4()}.{file_extension(upload.filename)}"
    url = await store_file(storage, file_path, content, upload.content_type)

    user.profile_image = url
    await db.commit()

    logger.info(f"Image de profil mise à jour : user_id={user.id}")
    return {"url": url, "user": UserOut.model_validate(user).model_dump(by_alias=True, mode="json")}


@router.post("/media", response_model=ProfileMediaOut, status_code=status.HTTP_201_CREATED)
async def upload_media(
    title: str = Form(..., min_length=1),
    media_type: MediaType = Form(..., alias="mediaType"),
    description: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    session: SessionRecord = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
):
    upload = pick_file(file, None)

    allowed_types, max_size = MEDIA_RULES[media_type]
    content = await read_validated(upload, allowed_types, max_size)

    file_path = f"{media_type.value}s/{session.user_id}-{uuid.uuid4()}.{file_extension(upload.filename)}"
    url = await store_file(storage, file_path, content, upload.content_type)

    return await media_services.create_profile_media(
        db,
        user_id=session.user_id,
        title=title,
        media_type=media_type.value,
        url=url,
        description=description or "",
    )


@router.post("/event-image")
async def upload_event_image(
    file: Optional[UploadFile] = File(None),
    image: Optional[UploadFile] = File(None),
    session: SessionRecord = Depends(require_auth),
    storage: StorageBackend = Depends(get_storage),
):
    upload = pick_file(file, image)
    content = await read_validated(upload, IMAGE_TYPES, IMAGE_MAX_SIZE)

    file_path = f"events/event-{uuid.uuid4()}.{file_extension(upload.filename)}"
    return {"url": await store_file(storage, file_path, content, upload.content_type)}


@router.post("/troc-image")
async def upload_troc_image(
    file: Optional[UploadFile] = File(None),
    image: Optional[UploadFile] = File(None),
    session: SessionRecord = Depends(require_auth),
    storage: StorageBackend = Depends(get_storage),
):
    upload = pick_file(file, image)
    content = await read_validated(upload, IMAGE_TYPES, IMAGE_MAX_SIZE)

    file_path = f"troc-ads/troc-{uuid.uuid4()}.{file_extension(upload.filename)}"
    return {"url": await store_file(storage, file_path, content, upload.content_type)}
