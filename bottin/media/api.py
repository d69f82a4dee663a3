from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from bottin.auth.dependencies import get_optional_session, require_auth
from bottin.auth.models import User
from bottin.auth.permissions import is_owner_or_admin
from bottin.auth.sessions import SessionRecord
from bottin.db.session import get_db
from bottin.media import services
from bottin.media.schemas import ProfileMediaCreate, ProfileMediaOut
from bottin.users.services import is_visible_to

router = APIRouter(prefix="/api/users/{user_id}/media", tags=["media"])


@router.get("", response_model=List[ProfileMediaOut])
async def list_media(
    user_id: int,
    session: Optional[SessionRecord] = Depends(get_optional_session),
    db: AsyncSession = Depends(get_db),
):
    user = await db.get(User, user_id)
    if not user or not is_visible_to(user, session):
        raise HTTPException(status_code=404, detail="User not found")
    return await services.list_profile_media(db, user_id)


@router.post("", response_model=ProfileMediaOut, status_code=status.HTTP_201_CREATED)
async def create_media(
    user_id: int,
    payload: ProfileMediaCreate,
    session: SessionRecord = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    if not is_owner_or_admin(session, user_id):
        raise HTTPException(status_code=403, detail="Forbidden")

    if not await db.get(User, user_id):
        raise HTTPException(status_code=404, detail="User not found")

    return await services.create_profile_media(
        db,
        user_id=user_id,
        title=payload.title,
        media_type=payload.media_type.value,
        url=payload.url,
        description=payload.description,
    )


@router.delete("/{media_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_media(
    user_id: int,
    media_id: int,
    session: SessionRecord = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    if not is_owner_or_admin(session, user_id):
        raise HTTPException(status_code=403, detail="Forbidden")

    if not await services.delete_profile_media(db, user_id, media_id):
        raise HTTPException(status_code=404, detail="Media not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
