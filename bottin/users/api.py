from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from bottin.auth.dependencies import get_optional_session, require_auth
from bottin.auth.models import User
from bottin.auth.schemas import UserOut
from bottin.auth.sessions import SessionRecord
from bottin.db.session import get_db
from bottin.users import services
from bottin.users.schemas import UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=List[UserOut])
async def list_users(
    approved: bool = Query(True, description="Approved users only (false requires admin)"),
    session: Optional[SessionRecord] = Depends(get_optional_session),
    db: AsyncSession = Depends(get_db),
):
    if not approved and (session is None or not session.is_admin):
        raise HTTPException(status_code=403, detail="Forbidden")
    return await services.list_users(db, is_approved=approved)


@router.get("/{user_id}", response_model=UserOut)
async def get_user(
    user_id: int,
    session: Optional[SessionRecord] = Depends(get_optional_session),
    db: AsyncSession = Depends(get_db),
):
    user = await db.get(User, user_id)
    if not user or not services.is_visible_to(user, session):
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.put("/{user_id}", response_model=UserOut)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    session: SessionRecord = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    # Un utilisateur ne modifie que son propre profil, sauf admin
    if session.user_id != user_id and not session.is_admin:
        raise HTTPException(status_code=403, detail="Forbidden")

    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    update_data = payload.model_dump(exclude_unset=True)

    new_email = update_data.get("email")
    if new_email and new_email != user.email:
        existing = await services.get_user_by_email(db, new_email)
        if existing and existing.id != user.id:
            raise HTTPException(status_code=400, detail="Email already exists")

    return await services.update_user(db, user, update_data, as_admin=session.is_admin)
