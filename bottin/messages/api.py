from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from bottin.auth.dependencies import require_auth
from bottin.auth.models import User
from bottin.auth.permissions import require_approved
from bottin.auth.sessions import SessionRecord
from bottin.db.session import get_db
from bottin.messages import services
from bottin.messages.schemas import MessageCreate, MessageOut, UnreadCount

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.get("", response_model=List[MessageOut])
async def list_messages(
    session: SessionRecord = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await services.get_messages(db, session.user_id)


@router.get("/unread-count", response_model=UnreadCount)
async def unread_count(
    session: SessionRecord = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return {"count": await services.count_unread(db, session.user_id)}


@router.get("/conversation/{user1_id}/{user2_id}", response_model=List[MessageOut])
async def get_conversation(
    user1_id: int,
    user2_id: int,
    session: SessionRecord = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    # Seuls les deux participants peuvent lire la conversation
    if session.user_id not in (user1_id, user2_id):
        raise HTTPException(status_code=403, detail="Forbidden")
    return await services.get_conversation(db, user1_id, user2_id)


@router.get("/{user_id}", response_model=List[MessageOut])
async def get_conversation_with(
    user_id: int,
    session: SessionRecord = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await services.get_conversation(db, session.user_id, user_id)


@router.post("", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: MessageCreate,
    sender: User = Depends(require_approved("Only approved members can send messages")),
    db: AsyncSession = Depends(get_db),
):
    receiver = await db.get(User, payload.receiver_id)
    if not receiver or not receiver.is_approved:
        raise HTTPException(status_code=404, detail="Recipient not found")

    return await services.create_message(db, sender.id, receiver.id, payload.content)


@router.patch("/{message_id}/read", response_model=MessageOut)
async def mark_message_as_read(
    message_id: int,
    session: SessionRecord = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    message = await services.get_message(db, message_id)
    if not message:
        raise HTTPException(status_code=404, detail="Message not found")

    # Seul le destinataire peut marquer un message comme lu
    if message.receiver_id != session.user_id:
        raise HTTPException(status_code=403, detail="Forbidden")

    return await services.mark_as_read(db, message)
