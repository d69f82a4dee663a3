from typing import List, Optional
import logging

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from bottin.messages.models import Message

logger = logging.getLogger(__name__)


async def get_message(db: AsyncSession, message_id: int) -> Optional[Message]:
    return await db.get(Message, message_id)


async def get_messages(db: AsyncSession, user_id: int) -> List[Message]:
    """Tous les messages envoyés ou reçus, du plus récent au plus ancien"""
    result = await db.execute(
        select(Message)
        .where(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
        .order_by(Message.created_at.desc(), Message.id.desc())
    )
    return list(result.scalars().all())


async def get_conversation(db: AsyncSession, user1_id: int, user2_id: int) -> List[Message]:
    """Messages échangés dans les deux sens, par ordre chronologique"""
    result = await db.execute(
        select(Message)
        .where(
            or_(
                and_(Message.sender_id == user1_id, Message.receiver_id == user2_id),
                and_(Message.sender_id == user2_id, Message.receiver_id == user1_id),
            )
        )
        .order_by(Message.created_at.asc(), Message.id.asc())
    )
    return list(result.scalars().all())


async def count_unread(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(func.count(Message.id)).where(
            Message.receiver_id == user_id,
            Message.is_read.is_(False),
        )
    )
    return result.scalar_one()


async def create_message(db: AsyncSession, sender_id: int, receiver_id: int, content: str) -> Message:
    message = Message(sender_id=sender_id, receiver_id=receiver_id, content=content, is_read=False)
    db.add(message)
    await db.commit()
    logger.info(f"Message envoyé : id={message.id}, {sender_id} -> {receiver_id}")
    return message


async def mark_as_read(db: AsyncSession, message: Message) -> Message:
    message.is_read = True
    await db.commit()
    return message
