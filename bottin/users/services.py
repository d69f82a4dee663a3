from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from bottin.auth.models import User

logger = logging.getLogger(__name__)

# Champs modifiables uniquement par un administrateur
ADMIN_ONLY_FIELDS = {"is_approved", "is_admin"}
REQUIRED_FIELDS = {"email", "first_name", "last_name", "is_approved", "is_admin"}


async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalars().first()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalars().first()


async def get_user_by_identifier(db: AsyncSession, identifier: str) -> Optional[User]:
    """Récupère un utilisateur par nom d'utilisateur ou email"""
    result = await db.execute(
        select(User).where(or_(User.username == identifier, User.email == identifier))
    )
    return result.scalars().first()


async def list_users(db: AsyncSession, is_approved: Optional[bool] = None) -> List[User]:
    query = select(User).order_by(User.created_at.desc(), User.id.desc())
    if is_approved is not None:
        query = query.where(User.is_approved == is_approved)
    result = await db.execute(query)
    return list(result.scalars().all())


def is_visible_to(user: User, session) -> bool:
    """Un profil non approuvé n'est visible que par son propriétaire ou un admin."""
    if user.is_approved:
        return True
    if session is None:
        return False
    return session.is_admin or session.user_id == user.id


async def update_user(db: AsyncSession, user: User, update_data: Dict[str, Any], as_admin: bool) -> User:
    """Met à jour un profil; les champs réservés aux admins sont ignorés sinon."""
    for field, value in update_data.items():
        if field in ADMIN_ONLY_FIELDS and not as_admin:
            logger.warning(f"Champ '{field}' ignoré pour user_id={user.id} (non admin)")
            continue
        if value is None and field in REQUIRED_FIELDS:
            continue
        setattr(user, field, value)

    await db.commit()
    logger.info(f"Profil mis à jour : user_id={user.id}, champs={sorted(update_data)}")
    return user


async def approve_user(db: AsyncSession, user: User) -> User:
    user.is_approved = True
    await db.commit()
    logger.info(f"Utilisateur approuvé : user_id={user.id}")
    return user
