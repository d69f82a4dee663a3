from typing import List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bottin.media.models import ProfileMedia

logger = logging.getLogger(__name__)


async def list_profile_media(db: AsyncSession, user_id: int) -> List[ProfileMedia]:
    result = await db.execute(
        select(ProfileMedia)
        .where(ProfileMedia.user_id == user_id)
        .order_by(ProfileMedia.created_at.desc(), ProfileMedia.id.desc())
    )
    return list(result.scalars().all())


async def create_profile_media(
    db: AsyncSession,
    user_id: int,
    title: str,
    media_type: str,
    url: str,
    description: Optional[str] = None,
) -> ProfileMedia:
    media = ProfileMedia(
        user_id=user_id,
        title=title,
        media_type=media_type,
        url=url,
        description=description,
    )
    db.add(media)
    await db.commit()
    logger.info(f"Média créé : id={media.id}, user_id={user_id}, type={media_type}")
    return media


async def delete_profile_media(db: AsyncSession, user_id: int, media_id: int) -> bool:
    """Supprime un média appartenant à user_id; False s'il n'existe pas."""
    media = await db.get(ProfileMedia, media_id)
    if not media or media.user_id != user_id:
        return False
    await db.delete(media)
    await db.commit()
    logger.info(f"Média supprimé : id={media_id}, user_id={user_id}")
    return True
