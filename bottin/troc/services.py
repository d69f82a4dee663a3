import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bottin.auth.models import User
from bottin.auth.permissions import is_owner_or_admin
from bottin.auth.sessions import SessionRecord
from bottin.troc.images import append_image_urls, remove_image_urls
from bottin.troc.models import TrocAd
from bottin.troc.schemas import TrocAdCreate, TrocAdUpdate

logger = logging.getLogger(__name__)


class TrocAdNotFoundError(Exception):
    pass


class TrocPermissionError(Exception):
    pass


class TrocApprovalError(TrocPermissionError):
    pass


class InvalidAssigneeError(Exception):
    pass


class TrocService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_ads(
        self,
        category: Optional[str] = None,
        user_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[TrocAd]:
        query = select(TrocAd).order_by(TrocAd.created_at.desc(), TrocAd.id.desc())
        if category:
            query = query.where(TrocAd.category == category)
        if user_id is not None:
            query = query.where(TrocAd.user_id == user_id)
        if limit:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_ad(self, ad_id: int) -> TrocAd:
        ad = await self.db.get(TrocAd, ad_id)
        if not ad:
            raise TrocAdNotFoundError(ad_id)
        return ad

    async def create_ad(self, ad_data: TrocAdCreate, actor: SessionRecord) -> TrocAd:
        author = await self.db.get(User, actor.user_id)
        if not author or not author.is_approved:
            raise TrocApprovalError("Only approved artists can create ads")

        owner_id = await self._resolve_owner(ad_data.assigned_user_id, actor, current_owner_id=actor.user_id)

        ad = TrocAd(
            title=ad_data.title,
            description=ad_data.description,
            category=ad_data.category.value,
            user_id=owner_id,
            image_urls=ad_data.requested_images() or [],
        )
        self.db.add(ad)
        await self.db.commit()

        logger.info(f"Ad created: id={ad.id}, user_id={owner_id}, by user_id={actor.user_id}, images={len(ad.image_urls)}")
        return ad

    async def update_ad(self, ad_id: int, ad_data: TrocAdUpdate, actor: SessionRecord) -> TrocAd:
        ad = await self.get_ad(ad_id)

        # Seul le créateur ou un admin peut modifier une annonce
        if not is_owner_or_admin(actor, ad.user_id):
            raise TrocPermissionError("Only the owner or an admin can update this ad")

        # Attribution vérifiée avant toute modification
        owner_id = await self._resolve_owner(ad_data.assigned_user_id, actor, current_owner_id=ad.user_id)

        if ad_data.title is not None:
            ad.title = ad_data.title
        if ad_data.description is not None:
            ad.description = ad_data.description
        if ad_data.category is not None:
            ad.category = ad_data.category.value

        images = list(ad.image_urls or [])
        replacement = ad_data.requested_images()
        if replacement is not None:
            images = replacement
        if ad_data.append_image_urls:
            images = append_image_urls(images, ad_data.append_image_urls)
        if ad_data.remove_image_urls:
            images = remove_image_urls(images, ad_data.remove_image_urls)
        # Nouvelle liste pour que le changement de la colonne JSON soit détecté
        ad.image_urls = images

        ad.user_id = owner_id

        await self.db.commit()
        logger.info(f"Ad updated: id={ad.id} by user_id={actor.user_id}")
        return ad

    async def delete_ad(self, ad_id: int, actor: SessionRecord) -> None:
        ad = await self.get_ad(ad_id)

        if not is_owner_or_admin(actor, ad.user_id):
            raise TrocPermissionError("Only the owner or an admin can delete this ad")

        await self.db.delete(ad)
        await self.db.commit()
        logger.info(f"Ad deleted: id={ad_id} by user_id={actor.user_id}")

    async def _resolve_owner(self, assigned_user_id: Optional[int], actor: SessionRecord, current_owner_id: int) -> int:
        """
        Propriétaire effectif d'une annonce. Un admin peut attribuer l'annonce
        à un autre artiste approuvé; les autres utilisateurs ne le peuvent pas.
        """
        if assigned_user_id is None or assigned_user_id == current_owner_id:
            return current_owner_id

        if not actor.is_admin:
            raise TrocPermissionError("Only admins can assign ads to other users")

        assignee = await self.db.get(User, assigned_user_id)
        if not assignee or not assignee.is_approved:
            raise InvalidAssigneeError(f"User {assigned_user_id} is not an approved artist")
        return assignee.id
