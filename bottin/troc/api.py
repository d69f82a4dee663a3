from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from bottin.auth.dependencies import require_auth
from bottin.auth.sessions import SessionRecord
from bottin.db.session import get_db
from bottin.troc.schemas import TrocAdCreate, TrocAdOut, TrocAdUpdate
from bottin.troc.services import (
    InvalidAssigneeError,
    TrocAdNotFoundError,
    TrocApprovalError,
    TrocPermissionError,
    TrocService,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/troc", tags=["troc"])


@router.get("", response_model=List[TrocAdOut])
async def list_ads(
    category: Optional[str] = Query(None, description="Filter by category"),
    user_id: Optional[int] = Query(None, alias="userId", description="Filter by owner"),
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of ads"),
    db: AsyncSession = Depends(get_db),
):
    return await TrocService(db).list_ads(category=category, user_id=user_id, limit=limit)


@router.get("/{ad_id}", response_model=TrocAdOut)
async def get_ad(ad_id: int, db: AsyncSession = Depends(get_db)):
    try:
        return await TrocService(db).get_ad(ad_id)
    except TrocAdNotFoundError:
        raise HTTPException(status_code=404, detail="Ad not found")


@router.post("", response_model=TrocAdOut, status_code=status.HTTP_201_CREATED)
async def create_ad(
    ad_data: TrocAdCreate,
    session: SessionRecord = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await TrocService(db).create_ad(ad_data, session)
    except TrocApprovalError:
        raise HTTPException(status_code=403, detail="Only approved artists can create ads")
    except TrocPermissionError as e:
        logger.warning(f"Création d'annonce refusée pour user_id={session.user_id} : {e}")
        raise HTTPException(status_code=403, detail="Forbidden")
    except InvalidAssigneeError:
        raise HTTPException(status_code=400, detail="Assigned user must be an approved artist")


@router.put("/{ad_id}", response_model=TrocAdOut)
async def update_ad(
    ad_id: int,
    ad_data: TrocAdUpdate,
    session: SessionRecord = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await TrocService(db).update_ad(ad_id, ad_data, session)
    except TrocAdNotFoundError:
        raise HTTPException(status_code=404, detail="Ad not found")
    except TrocPermissionError as e:
        logger.warning(f"Modification de l'annonce {ad_id} refusée pour user_id={session.user_id} : {e}")
        raise HTTPException(status_code=403, detail="Forbidden")
    except InvalidAssigneeError:
        raise HTTPException(status_code=400, detail="Assigned user must be an approved artist")


@router.delete("/{ad_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ad(
    ad_id: int,
    session: SessionRecord = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    try:
        await TrocService(db).delete_ad(ad_id, session)
    except TrocAdNotFoundError:
        raise HTTPException(status_code=404, detail="Ad not found")
    except TrocPermissionError as e:
        logger.warning(f"Suppression de l'annonce {ad_id} refusée pour user_id={session.user_id} : {e}")
        raise HTTPException(status_code=403, detail="Forbidden")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
