from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import DBAPIError, StatementError
from sqlalchemy.ext.asyncio import AsyncSession

from bottin.admin import services
from bottin.admin.schemas import Analytics, SchemaStatus, SqlQuery, SqlResult
from bottin.auth.models import User
from bottin.auth.permissions import require_admin
from bottin.auth.schemas import UserOut
from bottin.auth.sessions import SessionRecord
from bottin.db import migrations
from bottin.db.session import engine, get_db
from bottin.users import services as user_services
from bottin.utils.email import send_approval_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/pending-users", response_model=List[UserOut])
async def pending_users(db: AsyncSession = Depends(get_db)):
    return await user_services.list_users(db, is_approved=False)


@router.patch("/users/{user_id}/approve", response_model=UserOut)
async def approve_user(
    user_id: int,
    session: SessionRecord = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    user = await user_services.approve_user(db, user)
    logger.info(f"Utilisateur {user.full_name} (id={user.id}) approuvé par l'admin {session.user_id}")

    try:
        await send_approval_email(user.email, user.first_name, user.last_name)
    except Exception:
        logger.exception(f"Échec de l'envoi de l'email d'approbation (user_id={user.id})")

    return user


@router.get("/analytics", response_model=Analytics)
async def analytics(db: AsyncSession = Depends(get_db)):
    return await services.get_analytics(db)


@router.post("/sql", response_model=SqlResult)
async def execute_sql(
    payload: SqlQuery,
    session: SessionRecord = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        result = await services.run_read_only_query(db, payload.query, payload.params)
    except services.UnsafeQueryError as e:
        logger.warning(f"Requête SQL refusée pour l'admin {session.user_id} : {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except (DBAPIError, StatementError) as e:
        raise HTTPException(status_code=400, detail=f"Query failed: {getattr(e, 'orig', e)}")

    return jsonable_encoder(result)


@router.get("/schema", response_model=SchemaStatus)
async def schema():
    return await migrations.schema_status(engine)


@router.post("/schema/upgrade", response_model=SchemaStatus)
async def schema_upgrade(session: SessionRecord = Depends(require_admin)):
    logger.info(f"Mise à jour du schéma demandée par l'admin {session.user_id}")
    await migrations.upgrade_to_head()
    return await migrations.schema_status(engine)
