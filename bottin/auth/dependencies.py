from typing import Optional
import logging

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from bottin.auth.jwt_handler import decode_session_token
from bottin.auth.models import User
from bottin.auth.sessions import SessionRecord, SessionStore
from bottin.config import settings
from bottin.db.session import get_db

logger = logging.getLogger(__name__)


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


async def get_optional_session(
    request: Request,
    store: SessionStore = Depends(get_session_store),
) -> Optional[SessionRecord]:
    """
    Version non bloquante: retourne la session liée au cookie si elle est
    valide, sinon None.
    """
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None

    session_id = decode_session_token(token)
    if not session_id:
        return None

    return await store.get(session_id)


# 🔒 Session obligatoire
async def require_auth(
    session: Optional[SessionRecord] = Depends(get_optional_session),
) -> SessionRecord:
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return session


async def get_current_user(
    session: SessionRecord = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    🔐 Récupère l'utilisateur de la session courante.
    """
    user = await db.get(User, session.user_id)
    if not user:
        logger.warning(f"❌ Utilisateur de session introuvable : id={session.user_id}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user
