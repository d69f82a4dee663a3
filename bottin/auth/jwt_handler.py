from datetime import datetime, timedelta
from typing import Optional
import logging

from jose import jwt, JWTError

from bottin.config import settings

logger = logging.getLogger(__name__)

SESSION_PURPOSE = "session"
PASSWORD_RESET_PURPOSE = "password_reset"


def create_token(data: dict, expires_delta: timedelta) -> str:
    """
    Crée un token JWT signé avec SESSION_SECRET.

    :param data: Dictionnaire avec les données à encoder (ex: {"sid": "..."})
    :param expires_delta: Durée de validité du token
    :return: Token JWT encodé
    """
    to_encode = data.copy()
    to_encode["exp"] = datetime.utcnow() + expires_delta
    return jwt.encode(to_encode, settings.SESSION_SECRET, algorithm=settings.ALGORITHM)


def decode_token(token: str, purpose: str) -> Optional[dict]:
    """
    Décode et vérifie un token JWT.

    Retourne le payload si la signature, l'expiration et l'usage ("purpose")
    sont valides, sinon None.
    """
    try:
        payload = jwt.decode(token, settings.SESSION_SECRET, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning(f"Échec de décodage du token ({purpose}) : {e}")
        return None

    if payload.get("purpose") != purpose:
        logger.warning(f"Token utilisé pour un autre usage que '{purpose}'")
        return None
    return payload


def create_session_token(session_id: str) -> str:
    return create_token(
        {"sid": session_id, "purpose": SESSION_PURPOSE},
        timedelta(days=settings.SESSION_MAX_AGE_DAYS),
    )


def decode_session_token(token: str) -> Optional[str]:
    payload = decode_token(token, SESSION_PURPOSE)
    if not payload:
        return None
    return payload.get("sid")


def create_password_reset_token(user_id: int, fingerprint: str) -> str:
    return create_token(
        {"sub": str(user_id), "fp": fingerprint, "purpose": PASSWORD_RESET_PURPOSE},
        timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES),
    )


def decode_password_reset_token(token: str) -> Optional[dict]:
    payload = decode_token(token, PASSWORD_RESET_PURPOSE)
    if not payload or not payload.get("sub"):
        return None
    return payload
