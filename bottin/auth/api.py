import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bottin.auth import jwt_handler, password
from bottin.auth.dependencies import get_optional_session, get_session_store
from bottin.auth.models import User
from bottin.auth.schemas import (
    MessageResponse,
    PasswordReset,
    PasswordResetRequest,
    UserLogin,
    UserOut,
    UserRegister,
)
from bottin.auth.sessions import SessionRecord, SessionStore
from bottin.config import settings
from bottin.db.session import get_db
from bottin.users import services as user_services
from bottin.utils.avatar import default_profile_image_url
from bottin.utils.email import send_password_reset_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])

RESET_REQUESTED_MESSAGE = "If this email exists, a reset link will be sent"


def set_session_cookie(response: Response, session: SessionRecord) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=jwt_handler.create_session_token(session.id),
        max_age=settings.SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")


@router.get("/health-check/session")
async def session_health_check(request: Request):
    return {
        "cookie": {"secure": settings.COOKIE_SECURE, "sameSite": "lax"},
        "env": settings.APP_ENV,
        "sessionBackend": type(request.app.state.session_store).__name__,
    }


@router.post("/auth/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def register(user: UserRegister, db: AsyncSession = Depends(get_db)):
    if await user_services.get_user_by_username(db, user.username):
        raise HTTPException(status_code=400, detail="Username already exists")

    if await user_services.get_user_by_email(db, user.email):
        raise HTTPException(status_code=400, detail="Email already exists")

    new_user = User(
        username=user.username,
        email=user.email,
        password=password.hash_password(user.password),
        first_name=user.first_name,
        last_name=user.last_name,
        bio=user.bio,
        discipline=user.discipline,
        location=user.location,
        website=user.website,
        social_media=user.social_media.model_dump(exclude_none=True) if user.social_media else None,
        cv=user.cv,
        profile_image=default_profile_image_url(user.default_profile_image),
        is_approved=False,
        is_admin=False,
    )
    db.add(new_user)
    try:
        await db.commit()
    except IntegrityError:
        # Inscription concurrente avec le même username ou email
        await db.rollback()
        taken = await db.scalar(select(User.id).where(User.username == user.username))
        logger.warning(f"Inscription en conflit pour '{user.username}'")
        raise HTTPException(
            status_code=400, detail="Username already exists" if taken else "Email already exists"
        )

    logger.info(f"Utilisateur enregistré : id={new_user.id}, username={new_user.username}")
    return new_user


@router.post("/auth/login", response_model=UserOut)
async def login(
    credentials: UserLogin,
    response: Response,
    db: AsyncSession = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    db_user = await user_services.get_user_by_identifier(db, credentials.username.strip())
    if not db_user or not password.verify_password(credentials.password, db_user.password):
        logger.warning(f"Échec de connexion pour '{credentials.username}'")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not db_user.is_approved:
        raise HTTPException(status_code=403, detail="Your account is pending approval")

    session = await store.create(db_user.id, bool(db_user.is_admin))
    set_session_cookie(response, session)

    logger.info(f"✅ Connexion : user_id={db_user.id}")
    return db_user


@router.post("/auth/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    session: Optional[SessionRecord] = Depends(get_optional_session),
    store: SessionStore = Depends(get_session_store),
):
    if session is not None:
        await store.destroy(session.id)
    clear_session_cookie(response)
    return {"message": "Logout successful"}


@router.get("/auth/me", response_model=UserOut)
async def get_me(
    response: Response,
    session: Optional[SessionRecord] = Depends(get_optional_session),
    store: SessionStore = Depends(get_session_store),
    db: AsyncSession = Depends(get_db),
):
    if session is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    db_user = await db.get(User, session.user_id)
    if not db_user:
        await store.destroy(session.id)
        raise HTTPException(
            status_code=401,
            detail="User not found",
            headers={"set-cookie": f"{settings.SESSION_COOKIE_NAME}=; Max-Age=0; Path=/"},
        )

    return db_user


@router.post("/auth/password-reset-request", response_model=MessageResponse)
async def password_reset_request(data: PasswordResetRequest, db: AsyncSession = Depends(get_db)):
    db_user = await user_services.get_user_by_email(db, data.email)
    if not db_user:
        # Ne pas révéler si l'email existe
        return {"message": RESET_REQUESTED_MESSAGE}

    token = jwt_handler.create_password_reset_token(
        db_user.id, password.password_fingerprint(db_user.password)
    )

    try:
        await send_password_reset_email(db_user.email, db_user.first_name, token)
    except Exception:
        logger.exception(f"Échec de l'envoi de l'email de réinitialisation (user_id={db_user.id})")

    return {"message": RESET_REQUESTED_MESSAGE}


@router.post("/auth/password-reset", response_model=MessageResponse)
async def password_reset(data: PasswordReset, db: AsyncSession = Depends(get_db)):
    payload = jwt_handler.decode_password_reset_token(data.token)
    if not payload:
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")

    db_user = await db.get(User, user_id)
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")

    # Token déjà utilisé: le hash a changé depuis son émission
    if payload.get("fp") != password.password_fingerprint(db_user.password):
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")

    db_user.password = password.hash_password(data.new_password)
    await db.commit()

    logger.info(f"Mot de passe réinitialisé : user_id={db_user.id}")
    return {"message": "Password reset successfully"}
