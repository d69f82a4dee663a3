from fastapi import Depends, HTTPException, status

from bottin.auth.dependencies import get_current_user, get_optional_session


async def require_admin(session=Depends(get_optional_session)):
    if session is None or not session.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return session


def require_approved(detail: str = "Your account is pending approval"):
    def wrapper(user=Depends(get_current_user)):
        if not user.is_approved:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
        return user
    return wrapper


def is_owner_or_admin(session, owner_id) -> bool:
    return session.is_admin or (owner_id is not None and session.user_id == owner_id)
