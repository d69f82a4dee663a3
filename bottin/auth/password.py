import hashlib
import hmac

from passlib.context import CryptContext

from bottin.config import settings

# bcrypt pour hacher et vérifier les mots de passe
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Hash inconnu (ex: ancien mot de passe en clair): jamais accepté
        return False


def password_fingerprint(hashed_password: str) -> str:
    """
    Empreinte du hash, invalidée dès que le mot de passe change. HMAC avec
    SESSION_SECRET: aucun fragment du hash ne sort du serveur.
    """
    digest = hmac.new(settings.SESSION_SECRET.encode(), hashed_password.encode(), hashlib.sha256)
    return digest.hexdigest()[:32]
