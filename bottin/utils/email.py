import logging
from email.message import EmailMessage

import aiosmtplib

from bottin.config import settings

logger = logging.getLogger(__name__)


async def send_email_async(subject: str, email_to: str, body: str) -> bool:
    if not settings.MAIL_SERVER:
        logger.info(f"MAIL_SERVER non configuré, email '{subject}' non envoyé à {email_to}")
        return False

    message = EmailMessage()
    message["From"] = settings.MAIL_FROM
    message["To"] = email_to
    message["Subject"] = subject
    message.set_content(body)

    await aiosmtplib.send(
        message,
        hostname=settings.MAIL_SERVER,
        port=settings.MAIL_PORT,
        username=settings.MAIL_USERNAME,
        password=settings.MAIL_PASSWORD,
        start_tls=True,
    )
    logger.info(f"📧 Email '{subject}' envoyé à {email_to}")
    return True


async def send_password_reset_email(email_to: str, first_name: str, token: str) -> bool:
    reset_link = f"{settings.FRONTEND_URL.rstrip('/')}/password-reset?token={token}"
    body = (
        f"Bonjour {first_name},\n\n"
        "Vous avez demandé la réinitialisation de votre mot de passe pour le Bottin des artistes.\n"
        f"Cliquez sur le lien suivant (valide {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes) :\n\n"
        f"{reset_link}\n\n"
        "Si vous n'êtes pas à l'origine de cette demande, ignorez ce message.\n\n"
        "L'équipe Diversité Artistique Montréal"
    )
    return await send_email_async("Réinitialisation de votre mot de passe", email_to, body)


async def send_approval_email(email_to: str, first_name: str, last_name: str) -> bool:
    body = (
        f"Bonjour {first_name} {last_name},\n\n"
        "Votre profil a été approuvé! Vous pouvez maintenant vous connecter au Bottin des artistes.\n\n"
        f"{settings.FRONTEND_URL.rstrip('/')}/login\n\n"
        "L'équipe Diversité Artistique Montréal"
    )
    return await send_email_async("Votre compte a été approuvé", email_to, body)
