"""
Crée (ou promeut) un compte administrateur approuvé.

    python create_admin.py dg dg@diversiteartistique.org --first-name Direction --last-name Générale
"""
import argparse
import asyncio
import getpass

from bottin.auth.models import User
from bottin.auth.password import hash_password
from bottin.db.session import AsyncSessionLocal, engine
from bottin.users.services import get_user_by_username


async def create_admin(username: str, email: str, password: str, first_name: str, last_name: str) -> User:
    async with AsyncSessionLocal() as db:
        user = await get_user_by_username(db, username)
        if user:
            user.is_admin = True
            user.is_approved = True
            user.password = hash_password(password)
            print(f"L'utilisateur '{username}' existe déjà: promu administrateur")
        else:
            user = User(
                username=username,
                email=email,
                password=hash_password(password),
                first_name=first_name,
                last_name=last_name,
                bio="Administration du Bottin des artistes",
                discipline="administration",
                location="Montréal",
                is_admin=True,
                is_approved=True,
            )
            db.add(user)
            print(f"Utilisateur administrateur créé avec succès : {username}")
        await db.commit()

    await engine.dispose()
    return user


def main():
    parser = argparse.ArgumentParser(description="Créer un compte administrateur")
    parser.add_argument("username")
    parser.add_argument("email")
    parser.add_argument("--first-name", default="Admin")
    parser.add_argument("--last-name", default="DAM")
    parser.add_argument("--password", help="Demandé interactivement si absent")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Mot de passe : ")
    if len(password) < 6:
        parser.error("Le mot de passe doit contenir au moins 6 caractères")

    asyncio.run(create_admin(args.username, args.email, password, args.first_name, args.last_name))


if __name__ == "__main__":
    main()
