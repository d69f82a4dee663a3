import asyncio

from bottin.db.session import engine
# IMPORTER TOUS LES MODÈLES pour enregistrer toutes les tables dans metadata
from bottin.db.models import Base


async def create_all():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        print("Toutes les tables ont été créées")
    await engine.dispose()

if __name__ == "__main__":
    asyncio.run(create_all())
