"""
Schéma de la base géré par alembic.

``schema_status`` compare la révision appliquée, la révision de tête et les
écarts entre les modèles SQLAlchemy et la base réelle; ``upgrade_to_head``
applique les migrations en attente (``alembic upgrade head``).
"""
import logging
from typing import Any, Dict, List

from alembic import command
from alembic.autogenerate import compare_metadata
from alembic.config import Config
from alembic.migration import MigrationContext
from alembic.script import ScriptDirectory
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncEngine

from bottin.config import BASE_DIR, settings
from bottin.db.models import Base

logger = logging.getLogger(__name__)


def get_alembic_config() -> Config:
    config = Config(str(BASE_DIR / "alembic.ini"))
    config.set_main_option("script_location", str(BASE_DIR / "alembic"))
    config.set_main_option("sqlalchemy.url", settings.DATABASE_URL.replace("%", "%%"))
    # Pas de reconfiguration du logging quand alembic tourne dans l'application
    config.attributes["configure_logger"] = False
    return config


def head_revision() -> str:
    return ScriptDirectory.from_config(get_alembic_config()).get_current_head()


def _describe(diff) -> Dict[str, str]:
    # compare_metadata renvoie des tuples, ou des listes de tuples pour les modify_*
    operation = diff[0][0] if isinstance(diff, list) else diff[0]
    return {"operation": operation, "detail": str(diff)}


def _inspect(sync_connection) -> Dict[str, Any]:
    context = MigrationContext.configure(sync_connection)
    differences: List[Dict[str, str]] = [
        _describe(diff) for diff in compare_metadata(context, Base.metadata)
    ]
    return {"current_revision": context.get_current_revision(), "differences": differences}


async def schema_status(engine: AsyncEngine) -> Dict[str, Any]:
    async with engine.connect() as connection:
        status = await connection.run_sync(_inspect)

    status["head_revision"] = head_revision()
    status["up_to_date"] = (
        status["current_revision"] == status["head_revision"] and not status["differences"]
    )
    return status


def _upgrade_sync() -> None:
    command.upgrade(get_alembic_config(), "head")


async def upgrade_to_head() -> None:
    logger.info("Application des migrations alembic (upgrade head)")
    await run_in_threadpool(_upgrade_sync)
    logger.info("✅ Migrations appliquées")
