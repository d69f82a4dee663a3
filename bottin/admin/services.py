import logging
import re
from typing import Any, Dict, Optional

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from bottin.auth.models import User
from bottin.events.models import Event
from bottin.troc.models import TrocAd

logger = logging.getLogger(__name__)

RECENT_LIMIT = 10
READ_ONLY_KEYWORDS = ("select", "with", "explain")
# Instructions d'écriture interdites n'importe où dans la requête (ex: WITH ... DELETE)
WRITE_KEYWORDS = re.compile(
    r"\b(insert|update|delete|merge|upsert|drop|alter|create|truncate|grant|revoke"
    r"|attach|detach|pragma|vacuum|reindex|copy)\b|\breplace\s+into\b",
    re.IGNORECASE,
)


class UnsafeQueryError(Exception):
    pass


async def _count(db: AsyncSession, query) -> int:
    result = await db.execute(query)
    return result.scalar_one()


async def _distribution(db: AsyncSession, column, *conditions) -> Dict[str, int]:
    query = select(column, func.count()).where(column.isnot(None), *conditions).group_by(column)
    result = await db.execute(query)
    return {key: count for key, count in result.all()}


async def get_analytics(db: AsyncSession) -> Dict[str, Any]:
    total_users = await _count(db, select(func.count(User.id)))
    approved_users = await _count(db, select(func.count(User.id)).where(User.is_approved.is_(True)))
    events_count = await _count(db, select(func.count(Event.id)))
    ads_count = await _count(db, select(func.count(TrocAd.id)))

    recent_users = await db.execute(
        select(User)
        .where(User.is_approved.is_(True))
        .order_by(User.created_at.desc(), User.id.desc())
        .limit(RECENT_LIMIT)
    )
    recent_events = await db.execute(
        select(Event).order_by(Event.created_at.desc(), Event.id.desc()).limit(RECENT_LIMIT)
    )
    recent_ads = await db.execute(
        select(TrocAd).order_by(TrocAd.created_at.desc(), TrocAd.id.desc()).limit(RECENT_LIMIT)
    )

    return {
        "counts": {
            "total_users": total_users,
            "approved_users": approved_users,
            "pending_users": total_users - approved_users,
            "events": events_count,
            "troc_ads": ads_count,
        },
        "distribution": {
            "users_by_discipline": await _distribution(db, User.discipline, User.is_approved.is_(True)),
            "users_by_location": await _distribution(db, User.location, User.is_approved.is_(True)),
            "ads_by_category": await _distribution(db, TrocAd.category),
        },
        "recent": {
            "users": list(recent_users.scalars().all()),
            "events": list(recent_events.scalars().all()),
            "ads": list(recent_ads.scalars().all()),
        },
    }


def normalize_read_only_query(query: str) -> str:
    """
    Vérifie qu'une requête SQL est une seule instruction de lecture
    (SELECT, WITH ou EXPLAIN) et la retourne sans ';' final.
    """
    # Retirer les commentaires avant d'inspecter la requête
    cleaned = re.sub(r"/\*.*?\*/", " ", query, flags=re.DOTALL)
    cleaned = re.sub(r"--[^\n]*", " ", cleaned).strip()
    cleaned = cleaned.rstrip(";").strip()

    if not cleaned:
        raise UnsafeQueryError("Empty query")
    if ";" in cleaned:
        raise UnsafeQueryError("Only a single statement is allowed")

    first_word = cleaned.split(None, 1)[0].lower()
    if first_word not in READ_ONLY_KEYWORDS:
        raise UnsafeQueryError("Only SELECT, WITH and EXPLAIN statements are allowed")

    # Les littéraux ne comptent pas: WHERE note = 'delete' reste une lecture
    without_literals = re.sub(r"'(?:[^']|'')*'", "''", cleaned)
    if WRITE_KEYWORDS.search(without_literals):
        raise UnsafeQueryError("Only read-only statements are allowed")
    return cleaned


async def run_read_only_query(db: AsyncSession, query: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    statement = normalize_read_only_query(query)

    connection = await db.connection()
    dialect = connection.dialect.name

    # La transaction est toujours annulée, même pour une requête de lecture
    try:
        if dialect == "postgresql":
            await connection.exec_driver_sql("SET TRANSACTION READ ONLY")
        elif dialect == "sqlite":
            # SQLite n'ouvre pas de transaction pour un WITH: écritures bloquées au niveau connexion
            await connection.exec_driver_sql("PRAGMA query_only = ON")
        result = await connection.execute(text(statement), params or {})
        if result.returns_rows:
            columns = list(result.keys())
            rows = [dict(row._mapping) for row in result.all()]
        else:
            columns, rows = [], []
    finally:
        if dialect == "sqlite":
            await connection.exec_driver_sql("PRAGMA query_only = OFF")
        await db.rollback()

    logger.info(f"Requête SQL admin exécutée : {len(rows)} ligne(s)")
    return {"columns": columns, "rows": rows, "row_count": len(rows)}
