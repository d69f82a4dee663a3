"""
Stockage des sessions serveur.

Le cookie ``dam_session`` ne contient qu'un identifiant de session signé;
l'utilisateur et son statut admin sont conservés côté serveur, dans un store
choisi au démarrage: mémoire en développement, base de données en production.
"""
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional

from sqlalchemy import delete, select

from bottin.auth.models import UserSession
from bottin.config import Settings
from bottin.db.session import AsyncSessionLocal

logger = logging.getLogger(__name__)


@dataclass
class SessionRecord:
    id: str
    user_id: int
    is_admin: bool
    expires_at: datetime


class SessionStore(ABC):
    def __init__(self, max_age: timedelta):
        self.max_age = max_age

    async def create(self, user_id: int, is_admin: bool) -> SessionRecord:
        record = SessionRecord(
            id=str(uuid.uuid4()),
            user_id=user_id,
            is_admin=is_admin,
            expires_at=datetime.utcnow() + self.max_age,
        )
        await self._save(record)
        return record

    @abstractmethod
    async def get(self, session_id: str) -> Optional[SessionRecord]:
        ...

    @abstractmethod
    async def destroy(self, session_id: str) -> None:
        ...

    @abstractmethod
    async def _save(self, record: SessionRecord) -> None:
        ...


class MemorySessionStore(SessionStore):
    """Sessions en mémoire: perdues au redémarrage, développement uniquement."""

    def __init__(self, max_age: timedelta):
        super().__init__(max_age)
        self._sessions: Dict[str, SessionRecord] = {}

    async def _save(self, record: SessionRecord) -> None:
        self._prune()
        self._sessions[record.id] = record

    async def get(self, session_id: str) -> Optional[SessionRecord]:
        record = self._sessions.get(session_id)
        if record is None:
            return None
        if record.expires_at <= datetime.utcnow():
            self._sessions.pop(session_id, None)
            return None
        return record

    async def destroy(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def _prune(self) -> None:
        now = datetime.utcnow()
        expired = [sid for sid, record in self._sessions.items() if record.expires_at <= now]
        for sid in expired:
            self._sessions.pop(sid, None)


class DatabaseSessionStore(SessionStore):
    """Sessions durables dans la table ``sessions``."""

    def __init__(self, max_age: timedelta, session_factory=AsyncSessionLocal):
        super().__init__(max_age)
        self.session_factory = session_factory

    async def _save(self, record: SessionRecord) -> None:
        async with self.session_factory() as db:
            # Nettoyage des sessions expirées à chaque nouvelle connexion
            await db.execute(delete(UserSession).where(UserSession.expires_at <= datetime.utcnow()))
            db.add(UserSession(
                id=record.id,
                user_id=record.user_id,
                is_admin=record.is_admin,
                expires_at=record.expires_at,
            ))
            await db.commit()

    async def get(self, session_id: str) -> Optional[SessionRecord]:
        async with self.session_factory() as db:
            result = await db.execute(
                select(UserSession).where(
                    UserSession.id == session_id,
                    UserSession.expires_at > datetime.utcnow(),
                )
            )
            row = result.scalars().first()
            if row is None:
                return None
            return SessionRecord(
                id=row.id,
                user_id=row.user_id,
                is_admin=row.is_admin,
                expires_at=row.expires_at,
            )

    async def destroy(self, session_id: str) -> None:
        async with self.session_factory() as db:
            await db.execute(delete(UserSession).where(UserSession.id == session_id))
            await db.commit()


def build_session_store(config: Settings) -> SessionStore:
    max_age = timedelta(days=config.SESSION_MAX_AGE_DAYS)
    backend = config.session_backend

    if backend == "database":
        logger.info("Sessions stockées en base de données")
        return DatabaseSessionStore(max_age)
    if backend == "memory":
        if config.is_production:
            logger.warning("⚠️ Stockage mémoire des sessions en production: sessions perdues au redémarrage")
        else:
            logger.info("Mode développement: sessions stockées en mémoire")
        return MemorySessionStore(max_age)

    raise ValueError(f"SESSION_BACKEND inconnu : {backend}")
