"""
Stockage des fichiers téléversés.

``SupabaseStorage`` envoie les fichiers vers le bucket Supabase configuré;
``LocalStorage`` les écrit sous ``static/upload`` (développement).
"""
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path

import aiofiles
from fastapi.concurrency import run_in_threadpool
from supabase import create_client

from bottin.config import Settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    pass


class StorageBackend(ABC):
    @abstractmethod
    async def upload(self, file_path: str, content: bytes, content_type: str) -> str:
        """Stocke le fichier et retourne son URL publique."""


class LocalStorage(StorageBackend):
    def __init__(self, upload_dir: Path, url_prefix: str = "/static/upload"):
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")

    async def upload(self, file_path: str, content: bytes, content_type: str) -> str:
        destination = (self.upload_dir / file_path).resolve()
        if self.upload_dir.resolve() not in destination.parents:
            raise StorageError(f"Chemin de fichier invalide : {file_path}")

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(destination, "wb") as out_file:
                await out_file.write(content)
        except OSError as e:
            raise StorageError(str(e)) from e

        logger.info(f"Fichier enregistré localement : {destination} ({len(content)} octets)")
        return f"{self.url_prefix}/{file_path}"


class SupabaseStorage(StorageBackend):
    def __init__(self, url: str, key: str, bucket: str):
        self.url = url
        self.key = key
        self.bucket = bucket
        self._client = None

    @property
    def client(self):
        if self._client is None:
            self._client = create_client(self.url, self.key)
        return self._client

    def _upload_sync(self, file_path: str, content: bytes, content_type: str) -> str:
        bucket = self.client.storage.from_(self.bucket)
        bucket.upload(file_path, content, {"content-type": content_type, "upsert": "true"})
        return bucket.get_public_url(file_path)

    async def upload(self, file_path: str, content: bytes, content_type: str) -> str:
        try:
            url = await run_in_threadpool(self._upload_sync, file_path, content, content_type)
        except Exception as e:
            logger.error(f"Erreur lors de l'upload vers {self.bucket}/{file_path} : {e}")
            raise StorageError(str(e)) from e

        if not url:
            raise StorageError(f"Pas d'URL publique pour {self.bucket}/{file_path}")
        return url


def placeholder_url(file_path: str) -> str:
    """URL de remplacement quand le stockage est indisponible (ALLOW_FALLBACK_STORAGE)."""
    unique_id = str(int(time.time() * 1000))[-4:]
    if file_path.startswith("profile-images"):
        return f"https://placehold.co/400x400?text=Profile-{unique_id}"
    if file_path.startswith("events"):
        return f"https://placehold.co/600x400?text=Event-{unique_id}"
    if file_path.startswith("troc-ads"):
        return f"https://placehold.co/600x400?text=TROC-{unique_id}"
    if file_path.startswith("audios"):
        return f"https://placehold.co/600x400?text=Audio-{unique_id}"
    if file_path.startswith("videos"):
        return f"https://placehold.co/600x400?text=Video-{unique_id}"
    return f"https://placehold.co/600x400?text=Media-{unique_id}"


def build_storage(config: Settings) -> StorageBackend:
    if config.STORAGE_BACKEND == "supabase":
        if not config.SUPABASE_URL or not config.SUPABASE_KEY:
            raise ValueError("SUPABASE_URL et SUPABASE_KEY sont requis pour STORAGE_BACKEND=supabase")
        logger.info(f"Stockage Supabase, bucket '{config.SUPABASE_BUCKET}'")
        return SupabaseStorage(config.SUPABASE_URL, config.SUPABASE_KEY, config.SUPABASE_BUCKET)

    if config.STORAGE_BACKEND == "local":
        logger.info(f"Stockage local dans {config.upload_dir}")
        return LocalStorage(config.upload_dir)

    raise ValueError(f"STORAGE_BACKEND inconnu : {config.STORAGE_BACKEND}")
