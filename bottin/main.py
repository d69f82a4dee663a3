import logging
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from bottin.admin.api import router as admin_router
from bottin.auth.api import router as auth_router
from bottin.auth.sessions import build_session_store
from bottin.config import Settings, settings
from bottin.events.api import router as event_router
from bottin.media.api import router as media_router
from bottin.messages.api import router as messages_router
from bottin.troc.api import router as troc_router
from bottin.uploads.api import router as upload_router
from bottin.uploads.storage import build_storage
from bottin.users.api import router as users_router

logger = logging.getLogger(__name__)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid input", "errors": jsonable_encoder(exc.errors())},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"❌ Erreur non gérée sur {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app(config: Settings = settings) -> FastAPI:
    logging.basicConfig(level=config.LOG_LEVEL)

    app = FastAPI(title="Bottin des artistes - Diversité Artistique Montréal")

    # Choisis une seule fois au démarrage, partagés via app.state
    app.state.session_store = build_session_store(config)
    app.state.storage = build_storage(config)

    # Création dossier statique uploads
    upload_dir = Path(config.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)

    # Monture des fichiers statiques
    app.mount("/static", StaticFiles(directory=config.STATIC_DIR), name="static")

    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(media_router)
    app.include_router(event_router)
    app.include_router(troc_router)
    app.include_router(messages_router)
    app.include_router(upload_router)
    app.include_router(admin_router)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Middleware CORS (cookies de session => origines explicites)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_class=PlainTextResponse)
    async def health():
        return "OK"

    @app.get("/")
    async def root():
        return {"message": "Bienvenue sur l'API du Bottin des artistes de Diversité Artistique Montréal !"}

    logger.info(f"🚀 Application créée (env={config.APP_ENV}, sessions={type(app.state.session_store).__name__})")
    return app


app = create_app()
