"""
Point d'entrée de l'API de gestion de projets
"""
import logging

import uvicorn
from fastapi import FastAPI

from .core.config import settings
from .core.database import create_db_and_tables, get_session, test_db_connection
from .core.middleware import setup_all_middlewares
from .routers import router_configs
from .services import UserService

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Rôles, permissions et contrôle d'accès aux projets",
    version=settings.VERSION,
    # Documentation interactive uniquement en mode debug
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
)
app.state.settings = settings

setup_all_middlewares(app, allowed_hosts=settings.ALLOWED_HOSTS)

for router, prefix, tags in router_configs:
    app.include_router(router, prefix=prefix, tags=tags)


def ensure_admin_user() -> bool:
    """Garantit l'existence du compte super-administrateur configuré"""
    session = next(get_session())
    try:
        ok = UserService.ensure_admin_exists(session)
    finally:
        session.close()

    if not ok:
        logger.warning("⚠️ Compte super-administrateur non vérifié (%s)", settings.MAIL_ADMIN)
    return ok


@app.on_event("startup")
async def on_startup():
    logger.info("🚀 %s v%s (%s)", settings.APP_NAME, settings.VERSION, settings.ENVIRONMENT)
    try:
        test_db_connection()
    except Exception:
        logger.exception("❌ Base de données inaccessible")
        raise
    create_db_and_tables()
    ensure_admin_user()


@app.get("/health")
async def health():
    return {"status": "ok", "app": settings.APP_NAME, "version": settings.VERSION}


if __name__ == "__main__":
    uvicorn.run("app_gestion_projets.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
