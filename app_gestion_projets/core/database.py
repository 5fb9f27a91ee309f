"""
Moteur SQLModel et sessions (PostgreSQL en production, SQLite en local et en test)
"""
import logging
from typing import Generator

from sqlalchemy import text
from sqlmodel import SQLModel, Session, create_engine

from ..core.config import settings
# Les tables doivent être déclarées avant create_all()
from ..models import base as _base_models  # noqa: F401
from ..models import permissions as _permission_models  # noqa: F401

logger = logging.getLogger(__name__)


def _connect_args() -> dict:
    if settings.is_sqlite:
        return {"check_same_thread": False}
    return {"options": "-c client_encoding=UTF8"}


engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, connect_args=_connect_args())


def create_db_and_tables() -> None:
    SQLModel.metadata.create_all(engine)
    logger.info("✅ Tables créées: %s", ", ".join(sorted(SQLModel.metadata.tables)))


def get_session() -> Generator[Session, None, None]:
    """Dépendance FastAPI : une session par requête"""
    with Session(engine) as session:
        yield session


def test_db_connection() -> bool:
    with engine.connect() as connexion:
        connexion.execute(text("SELECT 1"))
    logger.info("🗄️ Connexion à la base OK")
    return True
