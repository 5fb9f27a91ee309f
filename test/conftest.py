"""Fixtures pytest partagées : base SQLite en mémoire et client API."""

import os

os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "secret-de-test")

from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from app_gestion_projets.core.database import get_session
from app_gestion_projets.core.security import get_password_hash
from app_gestion_projets.main import app
from app_gestion_projets.models import User, UserRole, Projet, Tache

from helpers import MOT_DE_PASSE


@pytest.fixture(scope="session")
def mot_de_passe_hash() -> str:
    return get_password_hash(MOT_DE_PASSE)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(session):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session, mot_de_passe_hash):
    compteur = {"n": 0}

    def _make_user(role: UserRole, departement: Optional[str] = "IT", email: Optional[str] = None) -> User:
        compteur["n"] += 1
        user = User(
            email=email or f"membre{compteur['n']}@gestion-projets.fr",
            nom=f"Nom{compteur['n']}",
            prenom=f"Prenom{compteur['n']}",
            departement=departement,
            role=role,
            mot_de_passe_hash=mot_de_passe_hash,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def super_admin(make_user):
    return make_user(UserRole.SUPER_ADMIN)


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN)


@pytest.fixture
def utilisateur(make_user):
    return make_user(UserRole.UTILISATEUR)


@pytest.fixture
def make_projet(session):
    def _make_projet(nom: str = "Projet", departement: Optional[str] = "IT", etats=(),
                     affectes=(), responsable_id: Optional[int] = None) -> Projet:
        projet = Projet(nom=nom, departement=departement, responsable_id=responsable_id)
        session.add(projet)
        session.commit()
        session.refresh(projet)
        for i, etat in enumerate(etats):
            tache = Tache(nom=f"{nom} - tâche {i + 1}", etat=etat, projet_id=projet.id,
                          utilisateurs=list(affectes))
            session.add(tache)
        session.commit()
        session.refresh(projet)
        return projet

    return _make_projet

