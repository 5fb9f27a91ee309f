"""Utilitaires de test."""

from types import SimpleNamespace
from typing import Optional

from app_gestion_projets.core.security import create_user_token
from app_gestion_projets.models import User

MOT_DE_PASSE = "motdepasse123"


def auth_headers(user: User) -> dict:
    token = create_user_token(user)
    return {"Authorization": f"Bearer {token}"}


def fake_user(role, id: int = 1, departement: Optional[str] = "IT"):
    """Utilisateur en mémoire pour les tests purs du modèle d'autorisation"""
    return SimpleNamespace(id=id, role=role, departement=departement)
