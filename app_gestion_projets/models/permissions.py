# app_gestion_projets/models/permissions.py
from typing import Optional
from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from datetime import datetime, timezone

from .enums import ActionLogPermission

class PermissionUtilisateur(SQLModel, table=True):
    """Surcharge de permission propre à un utilisateur (un seul enregistrement actif par permission)"""
    __table_args__ = (
        UniqueConstraint("utilisateur_id", "permission_id", name="uq_permission_utilisateur"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    utilisateur_id: int = Field(foreign_key="user.id", index=True)
    permission_id: str = Field(index=True)  # identifiant du catalogue, ex: "members_delete"
    accordee: bool = True
    accordee_par: int = Field(foreign_key="user.id")  # Dernier utilisateur ayant accordé / révoqué
    accordee_le: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class LogPermission(SQLModel, table=True):
    """Journal des modifications de droits"""
    id: Optional[int] = Field(default=None, primary_key=True)
    utilisateur_id: int = Field(foreign_key="user.id", index=True)
    utilisateur_cible_id: Optional[int] = Field(foreign_key="user.id", default=None)
    action: ActionLogPermission
    permission_id: Optional[str] = None
    ancienne_valeur: Optional[str] = None
    nouvelle_valeur: Optional[str] = None
    raison: Optional[str] = None
    cree_le: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
