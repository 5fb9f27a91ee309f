"""
Schémas Pydantic pour les utilisateurs
"""
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime
from ..models.enums import UserRole


class UserBase(BaseModel):
    email: str
    nom: str
    prenom: str
    fonction: Optional[str] = None
    departement: Optional[str] = None
    role: UserRole


class UserResponse(UserBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    actif: bool
    derniere_connexion: Optional[datetime] = None
    cree_le: datetime


class MembreResponse(UserResponse):
    gerable: bool = False  # L'utilisateur connecté peut gérer ce membre


class RoleUpdate(BaseModel):
    role: UserRole
    raison: Optional[str] = None
