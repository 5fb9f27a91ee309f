"""
Modèles SQLModel de l'application de gestion de projets
"""
from .enums import (
    UserRole, TypeRessource, ActionPermission, EtatTache, StatutProjet, ActionLogPermission
)
from .base import User, Projet, Tache, TacheUtilisateur
from .permissions import PermissionUtilisateur, LogPermission

__all__ = [
    "UserRole",
    "TypeRessource",
    "ActionPermission",
    "EtatTache",
    "StatutProjet",
    "ActionLogPermission",
    "User",
    "Projet",
    "Tache",
    "TacheUtilisateur",
    "PermissionUtilisateur",
    "LogPermission",
]
