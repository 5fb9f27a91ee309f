"""
Services de l'application de gestion de projets
"""
from .permissions import PermissionService, check_can_close_project, check_can_reopen_project
from .user_service import UserService
from .projet_service import ProjetService

__all__ = [
    "PermissionService",
    "check_can_close_project",
    "check_can_reopen_project",
    "UserService",
    "ProjetService",
]
