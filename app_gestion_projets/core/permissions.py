# app_gestion_projets/core/permissions.py
from typing import Callable
from fastapi import Depends
from sqlmodel import Session

from ..models.base import User
from ..models.enums import TypeRessource, ActionPermission
from ..services.permissions import PermissionService
from ..core.database import get_session
from ..core.security import get_current_user, _forbidden_exception


def get_permission_service(session: Session = Depends(get_session)) -> PermissionService:
    """Dépendance FastAPI : service de permissions lié à la session de la requête"""
    return PermissionService(session)


def require_permission(resource: TypeRessource, action: ActionPermission) -> Callable:
    """
    Dépendance vérifiant une permission de l'utilisateur connecté

    Usage:
    @router.get("/membres")
    async def list_members(current_user: User = Depends(require_permission(TypeRessource.MEMBRES, ActionPermission.VOIR))):
        ...
    """
    async def dependency(
        current_user: User = Depends(get_current_user),
        permission_service: PermissionService = Depends(get_permission_service),
    ) -> User:
        if not permission_service.has_permission(current_user, resource, action):
            raise _forbidden_exception(
                f"Permission insuffisante. Requis: {action.value} sur {resource.value}"
            )
        return current_user

    return dependency
