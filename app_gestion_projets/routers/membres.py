"""
Router pour la gestion des membres
"""
from typing import List
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from ..core.database import get_session
from ..core.permissions import get_permission_service, require_permission
from ..core.security import (
    get_current_user, _forbidden_exception, _not_found_exception, _bad_request_exception
)
from ..models.base import User
from ..models.enums import TypeRessource, ActionPermission
from ..schemas import MembreResponse, UserResponse, RoleUpdate
from ..services import UserService
from ..services.permissions import PermissionService

router = APIRouter()


def _membre_response(permission_service: PermissionService, current_user: User, membre: User) -> MembreResponse:
    data = UserResponse.model_validate(membre).model_dump()
    return MembreResponse(**data, gerable=permission_service.can_manage_user(current_user, membre))


@router.get("", response_model=List[MembreResponse])
async def get_membres(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_permission(TypeRessource.MEMBRES, ActionPermission.VOIR)),
    permission_service: PermissionService = Depends(get_permission_service)
):
    """Liste des membres actifs"""
    membres = UserService.get_users(session)
    return [_membre_response(permission_service, current_user, m) for m in membres]


@router.put("/{user_id}/role", response_model=MembreResponse)
async def change_role(
    user_id: int,
    data: RoleUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    permission_service: PermissionService = Depends(get_permission_service)
):
    """Change le rôle d'un membre (super-administrateur uniquement)"""
    if not permission_service.can_change_role(current_user):
        raise _forbidden_exception("Seul un super administrateur peut modifier les rôles")

    # Toujours interdit, quelle que soit la permission
    if current_user.id == user_id:
        raise _bad_request_exception("Vous ne pouvez pas modifier votre propre rôle")

    target = session.get(User, user_id)
    if not target:
        raise _not_found_exception("Utilisateur non trouvé")

    # Un administrateur ne modifie jamais un pair ni un super-administrateur
    if not permission_service.can_manage_user(current_user, target):
        raise _forbidden_exception("Vous ne pouvez pas gérer ce membre")

    if target.role == data.role:
        raise _bad_request_exception("Aucun changement")

    target = UserService.change_role(session, current_user, target, data.role, data.raison)
    return _membre_response(permission_service, current_user, target)


@router.delete("/{user_id}", status_code=status.HTTP_200_OK)
async def delete_membre(
    user_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_permission(TypeRessource.MEMBRES, ActionPermission.SUPPRIMER)),
    permission_service: PermissionService = Depends(get_permission_service)
):
    """Supprime (désactive) un membre"""
    # Empêcher la suppression de son propre compte
    if current_user.id == user_id:
        raise _bad_request_exception("Vous ne pouvez pas supprimer votre propre compte")

    target = session.get(User, user_id)
    if not target:
        raise _not_found_exception("Utilisateur non trouvé")

    if not permission_service.can_manage_user(current_user, target):
        raise _forbidden_exception("Vous ne pouvez pas gérer ce membre")

    UserService.deactivate_user(session, target)
    return {"message": "Membre supprimé", "id": user_id}
