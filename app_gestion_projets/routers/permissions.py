"""
Router pour la consultation et la gestion des droits d'accès
"""
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from ..core.database import get_session
from ..core.permissions import get_permission_service, require_permission
from ..core.security import get_current_user, _not_found_exception
from ..models.base import User
from ..models.enums import TypeRessource, ActionPermission
from ..schemas import (
    PermissionCheckResponse, PermissionSystemeResponse, PermissionUtilisateurResponse,
    PermissionsUtilisateurResponse, PermissionOverrideRequest, MatricePermissionsResponse
)
from ..services.permissions import PermissionService
from ..services.permission_tables import PERMISSIONS_SYSTEME, PERMISSIONS_PAR_ID

router = APIRouter()

require_settings_view = require_permission(TypeRessource.PARAMETRES, ActionPermission.VOIR)
require_manage_permissions = require_permission(TypeRessource.PARAMETRES, ActionPermission.GERER_PERMISSIONS)


def _permissions_utilisateur(permission_service: PermissionService, user: User) -> PermissionsUtilisateurResponse:
    effectives = permission_service.get_user_effective_permissions(user)
    surcharges = permission_service.get_user_overrides(user.id).values()
    return PermissionsUtilisateurResponse(
        utilisateur_id=user.id,
        role=user.role.value if hasattr(user.role, "value") else user.role,
        effectives=[PermissionSystemeResponse(**p._asdict()) for p in effectives],
        surcharges=[PermissionUtilisateurResponse.model_validate(s) for s in surcharges],
    )


def _get_target_user(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if not user:
        raise _not_found_exception("Utilisateur non trouvé")
    return user


@router.get("/check", response_model=PermissionCheckResponse)
async def check_permission(
    ressource: str = Query(..., description="Ressource, ex: projects"),
    action: str = Query(..., description="Action, ex: create"),
    current_user: User = Depends(get_current_user),
    permission_service: PermissionService = Depends(get_permission_service)
):
    """Vérifie une permission de l'utilisateur connecté"""
    return PermissionCheckResponse(
        ressource=ressource,
        action=action,
        autorise=permission_service.has_permission(current_user, ressource, action),
    )


@router.get("/matrice", response_model=MatricePermissionsResponse)
async def get_matrice(
    current_user: User = Depends(require_settings_view),
    permission_service: PermissionService = Depends(get_permission_service)
):
    """Matrice des permissions par rôle"""
    return MatricePermissionsResponse(roles=permission_service.get_permission_matrix())


@router.get("/catalogue", response_model=List[PermissionSystemeResponse])
async def get_catalogue(current_user: User = Depends(require_settings_view)):
    """Catalogue des permissions système"""
    return [PermissionSystemeResponse(**p._asdict()) for p in PERMISSIONS_SYSTEME]


@router.get("/utilisateurs/{user_id}", response_model=PermissionsUtilisateurResponse)
async def get_permissions_utilisateur(
    user_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_manage_permissions),
    permission_service: PermissionService = Depends(get_permission_service)
):
    """Permissions effectives et surcharges d'un membre"""
    target = _get_target_user(session, user_id)
    return _permissions_utilisateur(permission_service, target)


@router.post("/utilisateurs/{user_id}/accorder", response_model=PermissionsUtilisateurResponse)
async def accorder_permission(
    user_id: int,
    demande: PermissionOverrideRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_manage_permissions),
    permission_service: PermissionService = Depends(get_permission_service)
):
    """Accorde une permission du catalogue à un membre"""
    target = _get_target_user(session, user_id)
    if demande.permission_id not in PERMISSIONS_PAR_ID:
        raise _not_found_exception(f"Permission inconnue: {demande.permission_id}")

    permission_service.grant_permission(current_user, target.id, demande.permission_id, demande.raison)
    return _permissions_utilisateur(permission_service, target)


@router.post("/utilisateurs/{user_id}/revoquer", response_model=PermissionsUtilisateurResponse)
async def revoquer_permission(
    user_id: int,
    demande: PermissionOverrideRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_manage_permissions),
    permission_service: PermissionService = Depends(get_permission_service)
):
    """Révoque une permission précédemment accordée à un membre"""
    target = _get_target_user(session, user_id)
    if demande.permission_id not in PERMISSIONS_PAR_ID:
        raise _not_found_exception(f"Permission inconnue: {demande.permission_id}")

    surcharge = permission_service.revoke_permission(current_user, target.id, demande.permission_id, demande.raison)
    if surcharge is None:
        raise _not_found_exception("Aucune permission accordée à révoquer")
    return _permissions_utilisateur(permission_service, target)
