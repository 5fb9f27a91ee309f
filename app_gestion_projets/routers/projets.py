"""
Router pour la consultation, la clôture et la réouverture des projets
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from ..core.database import get_session
from ..core.permissions import get_permission_service, require_permission
from ..core.security import _forbidden_exception, _not_found_exception, _bad_request_exception
from ..models.base import User, Projet
from ..models.enums import TypeRessource, ActionPermission, StatutProjet
from ..schemas import ProjetResponse
from ..services import ProjetService, check_can_close_project, check_can_reopen_project
from ..services.permissions import PermissionService

router = APIRouter()

require_projects_view = require_permission(TypeRessource.PROJETS, ActionPermission.VOIR)


def _get_projet(session: Session, projet_id: int) -> Projet:
    projet = ProjetService.get_projet(session, projet_id)
    if not projet:
        raise _not_found_exception("Projet non trouvé")
    return projet


@router.get("", response_model=List[ProjetResponse])
async def get_projets(
    statut: Optional[StatutProjet] = Query(None, description="Filtrer par statut"),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_projects_view),
    permission_service: PermissionService = Depends(get_permission_service)
):
    """Projets visibles par l'utilisateur connecté"""
    projets = ProjetService.get_projets(session, statut)
    return [ProjetResponse.model_validate(p) for p in permission_service.get_accessible_projects(current_user, projets)]


@router.get("/{projet_id}", response_model=ProjetResponse)
async def get_projet(
    projet_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_projects_view),
    permission_service: PermissionService = Depends(get_permission_service)
):
    """Détail d'un projet"""
    projet = _get_projet(session, projet_id)
    if not permission_service.get_accessible_projects(current_user, [projet]):
        raise _forbidden_exception("Accès non autorisé à ce projet")
    return ProjetResponse.model_validate(projet)


@router.post("/{projet_id}/cloturer", response_model=ProjetResponse)
async def cloturer_projet(
    projet_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_projects_view)
):
    """Clôture un projet dont toutes les tâches sont clôturées"""
    projet = _get_projet(session, projet_id)
    if projet.statut == StatutProjet.CLOTURE:
        raise _bad_request_exception("Le projet est déjà clôturé")

    if not check_can_close_project(projet, current_user):
        raise _forbidden_exception(
            "Clôture impossible : réservée aux administrateurs et toutes les tâches doivent être clôturées"
        )

    projet = ProjetService.cloturer_projet(session, projet, current_user)
    return ProjetResponse.model_validate(projet)


@router.post("/{projet_id}/reouvrir", response_model=ProjetResponse)
async def reouvrir_projet(
    projet_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_projects_view)
):
    """Réouvre un projet clôturé"""
    projet = _get_projet(session, projet_id)
    if projet.statut != StatutProjet.CLOTURE:
        raise _bad_request_exception("Le projet n'est pas clôturé")

    if not check_can_reopen_project(projet, current_user):
        raise _forbidden_exception("Vous ne pouvez pas réouvrir ce projet")

    projet = ProjetService.reouvrir_projet(session, projet, current_user)
    return ProjetResponse.model_validate(projet)
