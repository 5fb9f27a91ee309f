# app_gestion_projets/services/permissions.py
from typing import Any, Dict, Iterable, List, Optional, Union
from sqlmodel import Session, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from datetime import datetime, timezone
import logging

from ..models.enums import (
    UserRole, TypeRessource, ActionPermission, EtatTache, ActionLogPermission
)
from ..models.permissions import PermissionUtilisateur, LogPermission
from ..models.base import User
from .permission_tables import (
    TablePermissionsRole, TABLE_PERMISSIONS_DEFAUT, PermissionSysteme,
    PERMISSIONS_SYSTEME, PERMISSIONS_PAR_ID, PERMISSIONS_PAR_COUPLE, PAGE_PERMISSIONS,
    valeur,
)

logger = logging.getLogger(__name__)

ROLES_GESTIONNAIRES = (UserRole.SUPER_ADMIN.value, UserRole.ADMIN.value)

Ressource = Union[str, TypeRessource]
Action = Union[str, ActionPermission]


def _role(user: Any) -> Optional[str]:
    return valeur(getattr(user, "role", None))


class PermissionService:
    """
    Service de contrôle d'accès.

    Les décisions sont des fonctions pures de (utilisateur, ressource, action),
    de la table des rôles injectée et des surcharges utilisateur lues via la
    session. Sans session, seules les permissions de rôle s'appliquent.
    Aucune décision ne lève d'exception : toute entrée non résolue vaut refus.
    """

    def __init__(self, session: Optional[Session] = None,
                 table: TablePermissionsRole = TABLE_PERMISSIONS_DEFAUT):
        self.session = session
        self.table = table

    # ------------------------------------------------------------------
    # Décisions
    # ------------------------------------------------------------------
    def has_permission(self, user: Any, resource: Ressource, action: Action) -> bool:
        """Vérifie si un utilisateur peut effectuer `action` sur `resource`"""
        if user is None:
            logger.debug("🔒 Aucun utilisateur, refus %s:%s", valeur(resource), valeur(action))
            return False

        role = _role(user)
        if role == UserRole.SUPER_ADMIN.value:
            return True

        autorise = self.table.lookup(role, resource, action)
        if autorise:
            return True

        # Surcharges utilisateur : uniquement additives
        if self._has_granted_override(user, resource, action):
            logger.debug("🔓 Surcharge accordée pour %s sur %s:%s",
                         getattr(user, "id", None), valeur(resource), valeur(action))
            return True

        logger.debug("🔒 Refus %s (%s) sur %s:%s", getattr(user, "id", None), role,
                     valeur(resource), valeur(action))
        return False

    def can_access_page(self, user: Any, page: str) -> bool:
        """Visibilité d'une page de navigation"""
        if user is None:
            return False

        permission = PAGE_PERMISSIONS.get(page)
        if permission is None:
            return False

        resource, action = permission
        return self.has_permission(user, resource, action)

    def get_accessible_pages(self, user: Any) -> Dict[str, bool]:
        return {page: self.can_access_page(user, page) for page in PAGE_PERMISSIONS}

    @staticmethod
    def can_manage_user(current_user: Any, target_user: Any) -> bool:
        """Un administrateur ne peut gérer que des utilisateurs standards"""
        if current_user is None:
            return False

        role = _role(current_user)
        if role == UserRole.SUPER_ADMIN.value:
            return True

        if role == UserRole.ADMIN.value:
            return target_user is not None and _role(target_user) == UserRole.UTILISATEUR.value

        return False

    def can_change_role(self, current_user: Any) -> bool:
        return self.has_permission(current_user, TypeRessource.MEMBRES, ActionPermission.GERER_ROLES)

    def can_change_user_role(self, current_user: Any, target_user: Any) -> bool:
        """can_change_role, en interdisant toujours la modification de son propre rôle"""
        if current_user is None or target_user is None:
            return False
        if getattr(current_user, "id", None) == getattr(target_user, "id", None):
            return False
        return self.can_change_role(current_user)

    @staticmethod
    def get_accessible_projects(user: Any, projets: Iterable[Any]) -> List[Any]:
        """Filtre les projets visibles : tous pour les administrateurs, sinon les projets affectés"""
        if user is None:
            return []

        projets = list(projets)
        if _role(user) in ROLES_GESTIONNAIRES:
            return projets

        return [projet for projet in projets if est_affecte(user, projet)]

    # ------------------------------------------------------------------
    # Surcharges utilisateur
    # ------------------------------------------------------------------
    def get_user_overrides(self, user_id: Optional[int]) -> Dict[str, PermissionUtilisateur]:
        """Surcharges de l'utilisateur indexées par identifiant de permission"""
        if self.session is None or user_id is None:
            return {}

        surcharges = self.session.exec(
            select(PermissionUtilisateur).where(PermissionUtilisateur.utilisateur_id == user_id)
        ).all()
        return {s.permission_id: s for s in surcharges}

    def _has_granted_override(self, user: Any, resource: Ressource, action: Action) -> bool:
        permission = PERMISSIONS_PAR_COUPLE.get((valeur(resource), valeur(action)))
        if permission is None:
            return False

        surcharge = self.get_user_overrides(getattr(user, "id", None)).get(permission.id)
        return bool(surcharge and surcharge.accordee)

    def get_user_effective_permissions(self, user: Any) -> List[PermissionSysteme]:
        """Permissions du catalogue effectivement détenues (rôle ou surcharge)"""
        if user is None:
            return []
        return [
            permission for permission in PERMISSIONS_SYSTEME
            if self.has_permission(user, permission.ressource, permission.action)
        ]

    def grant_permission(self, user: User, target_user_id: int, permission_id: str,
                         reason: Optional[str] = None) -> Optional[PermissionUtilisateur]:
        """Accorde une permission du catalogue (crée ou remplace la surcharge existante)"""
        return self._set_override(user, target_user_id, permission_id, True, reason)

    def revoke_permission(self, user: User, target_user_id: int, permission_id: str,
                          reason: Optional[str] = None) -> Optional[PermissionUtilisateur]:
        """Révoque une surcharge existante ; sans surcharge, rien n'est modifié"""
        return self._set_override(user, target_user_id, permission_id, False, reason)

    def _get_override(self, target_user_id: int, permission_id: str) -> Optional[PermissionUtilisateur]:
        return self.session.exec(
            select(PermissionUtilisateur).where(
                PermissionUtilisateur.utilisateur_id == target_user_id,
                PermissionUtilisateur.permission_id == permission_id
            )
        ).first()

    def _set_override(self, user: User, target_user_id: int, permission_id: str,
                      accordee: bool, reason: Optional[str]) -> Optional[PermissionUtilisateur]:
        if permission_id not in PERMISSIONS_PAR_ID:
            logger.warning("⚠️ Permission inconnue: %s", permission_id)
            return None

        user_id = user.id
        try:
            try:
                surcharge = self._write_override(user_id, target_user_id, permission_id, accordee, reason)
            except IntegrityError:
                # Surcharge insérée entre la lecture et l'écriture : on la met à jour (dernier écrit gagne)
                self.session.rollback()
                logger.info("🔁 Surcharge %s créée en parallèle pour %s, nouvelle tentative",
                            permission_id, target_user_id)
                surcharge = self._write_override(user_id, target_user_id, permission_id, accordee, reason)
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("❌ Erreur lors de la mise à jour de la permission %s", permission_id)
            raise

        if surcharge is None:
            return None

        logger.info("%s Permission %s %s pour l'utilisateur %s par %s",
                    "✅" if accordee else "🚫", permission_id,
                    "accordée" if accordee else "révoquée", target_user_id, user_id)
        return surcharge

    def _write_override(self, user_id: int, target_user_id: int, permission_id: str,
                        accordee: bool, reason: Optional[str]) -> Optional[PermissionUtilisateur]:
        """Crée ou met à jour la surcharge et journalise, en un seul commit"""
        existing = self._get_override(target_user_id, permission_id)
        if existing is None and not accordee:
            return None

        old_value = None if existing is None else str(existing.accordee).lower()

        if existing:
            existing.accordee = accordee
            existing.accordee_par = user_id
            existing.accordee_le = datetime.now(timezone.utc)
            surcharge = existing
        else:
            surcharge = PermissionUtilisateur(
                utilisateur_id=target_user_id,
                permission_id=permission_id,
                accordee=accordee,
                accordee_par=user_id
            )
        self.session.add(surcharge)
        self.session.add(LogPermission(
            utilisateur_id=user_id,
            utilisateur_cible_id=target_user_id,
            action=ActionLogPermission.ACCORDER if accordee else ActionLogPermission.REVOQUER,
            permission_id=permission_id,
            ancienne_valeur=old_value,
            nouvelle_valeur=str(accordee).lower(),
            raison=reason
        ))
        self.session.commit()
        self.session.refresh(surcharge)
        return surcharge

    # ------------------------------------------------------------------
    # Consultation
    # ------------------------------------------------------------------
    def get_permission_matrix(self) -> Dict[str, Dict[str, bool]]:
        """Matrice complète des permissions par rôle"""
        return self.table.as_matrix()

    def get_all_roles(self) -> List[str]:
        return [role.value for role in UserRole]


# ----------------------------------------------------------------------
# Règles projet
# ----------------------------------------------------------------------
def est_affecte(user: Any, projet: Any) -> bool:
    """Utilisateur responsable du projet ou affecté à au moins une de ses tâches"""
    user_id = getattr(user, "id", None)
    if user_id is None:
        return False
    if getattr(projet, "responsable_id", None) == user_id:
        return True
    return any(
        membre.id == user_id
        for tache in (getattr(projet, "taches", None) or [])
        for membre in (getattr(tache, "utilisateurs", None) or [])
    )


def check_can_close_project(projet: Any, current_user: Any) -> bool:
    """Clôture réservée aux administrateurs, toutes les tâches devant être clôturées"""
    if current_user is None:
        return False

    if _role(current_user) not in ROLES_GESTIONNAIRES:
        return False

    # Un projet sans tâche est clôturable
    return all(
        valeur(tache.etat) == EtatTache.CLOTUREE.value
        for tache in (getattr(projet, "taches", None) or [])
    )


def check_can_reopen_project(projet: Any, current_user: Any) -> bool:
    """Réouverture : super-admin partout, admin uniquement dans son département"""
    if current_user is None:
        return False

    role = _role(current_user)
    if role == UserRole.SUPER_ADMIN.value:
        return True

    if role == UserRole.ADMIN.value:
        return getattr(projet, "departement", None) == getattr(current_user, "departement", None)

    return False
