# app_gestion_projets/services/permission_tables.py
"""
Tables statiques du contrôle d'accès :
- matrice des permissions par rôle (immuable, validée à la construction)
- catalogue des permissions système (identifiants utilisés par les surcharges)
- correspondance page de navigation -> (ressource, action)
"""
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, NamedTuple, Optional, Tuple, Union

from ..models.enums import UserRole, TypeRessource, ActionPermission

R = TypeRessource
A = ActionPermission


def valeur(element: Union[str, Enum, None]) -> Optional[str]:
    """Ramène un membre d'enum à sa valeur texte (les chaînes passent telles quelles)."""
    if isinstance(element, Enum):
        return element.value
    return element


class EntreePermission(NamedTuple):
    ressource: str
    action: str
    autorise: bool


class PermissionSysteme(NamedTuple):
    id: str
    ressource: str
    action: str
    description: str
    systeme: bool = True


def _e(ressource: TypeRessource, action: ActionPermission, autorise: bool) -> EntreePermission:
    return EntreePermission(ressource.value, action.value, autorise)


# Matrice de référence : chaque rôle liste explicitement chaque couple (ressource, action)
ROLE_PERMISSIONS: Dict[UserRole, List[EntreePermission]] = {
    UserRole.SUPER_ADMIN: [
        _e(R.DASHBOARD, A.VOIR, True),
        _e(R.PERFORMANCE, A.VOIR, True),
        _e(R.DEPARTEMENTS, A.VOIR, True),
        _e(R.DEPARTEMENTS, A.CREER, True),
        _e(R.DEPARTEMENTS, A.MODIFIER, True),
        _e(R.DEPARTEMENTS, A.SUPPRIMER, True),
        _e(R.MEMBRES, A.VOIR, True),
        _e(R.MEMBRES, A.CREER, True),
        _e(R.MEMBRES, A.MODIFIER, True),
        _e(R.MEMBRES, A.SUPPRIMER, True),
        _e(R.MEMBRES, A.GERER_ROLES, True),
        _e(R.PROJETS, A.VOIR, True),
        _e(R.PROJETS, A.CREER, True),
        _e(R.PROJETS, A.MODIFIER, True),
        _e(R.PROJETS, A.SUPPRIMER, True),
        _e(R.TACHES, A.VOIR, True),
        _e(R.TACHES, A.CREER, True),
        _e(R.TACHES, A.MODIFIER, True),
        _e(R.TACHES, A.SUPPRIMER, True),
        _e(R.COMMENTAIRES, A.VOIR, True),
        _e(R.COMMENTAIRES, A.CREER, True),
        _e(R.COMMENTAIRES, A.SUPPRIMER, True),
        _e(R.PIECES_JOINTES, A.VOIR, True),
        _e(R.PIECES_JOINTES, A.TELEVERSER, True),
        _e(R.PIECES_JOINTES, A.SUPPRIMER, True),
        _e(R.PARAMETRES, A.VOIR, True),
        _e(R.BUDGET, A.GERER_CATEGORIES, True),
        _e(R.PARAMETRES, A.GERER_PERMISSIONS, True),
        _e(R.COMPTES_RENDUS, A.VOIR, True),
        _e(R.COMPTES_RENDUS, A.CREER, True),
        _e(R.COMPTES_RENDUS, A.MODIFIER, True),
        _e(R.COMPTES_RENDUS, A.SUPPRIMER, True),
    ],
    UserRole.ADMIN: [
        _e(R.DASHBOARD, A.VOIR, True),
        _e(R.PERFORMANCE, A.VOIR, True),
        _e(R.DEPARTEMENTS, A.VOIR, True),
        _e(R.DEPARTEMENTS, A.CREER, True),
        _e(R.DEPARTEMENTS, A.MODIFIER, True),
        _e(R.DEPARTEMENTS, A.SUPPRIMER, True),
        _e(R.MEMBRES, A.VOIR, True),
        _e(R.MEMBRES, A.CREER, True),
        _e(R.MEMBRES, A.MODIFIER, True),
        _e(R.MEMBRES, A.SUPPRIMER, True),
        _e(R.MEMBRES, A.GERER_ROLES, False),
        _e(R.PROJETS, A.VOIR, True),
        _e(R.PROJETS, A.CREER, True),
        _e(R.PROJETS, A.MODIFIER, True),
        _e(R.PROJETS, A.SUPPRIMER, True),
        _e(R.TACHES, A.VOIR, True),
        _e(R.TACHES, A.CREER, True),
        _e(R.TACHES, A.MODIFIER, True),
        _e(R.TACHES, A.SUPPRIMER, True),
        _e(R.COMMENTAIRES, A.VOIR, True),
        _e(R.COMMENTAIRES, A.CREER, True),
        _e(R.COMMENTAIRES, A.SUPPRIMER, True),
        _e(R.PIECES_JOINTES, A.VOIR, True),
        _e(R.PIECES_JOINTES, A.TELEVERSER, True),
        _e(R.PIECES_JOINTES, A.SUPPRIMER, True),
        _e(R.PARAMETRES, A.VOIR, True),
        _e(R.BUDGET, A.GERER_CATEGORIES, True),
        _e(R.PARAMETRES, A.GERER_PERMISSIONS, False),
        _e(R.COMPTES_RENDUS, A.VOIR, True),
        _e(R.COMPTES_RENDUS, A.CREER, True),
        _e(R.COMPTES_RENDUS, A.MODIFIER, True),
        _e(R.COMPTES_RENDUS, A.SUPPRIMER, True),
    ],
    UserRole.UTILISATEUR: [
        _e(R.DASHBOARD, A.VOIR, True),
        _e(R.PERFORMANCE, A.VOIR, True),
        _e(R.DEPARTEMENTS, A.VOIR, False),
        _e(R.DEPARTEMENTS, A.CREER, False),
        _e(R.DEPARTEMENTS, A.MODIFIER, False),
        _e(R.DEPARTEMENTS, A.SUPPRIMER, False),
        _e(R.MEMBRES, A.VOIR, False),
        _e(R.MEMBRES, A.CREER, False),
        _e(R.MEMBRES, A.MODIFIER, False),
        _e(R.MEMBRES, A.SUPPRIMER, False),
        _e(R.MEMBRES, A.GERER_ROLES, False),
        _e(R.PROJETS, A.VOIR, True),  # Limité aux projets affectés
        _e(R.PROJETS, A.CREER, False),
        _e(R.PROJETS, A.MODIFIER, False),
        _e(R.PROJETS, A.SUPPRIMER, False),
        _e(R.TACHES, A.VOIR, True),  # Uniquement sur les projets affectés
        _e(R.TACHES, A.CREER, True),
        _e(R.TACHES, A.MODIFIER, True),
        _e(R.TACHES, A.SUPPRIMER, False),
        _e(R.COMMENTAIRES, A.VOIR, True),
        _e(R.COMMENTAIRES, A.CREER, True),
        _e(R.COMMENTAIRES, A.SUPPRIMER, False),
        _e(R.PIECES_JOINTES, A.VOIR, True),
        _e(R.PIECES_JOINTES, A.TELEVERSER, True),
        _e(R.PIECES_JOINTES, A.SUPPRIMER, False),
        _e(R.PARAMETRES, A.VOIR, False),
        _e(R.BUDGET, A.GERER_CATEGORIES, False),
        _e(R.PARAMETRES, A.GERER_PERMISSIONS, False),
        _e(R.COMPTES_RENDUS, A.VOIR, True),  # Lecture seule
        _e(R.COMPTES_RENDUS, A.CREER, False),
        _e(R.COMPTES_RENDUS, A.MODIFIER, False),
        _e(R.COMPTES_RENDUS, A.SUPPRIMER, False),
    ],
}


class TablePermissionsRole:
    """
    Matrice immuable rôle -> permissions.

    Chaque rôle doit couvrir exactement le même ensemble de couples
    (ressource, action), sans doublon : une table incomplète est une erreur
    de configuration levée dès la construction.
    """

    def __init__(self, permissions_par_role: Mapping[Union[str, UserRole], Iterable[EntreePermission]]):
        entrees: Dict[str, Tuple[EntreePermission, ...]] = {}
        index: Dict[str, Dict[Tuple[str, str], bool]] = {}

        for role, permissions in permissions_par_role.items():
            cle_role = valeur(role)
            lignes = tuple(
                EntreePermission(valeur(p.ressource), valeur(p.action), bool(p.autorise))
                for p in permissions
            )
            par_couple: Dict[Tuple[str, str], bool] = {}
            for ligne in lignes:
                couple = (ligne.ressource, ligne.action)
                if couple in par_couple:
                    raise ValueError(f"Permission dupliquée pour le rôle {cle_role}: {couple}")
                par_couple[couple] = ligne.autorise
            entrees[cle_role] = lignes
            index[cle_role] = par_couple

        univers = {frozenset(couples) for couples in index.values()}
        if len(univers) > 1:
            reference = frozenset().union(*univers)
            manquants = {
                role: sorted(reference - set(couples))
                for role, couples in index.items()
                if reference - set(couples)
            }
            raise ValueError(f"Table de permissions incomplète: {manquants}")

        self._entrees = MappingProxyType(entrees)
        self._index = MappingProxyType({role: MappingProxyType(c) for role, c in index.items()})
        self._univers: FrozenSet[Tuple[str, str]] = next(iter(univers), frozenset())

    @property
    def roles(self) -> List[str]:
        return list(self._entrees)

    @property
    def univers(self) -> FrozenSet[Tuple[str, str]]:
        """Ensemble des couples (ressource, action) connus de la table"""
        return self._univers

    def entrees(self, role: Union[str, UserRole]) -> Tuple[EntreePermission, ...]:
        return self._entrees.get(valeur(role), ())

    def lookup(self, role, ressource, action) -> Optional[bool]:
        """Valeur `autorise` de l'entrée exacte, None si le couple n'est pas listé pour ce rôle"""
        couples = self._index.get(valeur(role))
        if couples is None:
            return None
        return couples.get((valeur(ressource), valeur(action)))

    def as_matrix(self) -> Dict[str, Dict[str, bool]]:
        """Matrice {rôle: {"ressource:action": autorise}} dans l'ordre de la table"""
        return {
            role: {f"{e.ressource}:{e.action}": e.autorise for e in lignes}
            for role, lignes in self._entrees.items()
        }


TABLE_PERMISSIONS_DEFAUT = TablePermissionsRole(ROLE_PERMISSIONS)


# Catalogue des permissions système (identifiants référencés par les surcharges utilisateur)
PERMISSIONS_SYSTEME: Tuple[PermissionSysteme, ...] = (
    # Tableau de bord
    PermissionSysteme("dashboard_view", R.DASHBOARD.value, A.VOIR.value, "Accéder au tableau de bord"),

    # Projets
    PermissionSysteme("projects_view", R.PROJETS.value, A.VOIR.value, "Voir les projets"),
    PermissionSysteme("projects_create", R.PROJETS.value, A.CREER.value, "Créer des projets"),
    PermissionSysteme("projects_edit", R.PROJETS.value, A.MODIFIER.value, "Modifier les projets"),
    PermissionSysteme("projects_delete", R.PROJETS.value, A.SUPPRIMER.value, "Supprimer les projets"),
    PermissionSysteme("projects_export", R.PROJETS.value, A.EXPORTER.value, "Exporter les projets"),

    # Tâches
    PermissionSysteme("tasks_view", R.TACHES.value, A.VOIR.value, "Voir les tâches"),
    PermissionSysteme("tasks_create", R.TACHES.value, A.CREER.value, "Créer des tâches"),
    PermissionSysteme("tasks_edit", R.TACHES.value, A.MODIFIER.value, "Modifier les tâches"),
    PermissionSysteme("tasks_delete", R.TACHES.value, A.SUPPRIMER.value, "Supprimer les tâches"),
    PermissionSysteme("tasks_assign", R.TACHES.value, A.ASSIGNER.value, "Assigner des tâches"),

    # Membres
    PermissionSysteme("members_view", R.MEMBRES.value, A.VOIR.value, "Voir les membres"),
    PermissionSysteme("members_create", R.MEMBRES.value, A.CREER.value, "Créer des membres"),
    PermissionSysteme("members_edit", R.MEMBRES.value, A.MODIFIER.value, "Modifier les membres"),
    PermissionSysteme("members_delete", R.MEMBRES.value, A.SUPPRIMER.value, "Supprimer les membres"),
    PermissionSysteme("members_roles", R.MEMBRES.value, A.GERER_ROLES.value, "Gérer les rôles"),

    # Départements
    PermissionSysteme("departments_view", R.DEPARTEMENTS.value, A.VOIR.value, "Voir les départements"),
    PermissionSysteme("departments_create", R.DEPARTEMENTS.value, A.CREER.value, "Créer des départements"),
    PermissionSysteme("departments_edit", R.DEPARTEMENTS.value, A.MODIFIER.value, "Modifier les départements"),
    PermissionSysteme("departments_delete", R.DEPARTEMENTS.value, A.SUPPRIMER.value, "Supprimer les départements"),

    # Performance
    PermissionSysteme("performance_view", R.PERFORMANCE.value, A.VOIR.value, "Voir les performances"),

    # Budget
    PermissionSysteme("budget_view", R.BUDGET.value, A.VOIR.value, "Voir les budgets"),
    PermissionSysteme("budget_manage", R.BUDGET.value, A.GERER.value, "Gérer les budgets"),
    PermissionSysteme("budget_categories", R.BUDGET.value, A.GERER_CATEGORIES.value, "Gérer les catégories budgétaires"),

    # Paramètres
    PermissionSysteme("settings_view", R.PARAMETRES.value, A.VOIR.value, "Accéder aux paramètres"),
    PermissionSysteme("settings_permissions", R.PARAMETRES.value, A.GERER_PERMISSIONS.value, "Gérer les droits d'accès"),

    # Commentaires
    PermissionSysteme("comments_view", R.COMMENTAIRES.value, A.VOIR.value, "Voir les commentaires"),
    PermissionSysteme("comments_create", R.COMMENTAIRES.value, A.CREER.value, "Créer des commentaires"),
    PermissionSysteme("comments_delete", R.COMMENTAIRES.value, A.SUPPRIMER.value, "Supprimer les commentaires"),

    # Pièces jointes
    PermissionSysteme("attachments_view", R.PIECES_JOINTES.value, A.VOIR.value, "Voir les pièces jointes"),
    PermissionSysteme("attachments_upload", R.PIECES_JOINTES.value, A.TELEVERSER.value, "Télécharger des fichiers"),
    PermissionSysteme("attachments_delete", R.PIECES_JOINTES.value, A.SUPPRIMER.value, "Supprimer des fichiers"),

    # Comptes rendus de réunion
    PermissionSysteme("meeting_minutes_view", R.COMPTES_RENDUS.value, A.VOIR.value, "Voir les comptes rendus"),
    PermissionSysteme("meeting_minutes_create", R.COMPTES_RENDUS.value, A.CREER.value, "Créer des comptes rendus"),
    PermissionSysteme("meeting_minutes_edit", R.COMPTES_RENDUS.value, A.MODIFIER.value, "Modifier les comptes rendus"),
    PermissionSysteme("meeting_minutes_delete", R.COMPTES_RENDUS.value, A.SUPPRIMER.value, "Supprimer les comptes rendus"),
)

PERMISSIONS_PAR_ID: Mapping[str, PermissionSysteme] = MappingProxyType(
    {p.id: p for p in PERMISSIONS_SYSTEME}
)
PERMISSIONS_PAR_COUPLE: Mapping[Tuple[str, str], PermissionSysteme] = MappingProxyType(
    {(p.ressource, p.action): p for p in PERMISSIONS_SYSTEME}
)


# Pages de navigation -> permission de consultation correspondante
PAGE_PERMISSIONS: Mapping[str, Tuple[TypeRessource, ActionPermission]] = MappingProxyType({
    "dashboard": (R.DASHBOARD, A.VOIR),
    "performance": (R.PERFORMANCE, A.VOIR),
    "members": (R.MEMBRES, A.VOIR),
    "departments": (R.DEPARTEMENTS, A.VOIR),
    "closed-projects": (R.PROJETS, A.VOIR),
    "settings": (R.PARAMETRES, A.VOIR),
    "settings-general": (R.PARAMETRES, A.VOIR),
    "settings-budget": (R.PARAMETRES, A.VOIR),
    "settings-permissions": (R.PARAMETRES, A.VOIR),
    "meeting-minutes": (R.COMPTES_RENDUS, A.VOIR),
})
