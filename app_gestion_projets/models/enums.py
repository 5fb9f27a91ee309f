# app_gestion_projets/models/enums.py
from enum import Enum

class UserRole(str, Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    UTILISATEUR = "UTILISATEUR"

class TypeRessource(str, Enum):
    """Ressources soumises au contrôle d'accès"""
    DASHBOARD = "dashboard"
    PERFORMANCE = "performance"
    DEPARTEMENTS = "departments"
    MEMBRES = "members"
    PROJETS = "projects"
    TACHES = "tasks"
    COMMENTAIRES = "comments"
    PIECES_JOINTES = "attachments"
    PARAMETRES = "settings"
    BUDGET = "budget"
    COMPTES_RENDUS = "meeting-minutes"

class ActionPermission(str, Enum):
    """Actions possibles sur une ressource"""
    VOIR = "view"
    CREER = "create"
    MODIFIER = "edit"
    METTRE_A_JOUR = "update"
    SUPPRIMER = "delete"
    GERER_ROLES = "manage_roles"
    GERER_PERMISSIONS = "manage_permissions"
    GERER_CATEGORIES = "manage_categories"
    TELEVERSER = "upload"
    ASSIGNER = "assign"
    EXPORTER = "export"
    GERER = "manage"

class EtatTache(str, Enum):
    NON_DEBUTEE = "non_debutee"
    EN_COURS = "en_cours"
    CLOTUREE = "cloturee"

class StatutProjet(str, Enum):
    ACTIF = "actif"
    CLOTURE = "cloture"

class ActionLogPermission(str, Enum):
    ACCORDER = "ACCORDER"
    REVOQUER = "REVOQUER"
    CHANGER_ROLE = "CHANGER_ROLE"
