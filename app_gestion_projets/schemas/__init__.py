"""
Schémas Pydantic de l'application de gestion de projets
"""
# Schémas utilisateurs
from .user_schemas import UserBase, UserResponse, MembreResponse, RoleUpdate

# Schémas authentification
from .auth_schemas import LoginRequest, TokenResponse, NavigationResponse

# Schémas permissions
from .permission_schemas import (
    PermissionCheckResponse, PermissionSystemeResponse, PermissionUtilisateurResponse,
    PermissionsUtilisateurResponse, PermissionOverrideRequest, MatricePermissionsResponse
)

# Schémas projets
from .projet_schemas import TacheResponse, ProjetResponse

__all__ = [
    "UserBase",
    "UserResponse",
    "MembreResponse",
    "RoleUpdate",
    "LoginRequest",
    "TokenResponse",
    "NavigationResponse",
    "PermissionCheckResponse",
    "PermissionSystemeResponse",
    "PermissionUtilisateurResponse",
    "PermissionsUtilisateurResponse",
    "PermissionOverrideRequest",
    "MatricePermissionsResponse",
    "TacheResponse",
    "ProjetResponse",
]
