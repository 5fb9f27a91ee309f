"""
Schémas Pydantic pour les permissions
"""
from pydantic import BaseModel, ConfigDict
from typing import Dict, List, Optional
from datetime import datetime


class PermissionCheckResponse(BaseModel):
    ressource: str
    action: str
    autorise: bool


class PermissionSystemeResponse(BaseModel):
    id: str
    ressource: str
    action: str
    description: str
    systeme: bool = True


class PermissionUtilisateurResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    utilisateur_id: int
    permission_id: str
    accordee: bool
    accordee_par: int
    accordee_le: datetime


class PermissionsUtilisateurResponse(BaseModel):
    utilisateur_id: int
    role: str
    effectives: List[PermissionSystemeResponse]
    surcharges: List[PermissionUtilisateurResponse]


class PermissionOverrideRequest(BaseModel):
    permission_id: str
    raison: Optional[str] = None


class MatricePermissionsResponse(BaseModel):
    roles: Dict[str, Dict[str, bool]]
