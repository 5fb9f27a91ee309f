"""
Routers FastAPI de l'application de gestion de projets
"""
# Router d'authentification
from .auth import router as auth_router

# Routers de contrôle d'accès et de gestion
from .permissions import router as permissions_router
from .membres import router as membres_router
from .projets import router as projets_router

# Configuration des routers avec préfixes et tags
router_configs = [
    (auth_router, "/auth", ["authentification"]),
    (permissions_router, "/permissions", ["permissions"]),
    (membres_router, "/membres", ["membres"]),
    (projets_router, "/projets", ["projets"]),
]

__all__ = [
    "auth_router",
    "permissions_router",
    "membres_router",
    "projets_router",
    "router_configs",
]
