"""
Middlewares HTTP : identifiant de requête, journal des accès, erreurs JSON,
en-têtes de sécurité, CORS et hôtes autorisés (pilotés par les settings).
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import List

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "no-referrer",
}


def _settings(app: FastAPI):
    return getattr(app.state, "settings", None)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def _origins(hosts: List[str]) -> List[str]:
    origins: List[str] = []
    for host in hosts or []:
        if host.startswith(("http://", "https://")):
            origins.append(host)
        else:
            origins.extend([f"http://{host}", f"https://{host}"])
    return origins


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Identifiant unique par requête, renvoyé dans X-Request-ID"""

    async def dispatch(self, request: Request, call_next):
        request.state.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        response = await call_next(request)
        response.headers["X-Request-ID"] = request.state.request_id
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Journal des requêtes ; les refus d'accès (401/403) sont signalés à part"""

    async def dispatch(self, request: Request, call_next):
        debut = time.perf_counter()
        response = await call_next(request)
        duree = time.perf_counter() - debut

        if response.status_code in (401, 403):
            logger.info("🔒 Accès refusé %s %s -> %s [%s] %.3fs", request.method, request.url.path,
                        response.status_code, _request_id(request), duree)
        else:
            logger.info("✅ %s %s -> %s [%s] %.3fs", request.method, request.url.path,
                        response.status_code, _request_id(request), duree)
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Toute exception non gérée devient une réponse JSON 500"""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("💥 Erreur non gérée sur %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=500,
                content={"detail": "Erreur interne du serveur", "request_id": _request_id(request)},
            )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response


# ----------------------------
# Installation
# ----------------------------
def setup_trusted_host_middleware(app: FastAPI, allowed_hosts: List[str]):
    s = _settings(app)
    strict = bool(s and s.TRUSTED_HOST_STRICT and not s.DEBUG)
    hosts = (allowed_hosts or ["*"]) if strict else ["*"]
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=hosts)
    logger.info("🏠 Hôtes autorisés: %s", hosts)


def setup_cors_middleware(app: FastAPI, allowed_hosts: List[str]):
    s = _settings(app)
    origins = ["*"] if (s and s.CORS_ALLOW_ALL) else _origins(allowed_hosts)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["authorization", "content-type", "accept"],
    )
    logger.info("🌐 Origines CORS: %s", origins)


def setup_error_handling_middleware(app: FastAPI):
    app.add_middleware(ErrorHandlingMiddleware)


def setup_access_log_middleware(app: FastAPI):
    app.add_middleware(AccessLogMiddleware)


def setup_request_id_middleware(app: FastAPI):
    app.add_middleware(RequestIDMiddleware)


def setup_security_headers_middleware(app: FastAPI):
    s = _settings(app)
    if s is None or s.SECURITY_HEADERS_ENABLED:
        app.add_middleware(SecurityHeadersMiddleware)
        logger.info("🔒 En-têtes de sécurité activés")


def setup_all_middlewares(app: FastAPI, allowed_hosts: List[str]):
    # Le dernier ajouté s'exécute en premier : RequestID enveloppe tous les autres,
    # les en-têtes de sécurité couvrent aussi les réponses 500
    setup_trusted_host_middleware(app, allowed_hosts)
    setup_cors_middleware(app, allowed_hosts)
    setup_error_handling_middleware(app)
    setup_security_headers_middleware(app)
    setup_access_log_middleware(app)
    setup_request_id_middleware(app)
    logger.info("✅ Middlewares configurés")
