"""
Authentification des membres

- Mots de passe hachés avec bcrypt (passlib)
- Jetons JWT portant l'email (`sub`) et le rôle du membre
- Dépendance `get_current_user` : jeton lu dans le cookie `access_token`
  ou dans l'en-tête `Authorization: Bearer`
"""

import datetime as dt
import logging
from typing import Optional

from fastapi import HTTPException, status, Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlmodel import Session, select

from ..models.base import User
from ..core.config import settings
from ..core.database import get_session

logger = logging.getLogger(__name__)

# auto_error=False : le cookie reste une alternative au header
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

COOKIE_TOKEN = "access_token"


# ----------------------------
# Membre connecté
# ----------------------------
async def get_current_user(
    request: Request,
    bearer_token: Optional[str] = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
) -> User:
    """Membre authentifié ; 401 sans jeton valide, 403 si le compte est désactivé"""
    token = _extract_token_from_request(request, bearer_token)
    if not token:
        raise _credentials_exception("Token manquant")

    payload = verify_token(token)
    if not payload or not payload.get("sub"):
        raise _credentials_exception("Token invalide")

    user = session.exec(select(User).where(User.email == payload["sub"])).first()
    if user is None:
        raise _credentials_exception("Utilisateur introuvable")
    if not user.actif:
        logger.info("⛔ Compte désactivé: %s", user.email)
        raise _forbidden_exception("Utilisateur inactif")

    return user


def _extract_token_from_request(request: Request, bearer_token: Optional[str]) -> Optional[str]:
    # Le cookie est prioritaire ; il peut contenir le préfixe "Bearer "
    cookie = request.cookies.get(COOKIE_TOKEN)
    if cookie:
        return cookie[7:] if cookie.startswith("Bearer ") else cookie
    return bearer_token or None


# ----------------------------
# Mots de passe
# ----------------------------
def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


# ----------------------------
# Jetons JWT
# ----------------------------
def create_access_token(data: dict, expires_delta: Optional[dt.timedelta] = None) -> str:
    """Signe `data` avec une expiration (ACCESS_TOKEN_EXPIRE_MINUTES par défaut)"""
    duree = expires_delta or dt.timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {**data, "exp": dt.datetime.now(dt.timezone.utc) + duree}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_user_token(user: User) -> str:
    """Jeton d'accès d'un membre : email en `sub`, rôle en clair"""
    role = user.role.value if hasattr(user.role, "value") else user.role
    return create_access_token({"sub": user.email, "role": role})


def verify_token(token: str) -> Optional[dict]:
    """Payload du jeton, None s'il est invalide ou expiré"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


def authenticate_user(session: Session, email: str, password: str) -> Optional[User]:
    """Membre actif correspondant aux identifiants (met à jour la dernière connexion)"""
    user = session.exec(select(User).where(User.email == email)).first()
    if user is None or not user.actif or not verify_password(password, user.mot_de_passe_hash):
        logger.info("🔑 Échec de connexion pour %s", email)
        return None

    user.derniere_connexion = dt.datetime.now(dt.timezone.utc)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


# ----------------------------
# Erreurs HTTP
# ----------------------------
def _credentials_exception(detail: str = "Identifiants invalides") -> HTTPException:
    return HTTPException(status.HTTP_401_UNAUTHORIZED, detail=detail,
                         headers={"WWW-Authenticate": "Bearer"})


def _forbidden_exception(detail: str = "Permissions insuffisantes") -> HTTPException:
    return HTTPException(status.HTTP_403_FORBIDDEN, detail=detail)


def _not_found_exception(detail: str = "Ressource introuvable") -> HTTPException:
    return HTTPException(status.HTTP_404_NOT_FOUND, detail=detail)


def _bad_request_exception(detail: str) -> HTTPException:
    return HTTPException(status.HTTP_400_BAD_REQUEST, detail=detail)
