"""
Router pour l'authentification
"""
from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session

from ..core.config import settings
from ..core.database import get_session
from ..core.permissions import get_permission_service
from ..core.security import (
    get_current_user, create_user_token, authenticate_user, _credentials_exception
)
from ..models.base import User
from ..schemas import LoginRequest, TokenResponse, UserResponse, NavigationResponse
from ..services.permissions import PermissionService

router = APIRouter()


def _token_response(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_user_token(user),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserResponse.model_validate(user),
    )


@router.post("/token", response_model=TokenResponse)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: Session = Depends(get_session)
):
    """Connexion OAuth2 (formulaire username/password)"""
    user = authenticate_user(session, form_data.username, form_data.password)
    if not user:
        raise _credentials_exception("Email ou mot de passe incorrect")
    return _token_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    session: Session = Depends(get_session)
):
    """Connexion JSON"""
    user = authenticate_user(session, credentials.email, credentials.mot_de_passe)
    if not user:
        raise _credentials_exception("Email ou mot de passe incorrect")
    return _token_response(user)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Récupère les informations de l'utilisateur connecté"""
    return UserResponse.model_validate(current_user)


@router.get("/me/navigation", response_model=NavigationResponse)
async def get_navigation(
    current_user: User = Depends(get_current_user),
    permission_service: PermissionService = Depends(get_permission_service)
):
    """Pages de navigation accessibles à l'utilisateur connecté"""
    return NavigationResponse(pages=permission_service.get_accessible_pages(current_user))
