"""
Router d'authentification : connexion, déconnexion, utilisateur courant.
"""

from fastapi import APIRouter, Depends, HTTPException

from spps.dependencies import get_auth_service, get_current_user
from spps.exceptions import InvalidCredentials
from spps.schemas.user import LoginRequest, LoginResponse, UserResponse
from spps.services.auth_service import AuthService

router = APIRouter(prefix="/api/v1/auth", tags=["Authentification"])


@router.post("/login", response_model=LoginResponse, summary="Se connecter")
async def login(data: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Retourne le jeton de session à présenter en `Authorization: Bearer <token>`."""
    try:
        return await auth_service.login(data.username, data.password)
    except InvalidCredentials as e:
        raise HTTPException(status_code=401, detail=str(e))


@router.post("/logout", status_code=204, summary="Se déconnecter")
async def logout(
    user: UserResponse = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    await auth_service.logout()


@router.get("/me", response_model=UserResponse, summary="Utilisateur connecté")
async def me(user: UserResponse = Depends(get_current_user)):
    return user
