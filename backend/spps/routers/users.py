"""
Router de gestion des comptes utilisateurs (réservé aux administrateurs).
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from spps.dependencies import get_auth_service, require_admin
from spps.exceptions import DuplicateUsername, NotFound, SelfDeletionForbidden
from spps.schemas.user import UserCreate, UserResponse, UserUpdate
from spps.schemas.violation import DeleteResponse
from spps.services.auth_service import AuthService

router = APIRouter(prefix="/api/v1/users", tags=["Utilisateurs"])


@router.get("", response_model=List[UserResponse], summary="Lister les utilisateurs")
async def list_users(
    admin: UserResponse = Depends(require_admin),
    auth_service: AuthService = Depends(get_auth_service),
):
    return await auth_service.get_all_users()


@router.post("", response_model=UserResponse, status_code=201, summary="Créer un utilisateur")
async def create_user(
    data: UserCreate,
    admin: UserResponse = Depends(require_admin),
    auth_service: AuthService = Depends(get_auth_service),
):
    try:
        return await auth_service.add_user(data)
    except DuplicateUsername as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/{user_id}", response_model=UserResponse, summary="Modifier un utilisateur")
async def update_user(
    user_id: str,
    data: UserUpdate,
    admin: UserResponse = Depends(require_admin),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Un mot de passe vide ou absent conserve le mot de passe actuel."""
    try:
        return await auth_service.update_user(user_id, data)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateUsername as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/{user_id}", response_model=DeleteResponse, summary="Supprimer un utilisateur")
async def delete_user(
    user_id: str,
    admin: UserResponse = Depends(require_admin),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Un administrateur ne peut pas supprimer son propre compte."""
    try:
        deleted = await auth_service.delete_user(user_id, admin)
    except SelfDeletionForbidden as e:
        raise HTTPException(status_code=403, detail=str(e))
    return DeleteResponse(deleted=deleted)
