"""
Router pour le catalogue des types d'infraction.
Lecture pour tous les rôles, modification réservée aux administrateurs.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from spps.dependencies import get_violation_service, require_admin, require_staff
from spps.exceptions import DuplicateViolationType, NotFound
from spps.schemas.user import UserResponse
from spps.schemas.violation import DeleteResponse, ViolationTypeCreate, ViolationTypeResponse
from spps.services.violation_service import ViolationService

router = APIRouter(prefix="/api/v1/violation-types", tags=["Types d'infraction"])


@router.get("", response_model=List[ViolationTypeResponse], summary="Lister les types d'infraction")
async def list_violation_types(
    user: UserResponse = Depends(require_staff),
    violation_service: ViolationService = Depends(get_violation_service),
):
    return await violation_service.get_all_violation_types()


@router.post("", response_model=ViolationTypeResponse, status_code=201, summary="Créer un type d'infraction")
async def create_violation_type(
    data: ViolationTypeCreate,
    admin: UserResponse = Depends(require_admin),
    violation_service: ViolationService = Depends(get_violation_service),
):
    """Le nom doit être unique (casse ignorée)."""
    try:
        return await violation_service.add_violation_type(data.name)
    except DuplicateViolationType as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/{type_id}", response_model=ViolationTypeResponse, summary="Renommer un type d'infraction")
async def update_violation_type(
    type_id: str,
    data: ViolationTypeCreate,
    admin: UserResponse = Depends(require_admin),
    violation_service: ViolationService = Depends(get_violation_service),
):
    try:
        return await violation_service.update_violation_type(type_id, data.name)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateViolationType as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/{type_id}", response_model=DeleteResponse, summary="Supprimer un type d'infraction")
async def delete_violation_type(
    type_id: str,
    admin: UserResponse = Depends(require_admin),
    violation_service: ViolationService = Depends(get_violation_service),
):
    """
    Supprime le type sans toucher aux infractions qui le référencent :
    elles gardent l'ID, ignoré à l'affichage du rapport.
    """
    return DeleteResponse(deleted=await violation_service.delete_violation_type(type_id))
