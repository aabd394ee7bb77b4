"""
Router pour l'enregistrement des infractions.
Accessible aux administrateurs et aux guru piket.
"""

import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from spps.dependencies import get_violation_service, require_staff
from spps.exceptions import NotFound
from spps.schemas.user import UserResponse
from spps.schemas.violation import (
    DeleteResponse,
    ViolationCreate,
    ViolationResponse,
    ViolationUpdate,
)
from spps.services.report_service import filter_violations
from spps.services.violation_service import ViolationService

router = APIRouter(prefix="/api/v1/violations", tags=["Infractions"])


@router.get("", response_model=List[ViolationResponse], summary="Lister les infractions")
async def list_violations(
    student_id: Optional[str] = None,
    start_date: Optional[dt.date] = None,
    end_date: Optional[dt.date] = None,
    user: UserResponse = Depends(require_staff),
    violation_service: ViolationService = Depends(get_violation_service),
):
    """Filtres optionnels : élève, date de début et de fin (incluses). Plus récentes en premier."""
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=422, detail="Tanggal awal tidak boleh setelah tanggal akhir.")
    violations = await violation_service.get_all_violations()
    filtered = filter_violations(violations, student_id, start_date, end_date)
    return sorted(filtered, key=lambda v: v.date, reverse=True)


@router.post("", response_model=ViolationResponse, status_code=201, summary="Enregistrer une infraction")
async def create_violation(
    data: ViolationCreate,
    user: UserResponse = Depends(require_staff),
    violation_service: ViolationService = Depends(get_violation_service),
):
    return await violation_service.add_violation(data)


@router.put("/{violation_id}", response_model=ViolationResponse, summary="Modifier une infraction")
async def update_violation(
    violation_id: str,
    data: ViolationUpdate,
    user: UserResponse = Depends(require_staff),
    violation_service: ViolationService = Depends(get_violation_service),
):
    try:
        return await violation_service.update_violation(violation_id, data)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{violation_id}", response_model=DeleteResponse, summary="Supprimer une infraction")
async def delete_violation(
    violation_id: str,
    user: UserResponse = Depends(require_staff),
    violation_service: ViolationService = Depends(get_violation_service),
):
    return DeleteResponse(deleted=await violation_service.delete_violation(violation_id))
