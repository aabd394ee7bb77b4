"""
Router du rapport des infractions : noms des signataires, aperçu et export PDF.
Accessible aux administrateurs et aux guru piket.
"""

from typing import List, Tuple

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from spps.config import settings
from spps.dependencies import get_store, get_student_service, get_violation_service, require_staff
from spps.schemas.report import ReportRequest, ReportRow, SignatureNames
from spps.schemas.student import StudentResponse
from spps.schemas.user import UserResponse
from spps.schemas.violation import ViolationResponse, ViolationTypeResponse
from spps.services import report_service
from spps.services.kv_store import KeyValueStore
from spps.services.student_service import StudentService
from spps.services.violation_service import ViolationService

router = APIRouter(prefix="/api/v1/reports", tags=["Rapports"])

NO_DATA_MESSAGE = "Tidak ada catatan pelanggaran yang sesuai dengan filter yang dipilih."


async def _load_report_data(
    request: ReportRequest,
    student_service: StudentService,
    violation_service: ViolationService,
) -> Tuple[List[StudentResponse], List[ViolationResponse], List[ViolationTypeResponse]]:
    """Charge les collections et applique les filtres ; 404 si aucune infraction ne correspond."""
    students = await student_service.get_all_students()
    violations = await violation_service.get_all_violations()
    violation_types = await violation_service.get_all_violation_types()

    filtered = report_service.filter_violations(
        violations, request.student_id, request.start_date, request.end_date
    )
    if not filtered:
        raise HTTPException(status_code=404, detail=NO_DATA_MESSAGE)
    return students, filtered, violation_types


@router.get("/signatures", response_model=SignatureNames, summary="Noms des signataires")
async def get_signatures(
    user: UserResponse = Depends(require_staff),
    store: KeyValueStore = Depends(get_store),
):
    return report_service.load_signature_names(store)


@router.put("/signatures", response_model=SignatureNames, summary="Enregistrer les signataires")
async def save_signatures(
    data: SignatureNames,
    user: UserResponse = Depends(require_staff),
    store: KeyValueStore = Depends(get_store),
):
    return report_service.save_signature_names(store, data)


@router.post("/summary", response_model=List[ReportRow], summary="Aperçu du rapport")
async def report_summary(
    request: ReportRequest,
    user: UserResponse = Depends(require_staff),
    student_service: StudentService = Depends(get_student_service),
    violation_service: ViolationService = Depends(get_violation_service),
):
    """Retourne les lignes du rapport (une par élève) sans générer le PDF."""
    students, violations, violation_types = await _load_report_data(
        request, student_service, violation_service
    )
    return report_service.aggregate_violations(students, violations, violation_types)


@router.post("/pdf", summary="Télécharger le rapport PDF")
async def report_pdf(
    request: ReportRequest,
    user: UserResponse = Depends(require_staff),
    store: KeyValueStore = Depends(get_store),
    student_service: StudentService = Depends(get_student_service),
    violation_service: ViolationService = Depends(get_violation_service),
):
    """
    Génère le rapport PDF des infractions filtrées.
    Sans `signatures` dans la requête, les noms enregistrés sont utilisés.
    """
    students, violations, violation_types = await _load_report_data(
        request, student_service, violation_service
    )
    signatures = request.signatures or report_service.load_signature_names(store)
    filters_applied = report_service.describe_filters(
        students, request.student_id, request.start_date, request.end_date
    )

    pdf = report_service.generate_violation_report(
        students,
        violations,
        violation_types,
        signatures,
        title=request.title or settings.REPORT_TITLE,
        filters_applied=filters_applied,
    )

    return StreamingResponse(
        iter([pdf]),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={settings.REPORT_FILENAME}"},
    )
