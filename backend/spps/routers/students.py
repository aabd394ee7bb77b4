"""
Router pour les élèves.
Listage, création, mise à jour, suppression et import Excel/CSV.
Accessible aux administrateurs et aux guru piket.
"""

from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from spps.config import settings
from spps.dependencies import get_student_service, require_staff
from spps.exceptions import DuplicateStudent, NotFound
from spps.schemas.student import StudentCreate, StudentImportReport, StudentResponse, StudentUpdate
from spps.schemas.user import UserResponse
from spps.schemas.violation import DeleteResponse
from spps.services.student_import import parse_student_file
from spps.services.student_service import StudentService

router = APIRouter(prefix="/api/v1/students", tags=["Élèves"])


@router.get("", response_model=List[StudentResponse], summary="Lister tous les élèves")
async def list_students(
    user: UserResponse = Depends(require_staff),
    student_service: StudentService = Depends(get_student_service),
):
    """Retourne tous les élèves triés par nom."""
    return await student_service.get_all_students()


@router.get("/{student_id}", response_model=StudentResponse, summary="Détail d'un élève")
async def get_student(
    student_id: str,
    user: UserResponse = Depends(require_staff),
    student_service: StudentService = Depends(get_student_service),
):
    student = await student_service.get_student_by_id(student_id)
    if student is None:
        raise HTTPException(status_code=404, detail="Siswa tidak ditemukan.")
    return student


@router.post("", response_model=StudentResponse, status_code=201, summary="Créer un élève")
async def create_student(
    data: StudentCreate,
    user: UserResponse = Depends(require_staff),
    student_service: StudentService = Depends(get_student_service),
):
    try:
        return await student_service.add_student(data)
    except DuplicateStudent as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/{student_id}", response_model=StudentResponse, summary="Modifier un élève")
async def update_student(
    student_id: str,
    data: StudentUpdate,
    user: UserResponse = Depends(require_staff),
    student_service: StudentService = Depends(get_student_service),
):
    """Met à jour les champs fournis d'un élève. Les champs absents ne sont pas modifiés."""
    try:
        return await student_service.update_student(student_id, data)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateStudent as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/{student_id}", response_model=DeleteResponse, summary="Supprimer un élève")
async def delete_student(
    student_id: str,
    user: UserResponse = Depends(require_staff),
    student_service: StudentService = Depends(get_student_service),
):
    """Un ID inexistant n'est pas une erreur : `deleted` vaut alors false."""
    return DeleteResponse(deleted=await student_service.delete_student(student_id))


ALLOWED_EXTENSIONS = (".xlsx", ".xlsm", ".csv")


@router.post("/upload", response_model=StudentImportReport, summary="Importer des élèves via Excel")
async def upload_students(
    file: UploadFile = File(...),
    user: UserResponse = Depends(require_staff),
    student_service: StudentService = Depends(get_student_service),
):
    """
    Importe une liste d'élèves depuis un fichier Excel (.xlsx) ou CSV.

    Format attendu :
    - Colonnes obligatoires : `Nama Siswa`, `Kelas`
    - Colonne optionnelle : `Jenis Kelamin` (Laki-laki par défaut)
    - Les élèves déjà présents (même nom et classe) sont ignorés

    Retourne un rapport avec les élèves réellement insérés.
    """
    filename = file.filename or ""
    if not filename.lower().endswith(ALLOWED_EXTENSIONS):
        raise HTTPException(
            status_code=400,
            detail="Format file tidak didukung. Gunakan file .xlsx atau .csv.",
        )

    content = await file.read()

    if len(content) > settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File terlalu besar. Ukuran maksimal: {settings.MAX_UPLOAD_SIZE_MB} MB.",
        )

    if not content:
        raise HTTPException(status_code=400, detail="File kosong.")

    try:
        batch = parse_student_file(filename, content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    inserted = await student_service.add_students_from_excel(batch.students)
    return StudentImportReport(
        total_rows=batch.total_rows,
        inserted=len(inserted),
        duplicates=len(batch.students) - len(inserted),
        rejected=batch.rejected,
        students=inserted,
    )
