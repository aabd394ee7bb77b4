"""
Schémas Pydantic pour les élèves.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, field_validator


class Gender(str, Enum):
    LAKI_LAKI = "Laki-laki"
    PEREMPUAN = "Perempuan"


class StudentCreate(BaseModel):
    """Schéma de création d'un élève (POST /students et lignes d'import)."""
    name: str
    class_name: str
    gender: Gender = Gender.LAKI_LAKI

    @field_validator("name", "class_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Nama siswa dan kelas tidak boleh kosong.")
        return v.strip()


class StudentUpdate(BaseModel):
    """Schéma de mise à jour (PUT /students/{id}). Les champs absents ne sont pas modifiés."""
    name: Optional[str] = None
    class_name: Optional[str] = None
    gender: Optional[Gender] = None

    @field_validator("name", "class_name")
    @classmethod
    def not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Nama siswa dan kelas tidak boleh kosong.")
        return v.strip() if v else v


class StudentResponse(BaseModel):
    id: str
    name: str
    class_name: str
    gender: Gender


class StudentImportReport(BaseModel):
    """Rapport retourné après un import Excel/CSV."""
    total_rows: int
    inserted: int
    duplicates: int
    rejected: int
    students: List[StudentResponse]


class StudentImportBatch(BaseModel):
    """Lignes valides extraites d'un fichier Excel/CSV, avant insertion."""
    total_rows: int
    rejected: int
    students: List[StudentCreate]
