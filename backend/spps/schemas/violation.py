"""
Schémas Pydantic pour les types d'infraction et les infractions.

Note : on importe datetime en tant que module (dt) pour éviter le conflit de nommage
entre le champ `date` et le type `datetime.date` dans Pydantic v2.
"""

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, field_validator


class ViolationTypeCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Nama jenis pelanggaran tidak boleh kosong.")
        return v.strip()


class ViolationTypeResponse(BaseModel):
    id: str
    name: str


class ViolationCreate(BaseModel):
    student_id: str
    date: dt.date
    violation_type_ids: List[str]  # au moins 1 type, sans doublon
    notes: Optional[str] = None

    @field_validator("student_id")
    @classmethod
    def student_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Pilih siswa dan setidaknya satu jenis pelanggaran.")
        return v.strip()

    @field_validator("violation_type_ids")
    @classmethod
    def at_least_one_type(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("Pilih siswa dan setidaknya satu jenis pelanggaran.")
        # ensemble de types : doublons retirés, ordre conservé
        return list(dict.fromkeys(v))


class ViolationUpdate(BaseModel):
    """Les champs absents ne sont pas modifiés."""
    student_id: Optional[str] = None
    date: Optional[dt.date] = None
    violation_type_ids: Optional[List[str]] = None
    notes: Optional[str] = None

    @field_validator("student_id")
    @classmethod
    def student_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Pilih siswa dan setidaknya satu jenis pelanggaran.")
        return v.strip() if v is not None else v

    @field_validator("violation_type_ids")
    @classmethod
    def at_least_one_type(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is not None and not v:
            raise ValueError("Pilih siswa dan setidaknya satu jenis pelanggaran.")
        return list(dict.fromkeys(v)) if v is not None else v


class ViolationResponse(BaseModel):
    id: str
    student_id: str
    date: dt.date
    violation_type_ids: List[str]
    notes: Optional[str] = None


class DeleteResponse(BaseModel):
    """Résultat d'une suppression : False si l'ID n'existait pas."""
    deleted: bool
