"""
Schémas Pydantic pour le rapport PDF des infractions.
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, model_validator


class SignatureNames(BaseModel):
    """Noms imprimés sous les deux blocs de signature du rapport."""
    guru_piket: str = ""
    kepala_sekolah: str = ""


class ReportRequest(BaseModel):
    """
    Filtres du rapport. Sans `signatures`, les noms enregistrés sont utilisés.
    """
    student_id: Optional[str] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    title: Optional[str] = None
    signatures: Optional[SignatureNames] = None

    @model_validator(mode="after")
    def check_date_range(self) -> "ReportRequest":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("Tanggal awal tidak boleh setelah tanggal akhir.")
        return self


class ReportRow(BaseModel):
    """Une ligne du tableau : un élève et le cumul de ses infractions."""
    no: int
    student_name: str
    class_name: str
    total_incidents: int
    violation_types: str
    notes: str
