"""
Service de génération du rapport PDF des infractions.

Le calcul (regroupement par élève, comptage par type) est une fonction pure,
séparée du rendu reportlab pour être testable sans PDF.
"""

import datetime as dt
import io
import logging
from typing import Dict, List, Optional
from xml.sax.saxutils import escape

from pydantic import ValidationError
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from spps.config import settings
from spps.schemas.report import ReportRow, SignatureNames
from spps.schemas.student import StudentResponse
from spps.schemas.violation import ViolationResponse, ViolationTypeResponse
from spps.services.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

SIGNATURE_NAMES_KEY = "spps_signature_names"

TABLE_HEADER = ["No", "Nama Siswa", "Kelas", "Total Insiden", "Jenis Pelanggaran", "Catatan"]
PRINCIPAL_LABEL = "Kepala Sekolah"
DUTY_TEACHER_LABEL = "Guru Piket"
PRINCIPAL_PLACEHOLDER = "Nama Kepala Sekolah"
DUTY_TEACHER_PLACEHOLDER = "Nama Guru Piket"


def format_date(value: dt.date) -> str:
    """Format court indonésien : 5/3/2024."""
    return f"{value.day}/{value.month}/{value.year}"


# --- Noms des signataires ---

def load_signature_names(store: KeyValueStore) -> SignatureNames:
    """Noms vides si rien n'est enregistré ou si la valeur stockée est illisible."""
    stored = store.load(SIGNATURE_NAMES_KEY, None)
    if stored is None:
        return SignatureNames()
    try:
        return SignatureNames.model_validate(stored)
    except ValidationError as exc:
        logger.error("Noms des signataires illisibles, valeurs par défaut utilisées : %s", exc)
        return SignatureNames()


def save_signature_names(store: KeyValueStore, names: SignatureNames) -> SignatureNames:
    store.save(SIGNATURE_NAMES_KEY, names.model_dump())
    return names


# --- Filtres appliqués par l'appelant ---

def filter_violations(
    violations: List[ViolationResponse],
    student_id: Optional[str] = None,
    start_date: Optional[dt.date] = None,
    end_date: Optional[dt.date] = None,
) -> List[ViolationResponse]:
    """Filtre par élève et/ou par intervalle de dates (bornes incluses)."""
    return [
        v for v in violations
        if (not student_id or v.student_id == student_id)
        and (start_date is None or v.date >= start_date)
        and (end_date is None or v.date <= end_date)
    ]


def describe_filters(
    students: List[StudentResponse],
    student_id: Optional[str] = None,
    start_date: Optional[dt.date] = None,
    end_date: Optional[dt.date] = None,
) -> str:
    """Texte imprimé sous le titre, ex. "Siswa: Budi, Dari: 1/8/2024"."""
    parts = []
    if student_id:
        student = next((s for s in students if s.id == student_id), None)
        if student:
            parts.append(f"Siswa: {student.name}")
    if start_date:
        parts.append(f"Dari: {format_date(start_date)}")
    if end_date:
        parts.append(f"Sampai: {format_date(end_date)}")
    return ", ".join(parts)


# --- Agrégation ---

def aggregate_violations(
    students: List[StudentResponse],
    violations: List[ViolationResponse],
    violation_types: List[ViolationTypeResponse],
) -> List[ReportRow]:
    """
    Regroupe les infractions par élève.

    - Infraction dont l'élève est introuvable : ignorée
    - Total d'incidents : +1 par type cité dans chaque infraction
    - Types : "Nom (n kali)" dans l'ordre de première apparition ; un type
      supprimé compte dans le total mais n'est pas listé
    - Lignes triées par nom d'élève, numérotées après le tri
    """
    students_by_id = {s.id: s for s in students}
    type_names = {t.id: t.name for t in violation_types}

    # student_id → {"student", "total", "counts", "notes"}
    summaries: Dict[str, dict] = {}

    for violation in violations:
        student = students_by_id.get(violation.student_id)
        if student is None:
            continue

        summary = summaries.setdefault(student.id, {
            "student": student,
            "total": 0,
            "counts": {},
            "notes": [],
        })
        for type_id in dict.fromkeys(violation.violation_type_ids):
            summary["counts"][type_id] = summary["counts"].get(type_id, 0) + 1
            summary["total"] += 1
        if violation.notes:
            summary["notes"].append(violation.notes)

    ordered = sorted(summaries.values(), key=lambda s: s["student"].name)

    rows = []
    for index, summary in enumerate(ordered, start=1):
        types_list = ", ".join(
            f"{type_names[type_id]} ({count} kali)"
            for type_id, count in summary["counts"].items()
            if type_id in type_names
        )
        rows.append(ReportRow(
            no=index,
            student_name=summary["student"].name,
            class_name=summary["student"].class_name,
            total_incidents=summary["total"],
            violation_types=types_list,
            notes="; ".join(summary["notes"]),
        ))
    return rows


# --- Rendu PDF ---

def render_report_pdf(
    rows: List[ReportRow],
    signatures: SignatureNames,
    title: str = settings.REPORT_TITLE,
    filters_applied: str = "",
    printed_on: Optional[dt.date] = None,
) -> bytes:
    """Produit le PDF : titre, date d'impression, filtres, tableau et deux blocs de signature."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=1.5 * cm,
        leftMargin=1.5 * cm,
        topMargin=1.5 * cm,
        bottomMargin=1.5 * cm,
        title=title,
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "ReportTitle",
        parent=styles["Heading1"],
        fontSize=18,
        alignment=TA_CENTER,
        spaceAfter=6,
    )
    centered_style = ParagraphStyle(
        "ReportCentered",
        parent=styles["Normal"],
        fontSize=10,
        alignment=TA_CENTER,
        spaceAfter=2,
    )
    cell_style = ParagraphStyle("ReportCell", parent=styles["Normal"], fontSize=8, leading=10)

    content = [
        Paragraph(escape(title), title_style),
        Paragraph(f"Tanggal Cetak: {format_date(printed_on or dt.date.today())}", centered_style),
    ]
    if filters_applied:
        content.append(Paragraph(escape(f"Filter: {filters_applied}"), centered_style))
    content.append(Spacer(1, 0.6 * cm))

    # Paragraph pour que les longues cellules passent à la ligne
    data = [TABLE_HEADER] + [
        [
            str(row.no),
            Paragraph(escape(row.student_name), cell_style),
            row.class_name,
            str(row.total_incidents),
            Paragraph(escape(row.violation_types), cell_style),
            Paragraph(escape(row.notes), cell_style),
        ]
        for row in rows
    ]
    table = Table(
        data,
        colWidths=[1 * cm, 3.5 * cm, 1.8 * cm, 2 * cm, 5.5 * cm, 4.2 * cm],
        repeatRows=1,
    )
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.Color(200 / 255, 200 / 255, 200 / 255)),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.black),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("ALIGN", (0, 1), (0, -1), "CENTER"),
        ("ALIGN", (2, 1), (3, -1), "CENTER"),
    ]))
    content.append(table)
    content.append(Spacer(1, 1.5 * cm))

    signature_table = Table(
        [
            [PRINCIPAL_LABEL, DUTY_TEACHER_LABEL],
            ["", ""],
            ["______________________", "______________________"],
            [
                signatures.kepala_sekolah or PRINCIPAL_PLACEHOLDER,
                signatures.guru_piket or DUTY_TEACHER_PLACEHOLDER,
            ],
        ],
        colWidths=[doc.width / 2, doc.width / 2],
        rowHeights=[None, 1.8 * cm, None, None],
    )
    signature_table.setStyle(TableStyle([
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
    ]))
    content.append(signature_table)

    doc.build(content)
    return buffer.getvalue()


def generate_violation_report(
    students: List[StudentResponse],
    violations: List[ViolationResponse],
    violation_types: List[ViolationTypeResponse],
    signatures: SignatureNames,
    title: str = settings.REPORT_TITLE,
    filters_applied: str = "",
) -> bytes:
    """Agrège les infractions déjà filtrées et retourne le PDF."""
    rows = aggregate_violations(students, violations, violation_types)
    logger.info("Rapport PDF : %d élève(s), %d infraction(s)", len(rows), len(violations))
    return render_report_pdf(rows, signatures, title, filters_applied)
