"""
Service d'import Excel/CSV pour les élèves.
Gère la lecture du fichier (xlsx ou csv) et la validation des lignes.
La détection des doublons et l'insertion sont faites par le service de données.

Colonnes attendues (insensibles à la casse) : "Nama Siswa", "Kelas",
"Jenis Kelamin" (optionnelle).
"""

import csv
import io
import logging
import zipfile
from typing import Any, List, Optional, Tuple

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from spps.schemas.student import Gender, StudentCreate, StudentImportBatch

logger = logging.getLogger(__name__)

NAME_COLUMN = "nama siswa"
CLASS_COLUMN = "kelas"
GENDER_COLUMN = "jenis kelamin"
REQUIRED_COLUMNS = {NAME_COLUMN, CLASS_COLUMN}

EXCEL_EXTENSIONS = (".xlsx", ".xlsm")
CSV_EXTENSIONS = (".csv",)


def _normalize_header(raw: Any) -> str:
    """Normalise un nom de colonne : minuscules, sans espaces autour."""
    return str(raw).strip().lower() if raw is not None else ""


def _detect_separator(sample: str) -> str:
    """Détecte le séparateur CSV (virgule ou point-virgule)."""
    if sample.count(";") >= sample.count(","):
        return ";"
    return ","


def _cell_to_str(value: Any) -> str:
    """Convertit une cellule en texte ; 7.0 (nombre Excel) devient "7"."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _parse_gender(raw: str) -> Gender:
    """Perempuan uniquement si la cellule vaut "perempuan" (casse ignorée)."""
    return Gender.PEREMPUAN if raw.lower() == "perempuan" else Gender.LAKI_LAKI


def _read_csv(content: bytes) -> Tuple[List[str], List[List[str]]]:
    text = content.decode("utf-8-sig")  # utf-8-sig gère le BOM Excel
    lines = text.splitlines()
    separator = _detect_separator(lines[0] if lines else "")
    rows = list(csv.reader(io.StringIO(text), delimiter=separator))
    if not rows:
        return [], []
    return rows[0], rows[1:]


def _read_excel(content: bytes) -> Tuple[List[Any], List[Tuple[Any, ...]]]:
    """Lit la première feuille du classeur ; la ligne 1 contient les en-têtes."""
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
        raise ValueError(f"Gagal membaca file Excel: {exc}") from exc

    try:
        rows = list(workbook.worksheets[0].iter_rows(values_only=True))
    finally:
        workbook.close()

    if not rows:
        return [], []
    return list(rows[0]), rows[1:]


def parse_student_file(filename: str, content: bytes) -> StudentImportBatch:
    """
    Extrait les élèves d'un fichier Excel ou CSV.

    Règles :
    - Colonnes requises : Nama Siswa, Kelas
    - Lignes entièrement vides : ignorées
    - Lignes sans nom ou sans classe : rejetées
    - Jenis Kelamin : Perempuan si la cellule vaut "perempuan", sinon Laki-laki

    Lève ValueError si le format est illisible ou si une colonne requise manque.
    """
    lowered = filename.lower()
    if lowered.endswith(EXCEL_EXTENSIONS):
        headers, rows = _read_excel(content)
    elif lowered.endswith(CSV_EXTENSIONS):
        headers, rows = _read_csv(content)
    else:
        raise ValueError("Format file tidak didukung. Gunakan file .xlsx atau .csv.")

    column_index = {_normalize_header(h): i for i, h in enumerate(headers)}
    missing = REQUIRED_COLUMNS - column_index.keys()
    if missing:
        raise ValueError(f"Kolom wajib tidak ditemukan: {', '.join(sorted(missing))}")

    def cell(row, column: str) -> str:
        index: Optional[int] = column_index.get(column)
        if index is None or index >= len(row):
            return ""
        return _cell_to_str(row[index])

    students: List[StudentCreate] = []
    total_rows = 0
    rejected = 0

    for row in rows:
        if not any(_cell_to_str(value) for value in row):
            continue
        total_rows += 1

        name = cell(row, NAME_COLUMN)
        class_name = cell(row, CLASS_COLUMN)
        if not name or not class_name:
            rejected += 1
            continue

        students.append(StudentCreate(
            name=name,
            class_name=class_name,
            gender=_parse_gender(cell(row, GENDER_COLUMN)),
        ))

    logger.info(
        "Fichier %s lu : %d lignes, %d valides, %d rejetées",
        filename, total_rows, len(students), rejected,
    )
    return StudentImportBatch(total_rows=total_rows, rejected=rejected, students=students)
