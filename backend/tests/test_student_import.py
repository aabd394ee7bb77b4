"""
Tests unitaires pour la lecture des fichiers d'import élèves (Excel et CSV).
"""

import io

import pytest
from openpyxl import Workbook

from spps.schemas.student import Gender
from spps.services.student_import import parse_student_file


def make_xlsx(rows) -> bytes:
    """Construit un classeur .xlsx en mémoire (ligne 1 = en-têtes)."""
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


# --- Excel ---

def test_import_xlsx_basique():
    content = make_xlsx([
        ["Nama Siswa", "Kelas", "Jenis Kelamin"],
        ["Budi", "7A", "Laki-laki"],
        ["Ani", "7B", "Perempuan"],
    ])

    batch = parse_student_file("siswa.xlsx", content)

    assert batch.total_rows == 2
    assert batch.rejected == 0
    assert [(s.name, s.class_name, s.gender) for s in batch.students] == [
        ("Budi", "7A", Gender.LAKI_LAKI),
        ("Ani", "7B", Gender.PEREMPUAN),
    ]


def test_import_xlsx_genre_par_defaut_laki_laki():
    content = make_xlsx([
        ["Nama Siswa", "Kelas", "Jenis Kelamin"],
        ["Citra", "8A", "PEREMPUAN"],
        ["Dedi", "8A", "L"],
        ["Eka", "8A", None],
    ])

    genders = [s.gender for s in parse_student_file("siswa.xlsx", content).students]

    assert genders == [Gender.PEREMPUAN, Gender.LAKI_LAKI, Gender.LAKI_LAKI]


def test_import_xlsx_lignes_incompletes_rejetees():
    content = make_xlsx([
        ["Nama Siswa", "Kelas", "Jenis Kelamin"],
        ["Budi", None, "Laki-laki"],
        [None, "7A", "Perempuan"],
        ["Ani", "7B", "Perempuan"],
        [None, None, None],
    ])

    batch = parse_student_file("siswa.xlsx", content)

    assert batch.total_rows == 3
    assert batch.rejected == 2
    assert [s.name for s in batch.students] == ["Ani"]


def test_import_xlsx_classe_numerique():
    content = make_xlsx([["Nama Siswa", "Kelas"], ["Budi", 7]])

    batch = parse_student_file("siswa.xlsx", content)

    assert batch.students[0].class_name == "7"


def test_import_xlsx_sans_colonne_genre():
    content = make_xlsx([["Nama Siswa", "Kelas"], ["Budi", "7A"]])

    batch = parse_student_file("siswa.xlsx", content)

    assert batch.students[0].gender == Gender.LAKI_LAKI


def test_import_xlsx_entetes_insensibles_casse():
    content = make_xlsx([["  nama siswa ", "KELAS"], ["Budi", "7A"]])

    assert len(parse_student_file("SISWA.XLSX", content).students) == 1


def test_import_xlsx_colonne_manquante():
    content = make_xlsx([["Nama", "Kelas"], ["Budi", "7A"]])

    with pytest.raises(ValueError, match="nama siswa"):
        parse_student_file("siswa.xlsx", content)


def test_import_xlsx_fichier_corrompu():
    with pytest.raises(ValueError, match="Excel"):
        parse_student_file("siswa.xlsx", b"pas un classeur")


# --- CSV ---

def test_import_csv_basique():
    content = b"Nama Siswa,Kelas,Jenis Kelamin\nBudi,7A,Laki-laki\nAni,7B,perempuan\n"

    batch = parse_student_file("siswa.csv", content)

    assert len(batch.students) == 2
    assert batch.students[1].gender == Gender.PEREMPUAN


def test_import_csv_separateur_point_virgule():
    content = b"Nama Siswa;Kelas;Jenis Kelamin\nBudi;7A;Laki-laki\n"

    batch = parse_student_file("siswa.csv", content)

    assert batch.students[0].class_name == "7A"


def test_import_csv_avec_bom():
    content = "Nama Siswa,Kelas\nBudi,7A\n".encode("utf-8-sig")

    assert len(parse_student_file("siswa.csv", content).students) == 1


def test_import_csv_lignes_vides_ignorees():
    content = b"Nama Siswa,Kelas\nBudi,7A\n\n\nAni,7B\n"

    batch = parse_student_file("siswa.csv", content)

    assert batch.total_rows == 2
    assert batch.rejected == 0


def test_import_csv_vide():
    with pytest.raises(ValueError):
        parse_student_file("siswa.csv", b"")


def test_extension_non_supportee():
    with pytest.raises(ValueError, match="tidak didukung"):
        parse_student_file("siswa.pdf", b"%PDF")
