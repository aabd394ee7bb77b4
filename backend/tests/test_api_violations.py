"""
Tests d'intégration API pour les types d'infraction et les infractions.
"""


# --- Helpers ---

def create_violation(client, headers, student_id="student-1", date="2024-08-01", type_ids=("v1",), notes=None):
    response = client.post("/api/v1/violations", headers=headers, json={
        "student_id": student_id, "date": date, "violation_type_ids": list(type_ids), "notes": notes,
    })
    assert response.status_code == 201
    return response.json()


# ============================================================
# /api/v1/violation-types
# ============================================================

def test_list_types_guru_piket(client, guru_headers):
    response = client.get("/api/v1/violation-types", headers=guru_headers)

    assert response.status_code == 200
    assert len(response.json()) == 6
    assert response.json()[0] == {"id": "v1", "name": "Tidak memakai topi"}


def test_create_type_guru_piket_interdit(client, guru_headers):
    response = client.post("/api/v1/violation-types", headers=guru_headers, json={"name": "Merokok"})
    assert response.status_code == 403


def test_create_type_admin(client, admin_headers):
    response = client.post("/api/v1/violation-types", headers=admin_headers, json={"name": " Merokok "})

    assert response.status_code == 201
    assert response.json()["name"] == "Merokok"
    assert response.json()["id"].startswith("vtype-")


def test_create_type_doublon(client, admin_headers):
    response = client.post("/api/v1/violation-types", headers=admin_headers, json={"name": "RAMBUT TIDAK RAPI"})

    assert response.status_code == 409
    assert response.json()["detail"] == "Jenis pelanggaran sudah ada."


def test_create_type_nom_vide(client, admin_headers):
    response = client.post("/api/v1/violation-types", headers=admin_headers, json={"name": ""})
    assert response.status_code == 422


def test_update_type(client, admin_headers):
    response = client.put("/api/v1/violation-types/v2", headers=admin_headers, json={"name": "Kaos kaki"})

    assert response.status_code == 200
    assert response.json() == {"id": "v2", "name": "Kaos kaki"}


def test_update_type_introuvable(client, admin_headers):
    response = client.put("/api/v1/violation-types/vtype-0", headers=admin_headers, json={"name": "X"})
    assert response.status_code == 404


def test_delete_type(client, admin_headers):
    assert client.delete("/api/v1/violation-types/v6", headers=admin_headers).json() == {"deleted": True}
    assert client.delete("/api/v1/violation-types/v6", headers=admin_headers).json() == {"deleted": False}


# ============================================================
# /api/v1/violations
# ============================================================

def test_create_violation(client, guru_headers):
    data = create_violation(client, guru_headers, type_ids=["v1", "v3"], notes="Rambut panjang")

    assert data["id"].startswith("violation-")
    assert data["date"] == "2024-08-01"
    assert data["violation_type_ids"] == ["v1", "v3"]


def test_create_violation_sans_type(client, guru_headers):
    response = client.post("/api/v1/violations", headers=guru_headers, json={
        "student_id": "student-1", "date": "2024-08-01", "violation_type_ids": [],
    })
    assert response.status_code == 422


def test_create_violation_date_invalide(client, guru_headers):
    response = client.post("/api/v1/violations", headers=guru_headers, json={
        "student_id": "student-1", "date": "01/08/2024", "violation_type_ids": ["v1"],
    })
    assert response.status_code == 422


def test_list_violations_filtrees(client, guru_headers):
    create_violation(client, guru_headers, student_id="student-1", date="2024-08-01")
    create_violation(client, guru_headers, student_id="student-1", date="2024-09-10")
    create_violation(client, guru_headers, student_id="student-2", date="2024-08-15")

    response = client.get(
        "/api/v1/violations",
        headers=guru_headers,
        params={"student_id": "student-1", "start_date": "2024-08-01", "end_date": "2024-08-31"},
    )

    assert response.status_code == 200
    assert [v["date"] for v in response.json()] == ["2024-08-01"]


def test_list_violations_plus_recentes_en_premier(client, guru_headers):
    create_violation(client, guru_headers, date="2024-08-01")
    create_violation(client, guru_headers, date="2024-09-10")

    dates = [v["date"] for v in client.get("/api/v1/violations", headers=guru_headers).json()]
    assert dates == ["2024-09-10", "2024-08-01"]


def test_update_violation(client, guru_headers):
    violation = create_violation(client, guru_headers, notes="awal")

    response = client.put(f"/api/v1/violations/{violation['id']}", headers=guru_headers, json={"notes": "revisi"})

    assert response.status_code == 200
    assert response.json()["notes"] == "revisi"
    assert response.json()["violation_type_ids"] == ["v1"]


def test_update_violation_introuvable(client, guru_headers):
    response = client.put("/api/v1/violations/violation-0", headers=guru_headers, json={"notes": "x"})

    assert response.status_code == 404
    assert response.json()["detail"] == "Catatan pelanggaran tidak ditemukan."


def test_delete_violation(client, guru_headers):
    violation = create_violation(client, guru_headers)

    assert client.delete(f"/api/v1/violations/{violation['id']}", headers=guru_headers).json() == {"deleted": True}
    assert client.delete(f"/api/v1/violations/{violation['id']}", headers=guru_headers).json() == {"deleted": False}


def test_create_violation_types_dupliques_retires(client, guru_headers):
    data = create_violation(client, guru_headers, type_ids=["v1", "v3", "v1"])
    assert data["violation_type_ids"] == ["v1", "v3"]


def test_type_repete_compte_une_fois_dans_le_rapport(client, guru_headers):
    student = client.post("/api/v1/students", headers=guru_headers, json={"name": "Budi", "class_name": "7A"}).json()
    create_violation(client, guru_headers, student_id=student["id"], type_ids=["v1", "v1"])

    rows = client.post("/api/v1/reports/summary", headers=guru_headers, json={}).json()

    assert rows[0]["total_incidents"] == 1
    assert rows[0]["violation_types"] == "Tidak memakai topi (1 kali)"


def test_update_violation_types_dupliques_retires(client, guru_headers):
    violation = create_violation(client, guru_headers)

    response = client.put(f"/api/v1/violations/{violation['id']}", headers=guru_headers, json={
        "violation_type_ids": ["v2", "v2", "v4"],
    })

    assert response.status_code == 200
    assert response.json()["violation_type_ids"] == ["v2", "v4"]


def test_update_violation_eleve_vide(client, guru_headers):
    violation = create_violation(client, guru_headers)

    response = client.put(f"/api/v1/violations/{violation['id']}", headers=guru_headers, json={"student_id": "  "})

    assert response.status_code == 422
    stored = client.get("/api/v1/violations", headers=guru_headers).json()
    assert stored[0]["student_id"] == "student-1"


def test_update_violation_eleve_nettoye(client, guru_headers):
    violation = create_violation(client, guru_headers)

    response = client.put(f"/api/v1/violations/{violation['id']}", headers=guru_headers, json={
        "student_id": " student-2 ",
    })
    assert response.json()["student_id"] == "student-2"


def test_list_violations_intervalle_inverse(client, guru_headers):
    create_violation(client, guru_headers, date="2024-08-15")

    response = client.get(
        "/api/v1/violations",
        headers=guru_headers,
        params={"start_date": "2024-09-01", "end_date": "2024-08-01"},
    )

    assert response.status_code == 422
    assert response.json()["detail"] == "Tanggal awal tidak boleh setelah tanggal akhir."
