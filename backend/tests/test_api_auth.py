"""
Tests d'intégration API pour l'authentification et le contrôle d'accès.
"""

from conftest import login


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_login_succes(client):
    response = client.post("/api/v1/auth/login", json={"username": "admin", "password": "adminpassword"})

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"] == {"id": "admin1", "username": "admin", "role": "admin"}
    assert "password" not in data["user"]


def test_login_identifiants_invalides(client):
    response = client.post("/api/v1/auth/login", json={"username": "admin", "password": "salah"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Username atau password salah."


def test_login_body_manquant(client):
    assert client.post("/api/v1/auth/login").status_code == 422


def test_me(client, guru_headers):
    response = client.get("/api/v1/auth/me", headers=guru_headers)

    assert response.status_code == 200
    assert response.json()["role"] == "guru_piket"


def test_sans_jeton_401(client):
    assert client.get("/api/v1/students").status_code == 401


def test_jeton_invalide_401(client, admin_headers):
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer guru1"})
    assert response.status_code == 401


def test_logout_invalide_la_session(client, admin_headers):
    assert client.post("/api/v1/auth/logout", headers=admin_headers).status_code == 204
    assert client.get("/api/v1/auth/me", headers=admin_headers).status_code == 401


def test_nouvelle_connexion_remplace_la_session(client):
    """Une seule session active : la connexion du guru invalide le jeton admin."""
    admin_headers = login(client, "admin", "adminpassword")
    guru_headers = login(client, "guru", "gurupassword")

    assert client.get("/api/v1/auth/me", headers=admin_headers).status_code == 401
    assert client.get("/api/v1/auth/me", headers=guru_headers).status_code == 200
