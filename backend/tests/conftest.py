"""
Configuration partagée pour tous les tests.
Chaque test reçoit une base SQLite en mémoire neuve et une latence nulle.
"""

import os

# Avant l'import de l'application : aucun fichier spps.db, pas de latence, hachage rapide
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("API_LATENCY_MS", "0")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from spps.database import create_db_engine, init_db  # noqa: E402
from spps.dependencies import get_data_service  # noqa: E402
from spps.main import app  # noqa: E402
from spps.services.data_service import DataService  # noqa: E402
from spps.services.kv_store import KeyValueStore  # noqa: E402


@pytest.fixture
def store():
    """Stockage clé-valeur sur une base en mémoire isolée."""
    engine = create_db_engine("sqlite://")
    init_db(bind=engine)
    yield KeyValueStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    engine.dispose()


@pytest.fixture
def data_service(store):
    """Service de données initialisé (comptes admin/guru + 6 types d'infraction)."""
    service = DataService(store, latency=0)
    service.initialize()
    return service


@pytest.fixture
def client(data_service):
    """Client HTTP de test branché sur le service de données isolé."""
    app.dependency_overrides[get_data_service] = lambda: data_service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def login(client, username: str, password: str) -> dict:
    response = client.post("/api/v1/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    return login(client, "admin", "adminpassword")


@pytest.fixture
def guru_headers(client):
    return login(client, "guru", "gurupassword")
