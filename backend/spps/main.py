"""
Point d'entrée principal de l'API SPPS (pencatatan pelanggaran siswa).
Démarrage : uvicorn spps.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from spps.config import settings
from spps.database import init_db
from spps.routers import auth, reports, students, users, violation_types, violations
from spps.services.data_service import DataService
from spps.services.kv_store import KeyValueStore

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - [%(name)s] - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie : crée la table de stockage puis insère les données initiales."""
    init_db()
    data_service = DataService(KeyValueStore())
    data_service.initialize()
    app.state.data_service = data_service
    logger.info("Stockage initialisé (%s).", settings.ENV)
    yield
    logger.info("Arrêt de l'API.")


app = FastAPI(
    title="SPPS API",
    description="API de gestion des infractions des élèves (sistem pencatatan pelanggaran siswa)",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS : autorise tous les ports localhost en développement (à restreindre en production).
app.add_middleware(
    CORSMiddleware,
    allow_origins=[],
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
    expose_headers=["Content-Disposition"],
)


app.include_router(auth.router)
app.include_router(users.router)
app.include_router(students.router)
app.include_router(violation_types.router)
app.include_router(violations.router)
app.include_router(reports.router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour garantir que la réponse 500
    passe bien par CORSMiddleware (qui injecte les headers CORS).
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Terjadi kesalahan internal."},
    )


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "SPPS API", "version": "0.1.0"}
