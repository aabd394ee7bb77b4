"""
Configuration de la connexion à la base de données.
Le stockage applicatif est une unique table clé-valeur (voir models/kv_entry.py).
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from spps.config import settings

IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")

Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    kwargs = {}
    if database_url.startswith("sqlite"):
        # SQLite refuse par défaut le partage de connexion entre threads (threadpool FastAPI)
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in IN_MEMORY_URLS:
            # base en mémoire : une seule connexion, sinon chaque session voit une base vide
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


engine = create_db_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = engine) -> None:
    """Crée la table de stockage si elle n'existe pas encore."""
    import spps.models  # noqa: F401 (enregistre les modèles dans Base.metadata)

    Base.metadata.create_all(bind=bind)
