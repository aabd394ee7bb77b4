"""
Stockage clé-valeur persistant.

Chaque valeur est sérialisée en JSON et rangée sous une clé texte dans la
table kv_entries. Les consommateurs lisent toujours la collection complète,
la modifient puis la réécrivent entièrement (read-modify-write).

Les erreurs de sérialisation ou d'accès BDD ne sont jamais propagées :
elles sont journalisées et `load` retourne la valeur par défaut fournie.
"""

import json
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from spps.database import SessionLocal
from spps.models.kv_entry import KeyValueEntry

logger = logging.getLogger(__name__)


class KeyValueStore:
    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self._session_factory = session_factory

    def load(self, key: str, default: Any) -> Any:
        """Retourne la valeur désérialisée, ou `default` si la clé est absente ou illisible."""
        db = self._session_factory()
        try:
            entry = db.get(KeyValueEntry, key)
            if entry is None:
                return default
            return json.loads(entry.value)
        except (ValueError, SQLAlchemyError) as exc:
            logger.error("Erreur de lecture de la clé %s : %s", key, exc, exc_info=True)
            return default
        finally:
            db.close()

    def save(self, key: str, value: Any) -> None:
        """Sérialise et enregistre `value` sous `key` (écrase la valeur précédente)."""
        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError) as exc:
            logger.error("Erreur de sérialisation de la clé %s : %s", key, exc, exc_info=True)
            return

        db = self._session_factory()
        try:
            entry = db.get(KeyValueEntry, key)
            if entry is None:
                db.add(KeyValueEntry(key=key, value=serialized))
            else:
                entry.value = serialized
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Erreur d'écriture de la clé %s : %s", key, exc, exc_info=True)
        finally:
            db.close()

    def remove(self, key: str) -> None:
        """Supprime la clé. Une clé absente n'est pas une erreur."""
        db = self._session_factory()
        try:
            entry = db.get(KeyValueEntry, key)
            if entry is not None:
                db.delete(entry)
                db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Erreur de suppression de la clé %s : %s", key, exc, exc_info=True)
        finally:
            db.close()
