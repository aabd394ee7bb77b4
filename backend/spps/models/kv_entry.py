"""
Modèle SQLAlchemy pour la table kv_entries.
Chaque ligne contient une valeur JSON sérialisée sous une clé texte.
"""

from sqlalchemy import Column, DateTime, String, Text, func

from spps.database import Base


class KeyValueEntry(Base):
    __tablename__ = "kv_entries"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
