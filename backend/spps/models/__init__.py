# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant l'appel à create_all au démarrage.

from spps.models.kv_entry import KeyValueEntry  # noqa: F401
