"""
Configuration centrale de l'application via variables d'environnement.
Charger depuis un fichier .env en développement.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Base de données (stockage clé-valeur JSON)
    DATABASE_URL: str = "sqlite:///./spps.db"

    # Authentification
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480
    BCRYPT_ROUNDS: int = 12

    # Latence simulée sur chaque opération du service de données
    API_LATENCY_MS: int = 500

    # Import Excel / CSV des élèves
    MAX_UPLOAD_SIZE_MB: int = 5

    # Export PDF
    REPORT_FILENAME: str = "laporan-pelanggaran-siswa.pdf"
    REPORT_TITLE: str = "Laporan Pelanggaran Siswa"

    # Logs
    LOG_LEVEL: str = "INFO"

    # Environnement
    ENV: str = "development"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
