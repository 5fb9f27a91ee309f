"""
Paramètres de l'application de gestion de projets (variables d'environnement ou .env)
"""
from typing import Annotated, ClassVar, List, Optional
from urllib.parse import quote_plus

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: ClassVar[str] = "Gestion de Projets"
    VERSION: ClassVar[str] = "1.0.0"

    # --- PostgreSQL ---
    PGUSER: Optional[str] = "projets"
    PGPASSWORD: Optional[str] = "projets"
    PGHOST: Optional[str] = "localhost"
    PGPORT: Optional[int] = 5432
    PGDATABASE: Optional[str] = "gestion_projets"
    # Remplace entièrement la connexion PostgreSQL (ex: "sqlite://")
    DB_URL: Optional[str] = None

    # --- Jetons ---
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 8 * 60

    # --- Compte super-administrateur garanti au démarrage ---
    MAIL_ADMIN: Optional[str] = "admin@gestion-projets.fr"
    PASSWORD_ADMIN: Optional[str] = "ChangeMoi#2025"
    NOM_ADMIN: str = "Admin"
    PRENOM_ADMIN: str = "Super"

    # --- Exécution ---
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    # Accepte "ALLOWED_HOSTS=projets.example.fr,localhost"
    ALLOWED_HOSTS: Annotated[List[str], NoDecode] = ["localhost", "127.0.0.1"]
    TRUSTED_HOST_STRICT: bool = False
    SECURITY_HEADERS_ENABLED: bool = True
    CORS_ALLOW_ALL: bool = False

    @field_validator("ALLOWED_HOSTS", mode="before")
    @classmethod
    def _split_hosts(cls, value):
        if isinstance(value, str):
            return [host.strip() for host in value.split(",") if host.strip()]
        return value

    @property
    def DATABASE_URL(self) -> str:
        if self.DB_URL:
            return self.DB_URL
        mot_de_passe = quote_plus(self.PGPASSWORD or "")
        return (
            f"postgresql://{self.PGUSER}:{mot_de_passe}"
            f"@{self.PGHOST}:{self.PGPORT}/{self.PGDATABASE}"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


settings = Settings()
