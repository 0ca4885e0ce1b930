"""
Application Settings.

Centralizes all configuration via .env / environment variables.
"""

import logging
import secrets
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

# shipped in earlier .env examples; never accepted as a signing key
INSECURE_JWT_SECRETS = {"", "change-me-in-production"}


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    # --- App ---
    env: str = "development"
    debug: bool = False
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    log_level: str = "INFO"
    cors_origins: str = "*"
    max_request_bytes: int = 50 * 1024 * 1024

    # --- Storage ---
    database_url: str = "sqlite:///cndes.db"
    db_pool_size: int = 10
    db_max_overflow: int = 20
    uploads_dir: str = "uploads"
    client_dist_dir: str = "dist"

    # --- Auth ---
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 480
    bcrypt_rounds: int = 12
    min_password_length: int = 6

    # --- Registry ---
    doc_number_prefix: str = "CNDES"
    sequence_max_attempts: int = 5

    # --- Bootstrap ---
    seed_catalogs: bool = True
    load_demo_documents: bool = False
    admin_username: str = "admin"
    admin_password: str = ""
    admin_name: str = "Administrador"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @model_validator(mode="after")
    def _signing_secret(self):
        """
        Outside development JWT_SECRET is mandatory. In development a
        missing secret is replaced by a random one for this process only.
        """
        if self.jwt_secret.strip() not in INSECURE_JWT_SECRETS:
            return self
        if self.env != "development":
            raise ValueError(f"JWT_SECRET must be set to a private value when ENV={self.env}")
        self.jwt_secret = secrets.token_urlsafe(32)
        logger.warning(
            "JWT_SECRET is not set, using a random key: sessions end on restart "
            "and are not shared between workers"
        )
        return self

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Settings singleton."""
    return Settings()
