from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=None, extra="ignore")

    # Runtime
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    port: int = Field(default=5000, validation_alias="PORT")
    api_prefix: str = Field(default="/api", validation_alias="API_PREFIX")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    # "json" (default) or "console" for human-readable local output.
    log_format: str = Field(default="json", validation_alias="LOG_FORMAT")

    # CORS / Frontend
    frontend_url: str | None = Field(default=None, validation_alias="FRONTEND_URL")
    # Comma-separated list; "*" allows any origin (without credentials).
    cors_origins: str | None = Field(default=None, validation_alias="CORS_ORIGINS")

    # MongoDB
    mongo_uri: str | None = Field(default=None, validation_alias="MONGO_URI")
    mongo_db_name: str = Field(default="portfolio", validation_alias="MONGO_DB_NAME")

    # Auth
    jwt_secret: str | None = Field(default=None, validation_alias="JWT_SECRET")
    jwt_expires_days: int = Field(default=7, validation_alias="JWT_EXPIRES_DAYS")
    registration_enabled: bool = Field(default=True, validation_alias="REGISTRATION_ENABLED")

    # Login hardening
    login_rate_limit_max: int = Field(default=10, validation_alias="LOGIN_RATE_LIMIT_MAX")
    login_rate_limit_window_seconds: int = Field(
        default=15 * 60, validation_alias="LOGIN_RATE_LIMIT_WINDOW_SECONDS"
    )

    # Image hosting (Cloudinary)
    cloudinary_cloud_name: str | None = Field(default=None, validation_alias="CLOUDINARY_CLOUD_NAME")
    cloudinary_api_key: str | None = Field(default=None, validation_alias="CLOUDINARY_API_KEY")
    cloudinary_api_secret: str | None = Field(
        default=None, validation_alias="CLOUDINARY_API_SECRET"
    )
    cloudinary_folder: str = Field(default="portfolio", validation_alias="CLOUDINARY_FOLDER")

    # Uploads
    upload_max_bytes: int = Field(default=10 * 1024 * 1024, validation_alias="UPLOAD_MAX_BYTES")
    upload_max_files: int = Field(default=10, validation_alias="UPLOAD_MAX_FILES")

    # ---- helpers / derived flags ----
    @property
    def normalized_environment(self) -> str:
        v = (self.environment or "").strip().lower()
        if v in ("prod", "production"):
            return "production"
        if v in ("stage", "staging"):
            return "staging"
        if v in ("dev", "development"):
            return "development"
        return v or "development"

    @property
    def is_production(self) -> bool:
        return self.normalized_environment == "production"

    @property
    def is_development(self) -> bool:
        return self.normalized_environment == "development"

    def require_runtime_config(self) -> None:
        """
        Enforce the settings the service cannot run without.

        Called once at startup before the database connection is opened; any
        missing value aborts the process.
        """
        missing: list[str] = []

        if not (self.mongo_uri and str(self.mongo_uri).strip()):
            missing.append("MONGO_URI")
        if not (self.jwt_secret and str(self.jwt_secret).strip()):
            missing.append("JWT_SECRET")
        if not self.cloudinary_cloud_name:
            missing.append("CLOUDINARY_CLOUD_NAME")
        if not self.cloudinary_api_key:
            missing.append("CLOUDINARY_API_KEY")
        if not self.cloudinary_api_secret:
            missing.append("CLOUDINARY_API_SECRET")

        if missing:
            raise RuntimeError(
                "Missing required environment variables: " + ", ".join(missing)
            )

    def to_log_safe_dict(self) -> dict[str, object]:
        """
        A redacted representation safe for structured logs / diagnostics.
        """
        def _has(v: object) -> bool:
            return v is not None and str(v).strip() != ""

        return {
            "environment": self.normalized_environment,
            "port": self.port,
            "api_prefix": self.api_prefix,
            "log_level": self.log_level,
            "log_format": self.log_format,
            "frontend": {
                "frontend_url": self.frontend_url,
                "cors_origins": self.cors_origins,
            },
            "mongo": {
                "mongo_uri_configured": _has(self.mongo_uri),
                "mongo_db_name": self.mongo_db_name,
            },
            "auth": {
                "jwt_secret_configured": _has(self.jwt_secret),
                "jwt_expires_days": self.jwt_expires_days,
                "registration_enabled": bool(self.registration_enabled),
                "login_rate_limit_max": self.login_rate_limit_max,
                "login_rate_limit_window_seconds": self.login_rate_limit_window_seconds,
            },
            "images": {
                "cloudinary_cloud_name": self.cloudinary_cloud_name,
                "cloudinary_api_key_configured": _has(self.cloudinary_api_key),
                "cloudinary_api_secret_configured": _has(self.cloudinary_api_secret),
                "cloudinary_folder": self.cloudinary_folder,
                "upload_max_bytes": self.upload_max_bytes,
                "upload_max_files": self.upload_max_files,
            },
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
