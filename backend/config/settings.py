from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    database_url: str = "sqlite:///./curi_engine.db"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False

    # Image storage: "blob" (Vercel Blob compatible API) or "local"
    storage_backend: str = "local"
    blob_read_write_token: str = ""
    blob_api_url: str = "https://blob.vercel-storage.com"
    storage_timeout_seconds: float = 30.0

    # Local storage, served from /uploads by the app
    upload_dir: str = "./uploads"
    upload_url_prefix: str = "/uploads"

    # "vin_upsert" updates the bike already registered under a VIN,
    # "always_create" files every submission as a new bike row
    vehicle_identity_policy: str = "vin_upsert"

    # Moderation API (X-API-Key header)
    admin_api_key: str = ""

    base_url: str = ""

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def is_deployed(self) -> bool:
        return self.environment.lower() in ("production", "staging")

    def validate_production(self) -> None:
        """Raise if production is using insecure or incomplete settings."""
        if self.vehicle_identity_policy not in ("vin_upsert", "always_create"):
            raise ValueError(
                "VEHICLE_IDENTITY_POLICY must be 'vin_upsert' or 'always_create'"
            )
        if self.storage_backend not in ("blob", "local"):
            raise ValueError("STORAGE_BACKEND must be 'blob' or 'local'")
        if self.is_production and not self.admin_api_key:
            raise ValueError("ADMIN_API_KEY must be set in production")
        if self.is_production and self.storage_backend == "blob" and not self.blob_read_write_token:
            raise ValueError("BLOB_READ_WRITE_TOKEN must be set when STORAGE_BACKEND=blob")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
