from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_name: str = "Facility Reports"
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Identity provider ID tokens
    id_token_secret: str = "change-me-in-production"
    id_token_algorithm: str = "HS256"
    id_token_audience: Optional[str] = None
    id_token_issuer: Optional[str] = None
    id_token_expire_minutes: int = 60

    # Role registry (read on a principal's first sign-in only)
    admin_emails: List[str] = []
    technician_emails: List[str] = []

    model_config = SettingsConfigDict(
        env_prefix="FACILITY_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @property
    def origins(self) -> List[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


settings = Settings()
