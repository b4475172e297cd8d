# backend/tagclaim/config.py
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "tagclaim"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Database
    database_url: str = "sqlite:///./tagclaim.db"
    database_echo: bool = False
    # Store every failed request in the error_logs table
    error_log_enabled: bool = True

    # Identity provider tokens (verification only)
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"

    # Admin gate; unset means admin routes answer ADMIN_PASS_NOT_CONFIGURED
    admin_pass: Optional[str] = None

    # NFC tags
    nfc_auto_create_enabled: bool = True
    tag_base_url: str = "https://pivy.me/tag"
    min_public_tag_id_length: int = 20
    admin_list_max_limit: int = 1000


@lru_cache
def get_settings() -> Settings:
    return Settings()
