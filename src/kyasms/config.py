from __future__ import annotations
import os
import yaml
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://route.kyasms.com/api/v3"
DEFAULT_TIMEOUT_SECONDS = 30.0


class ClientConfig(BaseSettings):
    """
    Client configuration. Values come from:
      1) Explicit keyword arguments (field names or env aliases)
      2) Environment variables (.env supported)
      3) Optional YAML config file, see load_config()
    """
    model_config = SettingsConfigDict(
        env_prefix="", env_file=".env", extra="ignore", populate_by_name=True
    )

    api_key: Optional[str] = Field(default=None, alias="KYA_SMS_API_KEY")
    base_url: str = Field(DEFAULT_BASE_URL, alias="KYA_SMS_BASE_URL")
    # seconds, as requests expects
    timeout: float = Field(DEFAULT_TIMEOUT_SECONDS, alias="KYA_SMS_TIMEOUT")
    debug: bool = Field(False, alias="KYA_SMS_DEBUG")

    # --- Observability (CLI only) ---
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # ---------------- Validators ----------------

    @field_validator("api_key", mode="before")
    @classmethod
    def parse_api_key(cls, v):
        """
        Allow empty string in .env: KYA_SMS_API_KEY=
        Treat it as unset.
        """
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("base_url", mode="before")
    @classmethod
    def parse_base_url(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_BASE_URL
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    @field_validator("timeout")
    @classmethod
    def check_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v


def load_config(**overrides) -> ClientConfig:
    """
    Load config from optional YAML (KYA_SMS_CONFIG_FILE or ./kyasms.yaml), then
    overlay env vars. YAML keys use the env alias names (KYA_SMS_API_KEY, ...).
    """
    yaml_path = os.environ.get("KYA_SMS_CONFIG_FILE", "kyasms.yaml")
    data = {}
    if os.path.exists(yaml_path):
        with open(yaml_path, "r", encoding="utf-8") as f:
            y = yaml.safe_load(f) or {}
            # env wins over the file
            data.update({k: v for k, v in y.items() if k not in os.environ})
    data.update(overrides)

    return ClientConfig(**data)  # type: ignore[arg-type]
