"""
kairosdb client configuration.

Configuration is an immutable value handed to the client constructor; there
is no process-wide state. Sources, in the order the CLI applies them:
YAML file, then explicit overrides. `from_env` reads KAIROSDB_* variables
(a local .env file is honoured).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger("kairosdb.config")

ENV_FIELDS = {
    "host": "KAIROSDB_HOST",
    "port": "KAIROSDB_PORT",
    "scheme": "KAIROSDB_SCHEME",
    "timeout": "KAIROSDB_TIMEOUT",
}


class ClientConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    host: str = "localhost"
    port: int = Field(8080, ge=1, le=65535)
    scheme: Literal["http", "https"] = "http"
    timeout: int = Field(10, ge=1)
    verify_tls: bool = True          # Only used for https
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    def with_overrides(self, **overrides: Any) -> "ClientConfig":
        """Return a copy with the non-None overrides applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return ClientConfig(**{**self.model_dump(), **values})

    @classmethod
    def from_env(cls) -> "ClientConfig":
        load_dotenv()
        data: Dict[str, Any] = {}
        for field_name, var in ENV_FIELDS.items():
            value = os.getenv(var)
            if value:
                data[field_name] = value
        return cls(**data)


def load_config_from(path: Union[str, Path]) -> ClientConfig:
    """Load client configuration from YAML file (defaults if the file is missing)."""
    path = Path(path)
    if not path.exists():
        logger.debug(f"Config file not found: {path}, using defaults")
        return ClientConfig()

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    logger.debug(f"Loaded config from {path}: {data}")
    return ClientConfig(**data)
