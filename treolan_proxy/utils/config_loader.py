"""
Proxy configuration loader (upstream credentials, catalog filter, HTTP server).

Values come from an optional YAML file (config/proxy.yml) and are overridden by
environment variables, which may in turn be provided through a .env file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.treolan.ru/api/v1"
DEFAULT_CORS_ORIGINS = [
    "https://m3-mobile.ru",
    "https://www.m3-mobile.ru",
    "https://m3mobilerus-crypto.github.io",
    "http://localhost",
    "http://127.0.0.1",
]

# env var -> (section, key)
_ENV_MAP = {
    "TREOLAN_BASE_URL": ("upstream", "base_url"),
    "TREOLAN_LOGIN": ("upstream", "login"),
    "TREOLAN_PASSWORD": ("upstream", "password"),
    "TREOLAN_TOKEN": ("upstream", "static_token"),
    "TREOLAN_AUTH_PATHS": ("upstream", "auth_paths"),
    "TREOLAN_TIMEOUT_SECONDS": ("upstream", "timeout_seconds"),
    "M3_VENDOR_ID": ("catalog", "vendor_id"),
    "M3_BRAND_NAME": ("catalog", "brand_name"),
    "CORS_ORIGINS": ("server", "cors_origins"),
    "PORT": ("server", "port"),
    "LOG_LEVEL": ("server", "log_level"),
}


def _split_csv(value: Any) -> Any:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class UpstreamConfig(BaseModel):
    """Treolan API access"""

    base_url: str = DEFAULT_BASE_URL
    login: str = ""
    password: str = ""
    static_token: str = ""
    auth_paths: List[str] = Field(default_factory=lambda: ["/auth/token"])
    timeout_seconds: float = Field(default=20.0, gt=0, le=300)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("auth_paths", mode="before")
    @classmethod
    def _parse_auth_paths(cls, value: Any) -> Any:
        paths = _split_csv(value)
        if isinstance(paths, list) and not paths:
            raise ValueError("at least one auth path is required")
        return paths

    def missing_credentials(self) -> List[str]:
        """Names of the env vars that still need a value for login mode."""
        missing = []
        if not self.login:
            missing.append("TREOLAN_LOGIN")
        if not self.password:
            missing.append("TREOLAN_PASSWORD")
        return missing


class CatalogConfig(BaseModel):
    """Catalog query filter"""

    vendor_id: int = Field(default=746, ge=0)
    brand_name: str = "M3 Mobile"


class ServerConfig(BaseModel):
    """HTTP server settings"""

    port: int = Field(default=3000, ge=1, le=65535)
    cors_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: Any) -> Any:
        return _split_csv(value)

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


class ProxyConfig(BaseModel):
    upstream: UpstreamConfig = Field(default_factory=UpstreamConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


def _default_config_path() -> Path:
    return Path(__file__).parent.parent.parent / "config" / "proxy.yml"


def _env_overrides(environ: Dict[str, str]) -> Dict[str, Dict[str, Any]]:
    overrides: Dict[str, Dict[str, Any]] = {}
    for env_name, (section, key) in _ENV_MAP.items():
        value = environ.get(env_name)
        if value is None or value == "":
            continue
        overrides.setdefault(section, {})[key] = value
    return overrides


def load_proxy_config(
    config_path: Optional[Path] = None,
    environ: Optional[Dict[str, str]] = None,
) -> ProxyConfig:
    """
    Load and validate the proxy configuration.

    Args:
        config_path: YAML file to read. Defaults to $PROXY_CONFIG_PATH or
            config/proxy.yml. A missing file is not an error.
        environ: Environment mapping. Defaults to os.environ (after .env is loaded).

    Returns:
        Validated ProxyConfig object

    Raises:
        ValidationError: If the merged values don't match the schema
    """
    if environ is None:
        load_dotenv()
        environ = dict(os.environ)

    if config_path is None:
        env_path = environ.get("PROXY_CONFIG_PATH")
        config_path = Path(env_path) if env_path else _default_config_path()

    data: Dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        logger.info("Loaded proxy config file %s", config_path)
    else:
        logger.debug("Proxy config file %s not found, using env/defaults", config_path)

    for section, values in _env_overrides(environ).items():
        data[section] = {**(data.get(section) or {}), **values}

    try:
        return ProxyConfig(**data)
    except ValidationError as e:
        logger.error("Proxy config validation failed: %s", e)
        raise
