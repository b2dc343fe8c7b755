"""Configuration loading from YAML files with environment variable support."""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from dotenv import dotenv_values

from .core.exceptions import ConfigurationError

logger = logging.getLogger("julius2api")

# Default path to the config file (relative to project root)
DEFAULT_CONFIG_PATH = "configs/config.yaml"
CONFIG_PATH_ENV = "JULIUS2API_CONFIG"

DEFAULT_UPSTREAM_BASE_URL = "https://playground.julius.ai"
DEFAULT_CHUNK_SIZE = 50
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


@dataclass(frozen=True)
class RelaySettings:
    """Process-wide settings, captured once at startup.

    Attributes:
        auth_token: Expected bearer credential. ``None`` disables auth.
        upstream_base_url: Scheme and host of the playground backend.
        chunk_size: Code points per synthetic stream chunk.
        upstream_timeout: Seconds per upstream call, ``None`` for no deadline.
        host: Bind address for the HTTP server.
        port: Bind port for the HTTP server.
        log_level: Level name for the relay logger.
    """

    auth_token: Optional[str] = None
    upstream_base_url: str = DEFAULT_UPSTREAM_BASE_URL
    chunk_size: int = DEFAULT_CHUNK_SIZE
    upstream_timeout: Optional[float] = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @property
    def auth_enabled(self) -> bool:
        return bool(self.auth_token)

    @property
    def session_url(self) -> str:
        return f"{self.upstream_base_url.rstrip('/')}/api/temp_user_id"

    @property
    def chat_url(self) -> str:
        return f"{self.upstream_base_url.rstrip('/')}/api/chat/message"


def resolve_config_path(path: str) -> Path:
    """Resolve config path relative to project root if needed."""
    if Path(path).is_absolute():
        return Path(path)
    project_root = Path(__file__).parent.parent
    return project_root / path


def load_env_values(env_path: Path) -> dict[str, str]:
    """Load environment values from a .env file without mutating os.environ."""
    if not env_path.exists():
        return {}
    raw_values = dotenv_values(env_path)
    return {key: value for key, value in raw_values.items() if value is not None}


def load_config(
    path: str | None = None,
    env_path: str | None = None,
    substitute_env: bool = True,
) -> dict:
    """Load configuration from a YAML file.

    Args:
        path: Path to the config file. Defaults to JULIUS2API_CONFIG, or
              configs/config.yaml in the project root.
        env_path: Optional .env path override for env substitution. By
              default the .env next to the config file is used.
        substitute_env: Whether to substitute environment variables in the config.

    Returns:
        Parsed configuration dictionary. Empty when no path was requested
        and the default file does not exist.

    Raises:
        ConfigurationError: If an explicitly requested file is missing or
            the YAML does not hold a mapping.
    """
    explicit = path is not None or os.getenv(CONFIG_PATH_ENV) is not None
    if path is None:
        path = os.getenv(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH)

    config_path = resolve_config_path(path)

    if not config_path.exists():
        if explicit:
            logger.error(f"Config file not found: {config_path}")
            raise ConfigurationError(f"Config file not found: {config_path}")
        logger.info("No config file at %s, using defaults", config_path)
        return {}

    logger.info(f"Loading configuration from {config_path}")

    env_values: dict[str, str] = {}
    if substitute_env:
        env_file = resolve_config_path(env_path) if env_path else config_path.with_name(".env")
        if env_file.exists():
            logger.info(f"Loading environment variables from {env_file}")
            env_values = load_env_values(env_file)

    with config_path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file must contain a mapping: {config_path}")

    if substitute_env:
        data = _substitute_env_vars(data, env_values)

    logger.info(f"Configuration loaded successfully from {config_path}")
    return data


def _substitute_env_vars(
    obj: Any, env_values: Mapping[str, str] | None = None
) -> Any:
    """Recursively substitute ${VAR_NAME} and $VAR_NAME in configuration values.

    Unset variables leave the placeholder in place and log a warning.
    """
    env_values = env_values or {}

    if isinstance(obj, dict):
        return {k: _substitute_env_vars(v, env_values) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_substitute_env_vars(item, env_values) for item in obj]
    if isinstance(obj, str):

        def replace_var(match):
            var_name = match.group(1) or match.group(2)
            value = env_values.get(var_name)
            if value is None:
                value = os.getenv(var_name)
            if value is None:
                logger.warning(
                    f"CONFIG ERROR: Environment variable '${var_name}' is not set! "
                    f"The literal placeholder will be used."
                )
                return match.group(0)
            return value

        return _ENV_PATTERN.sub(replace_var, obj)
    return obj


def _to_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc


def _to_timeout(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"upstream_timeout must be a number, got {value!r}") from exc
    # Zero or negative means no deadline
    return timeout if timeout > 0 else None


def load_settings(
    config: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> RelaySettings:
    """Build the immutable settings from the config file and environment.

    Environment variables take priority over the config file:
    AUTH_TOKEN, JULIUS2API_HOST, JULIUS2API_PORT, JULIUS2API_UPSTREAM,
    JULIUS2API_LOG_LEVEL.
    """
    if config is None:
        config = load_config()
    if environ is None:
        environ = os.environ

    relay_cfg = config.get("relay") or {}
    server_cfg = config.get("server") or {}

    auth_token = environ.get("AUTH_TOKEN")
    if auth_token is None:
        auth_token = relay_cfg.get("auth_token")
    auth_token = str(auth_token) if auth_token else None

    upstream = environ.get("JULIUS2API_UPSTREAM") or relay_cfg.get(
        "upstream_base_url", DEFAULT_UPSTREAM_BASE_URL
    )

    chunk_size = _to_int(relay_cfg.get("chunk_size", DEFAULT_CHUNK_SIZE), "chunk_size")
    if chunk_size < 1:
        raise ConfigurationError(f"chunk_size must be positive, got {chunk_size}")

    host = environ.get("JULIUS2API_HOST") or str(server_cfg.get("host", DEFAULT_HOST))
    port = _to_int(
        environ.get("JULIUS2API_PORT") or server_cfg.get("port", DEFAULT_PORT), "port"
    )
    log_level = str(
        environ.get("JULIUS2API_LOG_LEVEL") or server_cfg.get("log_level", "INFO")
    ).upper()

    return RelaySettings(
        auth_token=auth_token,
        upstream_base_url=str(upstream),
        chunk_size=chunk_size,
        upstream_timeout=_to_timeout(relay_cfg.get("upstream_timeout")),
        host=host,
        port=port,
        log_level=log_level,
    )
