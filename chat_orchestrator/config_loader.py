"""
Configuration loader for the chat orchestrator.

Loads configuration from YAML files with support for
environment variable interpolation.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml

from .models import (
    AppConfig,
    GeminiConfig,
    LangfuseConfig,
    LoggingConfig,
    OrchestratorConfig,
    ServerConfig,
    ToolsConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "config.yaml"

# Regex for environment variable interpolation: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")

# Singleton cache for app config
_app_config: Optional[AppConfig] = None


def resolve_env_vars(value: str) -> str:
    """
    Resolve environment variable references in a string.

    Supports ${VAR} and ${VAR:-default} syntax.
    """

    def replace_match(match: re.Match) -> str:
        var_name = match.group(1)
        default_value = match.group(2) if match.group(2) is not None else ""
        return os.environ.get(var_name, default_value)

    return ENV_VAR_PATTERN.sub(replace_match, value)


def _substitute_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, dict):
        return {k: _substitute_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_substitute_env_vars_recursive(item) for item in data]
    elif isinstance(data, str):
        return resolve_env_vars(data)
    return data


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.lower() == "true"
    return bool(value)


def _parse_gemini_config(data: dict) -> GeminiConfig:
    defaults = GeminiConfig()
    return GeminiConfig(
        api_key=data.get("api_key", defaults.api_key),
        model=data.get("model", defaults.model),
        base_url=data.get("base_url", defaults.base_url),
        timeout=int(data.get("timeout", defaults.timeout)),
    )


def _parse_orchestrator_config(data: dict) -> OrchestratorConfig:
    max_tool_calls = int(data.get("max_tool_calls", 5))
    if max_tool_calls < 1:
        raise ValueError(f"orchestrator.max_tool_calls must be positive, got {max_tool_calls}")
    return OrchestratorConfig(
        max_tool_calls=max_tool_calls,
        language=data.get("language", "Korean"),
    )


def _parse_tools_config(data: dict) -> ToolsConfig:
    defaults = ToolsConfig()
    return ToolsConfig(
        http_timeout=int(data.get("http_timeout", defaults.http_timeout)),
        default_timezone=data.get("default_timezone", defaults.default_timezone),
        fetch_max_length=int(data.get("fetch_max_length", defaults.fetch_max_length)),
        user_agent=data.get("user_agent", defaults.user_agent),
    )


def _parse_server_config(data: dict) -> ServerConfig:
    return ServerConfig(
        host=data.get("host", "0.0.0.0"),
        port=int(data.get("port", 8000)),
        workers=int(data.get("workers", 1)),
        reload=_as_bool(data.get("reload", False)),
    )


def _parse_langfuse_config(data: dict) -> LangfuseConfig:
    return LangfuseConfig(
        public_key=data.get("public_key", ""),
        secret_key=data.get("secret_key", ""),
        host=data.get("host", ""),
        debug=_as_bool(data.get("debug", False)),
    )


def load_app_config(path: Optional[str] = None, reload: bool = False) -> AppConfig:
    """
    Load application configuration from a YAML file.

    Uses a singleton pattern - subsequent calls return the cached config
    unless reload=True is specified.

    Args:
        path: Path to the YAML configuration file. If None, uses
              CONFIG_PATH env var or the default path (config/config.yaml).
        reload: If True, force reload from disk instead of using cache.

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the config is empty or invalid
    """
    global _app_config

    if _app_config is not None and not reload:
        return _app_config

    if path is None:
        path = os.environ.get("CONFIG_PATH", str(DEFAULT_CONFIG_PATH))

    config_path = Path(path)

    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found at {config_path}. "
            f"Create one from config/config.yaml.template or set CONFIG_PATH env var."
        )

    logger.info(f"Loading configuration from {config_path}")

    with open(config_path, "r") as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        raise ValueError(f"Configuration file {config_path} is empty")

    raw_config = _substitute_env_vars_recursive(raw_config)

    app_config = AppConfig(
        version=str(raw_config.get("version", "1.0")),
        gemini=_parse_gemini_config(raw_config.get("gemini", {})),
        orchestrator=_parse_orchestrator_config(raw_config.get("orchestrator", {})),
        tools=_parse_tools_config(raw_config.get("tools", {})),
        server=_parse_server_config(raw_config.get("server", {})),
        logging=LoggingConfig(level=raw_config.get("logging", {}).get("level", "INFO")),
        langfuse=_parse_langfuse_config(raw_config.get("langfuse", {})),
    )

    if not app_config.gemini.api_key:
        logger.warning("Config validation warning: gemini.api_key is empty")

    _app_config = app_config
    logger.debug(
        f"Configuration loaded: version={app_config.version}, model={app_config.gemini.model}"
    )
    return app_config


def reset_config_cache() -> None:
    """Reset the configuration cache, forcing a reload on next access."""
    global _app_config
    _app_config = None
    logger.debug("Configuration cache reset")
