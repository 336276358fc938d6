"""
Configuration management for the chat orchestrator.

Loads all configuration from environment variables with sensible defaults
for local development. When ``CONFIG_PATH`` points at a YAML file, that file
is used instead (see ``config_loader``).
"""

import os

from dotenv import load_dotenv

from .config_loader import load_app_config
from .models import (
    AppConfig,
    GeminiConfig,
    LangfuseConfig,
    LoggingConfig,
    OrchestratorConfig,
    ServerConfig,
    ToolsConfig,
)

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def get_config() -> AppConfig:
    """Build the application configuration from environment variables."""
    return AppConfig(
        gemini=GeminiConfig(
            api_key=os.getenv("GEMINI_API_KEY", ""),
            model=os.getenv("GEMINI_MODEL", "gemini-3-pro-preview"),
            base_url=os.getenv(
                "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
            ),
            timeout=int(os.getenv("GEMINI_TIMEOUT", "60")),
        ),
        orchestrator=OrchestratorConfig(
            max_tool_calls=int(os.getenv("MAX_TOOL_CALLS", "5")),
            language=os.getenv("ASSISTANT_LANGUAGE", "Korean"),
        ),
        tools=ToolsConfig(
            http_timeout=int(os.getenv("TOOL_HTTP_TIMEOUT", "15")),
            default_timezone=os.getenv("DEFAULT_TIMEZONE", "Asia/Seoul"),
            fetch_max_length=int(os.getenv("FETCH_MAX_LENGTH", "5000")),
        ),
        server=ServerConfig(
            host=os.getenv("SERVER_HOST", "0.0.0.0"),
            port=int(os.getenv("SERVER_PORT", "8000")),
            workers=int(os.getenv("SERVER_WORKERS", "1")),
            reload=_env_bool("SERVER_RELOAD"),
        ),
        logging=LoggingConfig(level=os.getenv("LOG_LEVEL", "INFO")),
        langfuse=LangfuseConfig(
            public_key=os.getenv("LANGFUSE_PUBLIC_KEY", ""),
            secret_key=os.getenv("LANGFUSE_SECRET_KEY", ""),
            host=os.getenv("LANGFUSE_HOST", ""),
            debug=_env_bool("LANGFUSE_DEBUG"),
        ),
    )


def load_config() -> AppConfig:
    """Load from the YAML file named by CONFIG_PATH, or from the environment."""
    if os.getenv("CONFIG_PATH"):
        return load_app_config()
    return get_config()


# Global config instance
config = load_config()
