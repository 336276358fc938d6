"""
Configuration models for the chat orchestrator.

Plain dataclasses shared by the environment-variable loader
(``chat_orchestrator.config``) and the YAML loader
(``chat_orchestrator.config_loader``).
"""

from dataclasses import dataclass, field


@dataclass
class GeminiConfig:
    """Connection settings for the completion service."""
    api_key: str = ""
    model: str = "gemini-3-pro-preview"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout: int = 60

    @property
    def generate_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"


@dataclass
class OrchestratorConfig:
    """Settings for the tool-calling loop."""
    max_tool_calls: int = 5
    language: str = "Korean"


@dataclass
class ToolsConfig:
    """Settings shared by the tool executors."""
    http_timeout: int = 15
    default_timezone: str = "Asia/Seoul"
    fetch_max_length: int = 5000
    user_agent: str = "chat-orchestrator/0.1"


@dataclass
class ServerConfig:
    """Configuration for the FastAPI server."""
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1
    reload: bool = False


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"


@dataclass
class LangfuseConfig:
    """Configuration for Langfuse observability.

    Tracing auto-enables when both public_key and secret_key are provided.
    """
    public_key: str = ""
    secret_key: str = ""
    host: str = ""
    debug: bool = False

    @property
    def enabled(self) -> bool:
        return bool(self.public_key and self.secret_key)


@dataclass
class AppConfig:
    """Top-level configuration container."""
    version: str = "1.0"
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    orchestrator: OrchestratorConfig = field(default_factory=OrchestratorConfig)
    tools: ToolsConfig = field(default_factory=ToolsConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    langfuse: LangfuseConfig = field(default_factory=LangfuseConfig)

    @property
    def log_level(self) -> str:
        return self.logging.level
