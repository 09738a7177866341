# specflow/core/config.py
"""
Application configuration - single source of truth for all settings.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


def _csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class LLMSettings:
    """LLM provider configuration."""
    default_provider: str = field(default_factory=lambda: os.getenv("DEFAULT_LLM_PROVIDER", "gemini"))
    default_model: Optional[str] = field(default_factory=lambda: os.getenv("DEFAULT_LLM_MODEL"))
    gemini_api_key: Optional[str] = field(default_factory=lambda: os.getenv("GEMINI_API_KEY"))
    openai_api_key: Optional[str] = field(default_factory=lambda: os.getenv("OPENAI_API_KEY"))
    anthropic_api_key: Optional[str] = field(default_factory=lambda: os.getenv("ANTHROPIC_API_KEY"))
    # The only bound on an in-flight phase execution
    request_timeout: int = field(default_factory=lambda: int(os.getenv("LLM_TIMEOUT_SECONDS", "120")))
    temperature: float = 0.7
    max_tokens: int = 8000


@dataclass
class DatabaseSettings:
    """MongoDB connection configuration."""
    url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", "mongodb://localhost:27017/specflow"))
    default_name: str = "specflow"
    server_selection_timeout_ms: int = 5000


@dataclass
class AuthSettings:
    """Bearer token configuration."""
    secret: Optional[str] = field(default_factory=lambda: os.getenv("AUTH_SECRET"))
    algorithm: str = "HS256"
    token_ttl_minutes: int = field(default_factory=lambda: int(os.getenv("AUTH_TOKEN_TTL_MINUTES", "1440")))


@dataclass
class PathSettings:
    """Path configuration."""
    base_dir: Path = field(default_factory=lambda: Path(__file__).parent.parent.parent)
    artifacts_dir: Path = field(default_factory=lambda: Path(
        os.getenv("ARTIFACTS_DIR")
        or str(Path(__file__).parent.parent.parent / "artifacts")
    ))


@dataclass
class Settings:
    """Main application settings."""
    llm: LLMSettings = field(default_factory=LLMSettings)
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    auth: AuthSettings = field(default_factory=AuthSettings)
    paths: PathSettings = field(default_factory=PathSettings)
    app_url: str = field(default_factory=lambda: os.getenv("PUBLIC_APP_URL", "http://localhost:3000"))
    allowed_origins: List[str] = field(default_factory=lambda: _csv(os.getenv("ALLOWED_ORIGINS", "http://localhost:3000")))
    rate_limit: str = field(default_factory=lambda: os.getenv("RATE_LIMIT", "100/minute"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", 8000)))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    def ensure_directories(self):
        """Ensure required directories exist."""
        self.paths.artifacts_dir.mkdir(parents=True, exist_ok=True)


# Singleton instance
settings = Settings()
