"""Configuration management for AdInsight."""

import logging
import os
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environments."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogFormat(str, Enum):
    """Log format options."""

    JSON = "json"
    TEXT = "text"


class GeminiConfig(BaseModel):
    """Gemini API configuration for document extraction and summaries."""

    api_key: SecretStr | None = None
    model: str = Field(
        default="gemini-2.5-flash",
        min_length=1,
        description="Model used for PDF extraction and executive summaries",
    )
    timeout_seconds: int = Field(
        default=60,
        ge=1,
        le=600,
        description="Request timeout for a single Gemini call in seconds",
    )

    @property
    def is_configured(self) -> bool:
        """Whether an API key is available."""
        return bool(self.api_key and self.api_key.get_secret_value())


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: LogFormat = LogFormat.JSON
    log_directory: str | None = Field(
        default=None,
        description="Directory for log files; console only when unset",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure the level is a standard logging level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level


class AnalysisConfig(BaseModel):
    """Thresholds for dashboard statistics and summaries."""

    underperformance_factor: float = Field(
        default=1.2,
        gt=1.0,
        description="Campaigns whose cost per result exceeds the average by this "
        "factor are flagged as underperforming",
    )
    summary_language: str = Field(
        default="es",
        min_length=2,
        description="Language code for the executive summary narrative",
    )


class Settings(BaseSettings):
    """Application settings.

    Environment Variables:
        Core:
            ADI_ENVIRONMENT=development
            ADI_DEBUG=false

        Gemini:
            ADI_GEMINI__API_KEY=your_api_key  (GEMINI_API_KEY / GOOGLE_API_KEY also accepted)
            ADI_GEMINI__MODEL=gemini-2.5-flash
            ADI_GEMINI__TIMEOUT_SECONDS=60

        Logging:
            ADI_LOGGING__LEVEL=INFO
            ADI_LOGGING__FORMAT=json
            ADI_LOGGING__LOG_DIRECTORY=logs

        Analysis:
            ADI_ANALYSIS__UNDERPERFORMANCE_FACTOR=1.2
            ADI_ANALYSIS__SUMMARY_LANGUAGE=es
    """

    model_config = SettingsConfigDict(
        env_prefix="ADI_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)

    @classmethod
    def from_env(cls, env_file: Path | None = None) -> "Settings":
        """Load settings from the environment, optionally reading a .env file first."""
        if env_file:
            load_dotenv(env_file)
        else:
            root_dir = Path(__file__).parent.parent.parent.parent
            env_path = root_dir / ".env"
            if env_path.exists():
                load_dotenv(env_path)

        overrides: dict[str, Any] = {}
        if not os.getenv("ADI_GEMINI__API_KEY"):
            fallback_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
            if fallback_key:
                overrides["gemini"] = {"api_key": fallback_key}

        return cls(**overrides)

    def validate_required_settings(self) -> None:
        """Validate settings that depend on each other."""
        errors = []

        if self.environment == Environment.PRODUCTION:
            if self.debug:
                errors.append("ADI_DEBUG must be false in production")
            if not self.gemini.is_configured:
                errors.append(
                    "ADI_GEMINI__API_KEY (or GEMINI_API_KEY) is required in production"
                )

        if errors:
            raise ValueError(f"Configuration errors: {'; '.join(errors)}")

    def to_public_dict(self) -> dict[str, Any]:
        """Configuration summary that is safe to expose (no secrets)."""
        return {
            "environment": self.environment.value,
            "debug": self.debug,
            "gemini": {
                "enabled": self.gemini.is_configured,
                "model": self.gemini.model,
                "timeout_seconds": self.gemini.timeout_seconds,
            },
            "analysis": self.analysis.model_dump(),
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format.value,
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    try:
        settings = Settings.from_env()
        settings.validate_required_settings()
        return settings
    except (ValidationError, ValueError) as e:
        logging.error(f"Configuration error: {e}")
        raise


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper())

    if settings.logging.format == LogFormat.JSON:
        import json

        class JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                log_data = {
                    "timestamp": self.formatTime(record),
                    "level": record.levelname,
                    "logger": record.name,
                    "message": record.getMessage(),
                    "module": record.module,
                    "function": record.funcName,
                    "line": record.lineno,
                }
                if record.exc_info:
                    log_data["exception"] = self.formatException(record.exc_info)
                return json.dumps(log_data, ensure_ascii=False)

        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # MCP stdio transport owns stdout, so log to stderr
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if settings.logging.log_directory:
        log_dir = Path(settings.logging.log_directory)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / "adinsight.log")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
