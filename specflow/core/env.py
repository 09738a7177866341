# specflow/core/env.py
"""
Environment validation.

Runs once at process start. If required variables are missing or malformed,
every problem is printed and the process exits with status 1.
"""
import os
import re
import sys
from typing import List, Literal, Mapping, Optional

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from specflow.core.exceptions import EnvironmentConfigError
from specflow.core.logging import log


RATE_LIMIT_PATTERN = re.compile(r"^\d+\s*/\s*(second|minute|hour|day)s?$")

PROVIDER_KEYS = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}

OBJECT_STORAGE_VARS = ("S3_BUCKET", "S3_ENDPOINT_URL", "S3_ACCESS_KEY_ID", "S3_SECRET_ACCESS_KEY")
OAUTH_VARS = ("GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET")


class EnvSchema(BaseModel):
    """Validated process environment."""
    model_config = ConfigDict(extra="ignore")

    DATABASE_URL: str
    AUTH_SECRET: str = Field(min_length=32)
    DEFAULT_LLM_PROVIDER: Literal["gemini", "openai", "anthropic"] = "gemini"
    GEMINI_API_KEY: Optional[str] = None
    OPENAI_API_KEY: Optional[str] = None
    ANTHROPIC_API_KEY: Optional[str] = None
    PUBLIC_APP_URL: AnyHttpUrl
    ALLOWED_ORIGINS: str = "http://localhost:3000"
    RATE_LIMIT: str = "100/minute"
    LOG_LEVEL: Literal["debug", "info", "warn", "error"] = "info"

    # Optional object storage
    S3_BUCKET: Optional[str] = None
    S3_ENDPOINT_URL: Optional[AnyHttpUrl] = None
    S3_ACCESS_KEY_ID: Optional[str] = None
    S3_SECRET_ACCESS_KEY: Optional[str] = None

    # Optional OAuth
    GOOGLE_CLIENT_ID: Optional[str] = None
    GOOGLE_CLIENT_SECRET: Optional[str] = None

    @field_validator("DATABASE_URL")
    @classmethod
    def _mongo_url(cls, value: str) -> str:
        if not value.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError("must be a MongoDB connection string (mongodb:// or mongodb+srv://)")
        return value

    @field_validator("RATE_LIMIT")
    @classmethod
    def _rate_limit(cls, value: str) -> str:
        if not RATE_LIMIT_PATTERN.match(value.strip()):
            raise ValueError("must look like '100/minute'")
        return value.strip()

    @model_validator(mode="after")
    def _cross_field_rules(self) -> "EnvSchema":
        problems: List[str] = []

        key_name = PROVIDER_KEYS[self.DEFAULT_LLM_PROVIDER]
        if not getattr(self, key_name):
            problems.append(f"{key_name} is required when DEFAULT_LLM_PROVIDER={self.DEFAULT_LLM_PROVIDER}")

        storage_set = [name for name in OBJECT_STORAGE_VARS if getattr(self, name)]
        if storage_set and len(storage_set) != len(OBJECT_STORAGE_VARS):
            missing = [name for name in OBJECT_STORAGE_VARS if name not in storage_set]
            problems.append(f"object storage is partially configured, missing: {', '.join(missing)}")

        oauth_set = [name for name in OAUTH_VARS if getattr(self, name)]
        if len(oauth_set) == 1:
            problems.append("GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET must be set together")

        if problems:
            raise ValueError("; ".join(problems))
        return self

    @property
    def object_storage_enabled(self) -> bool:
        return bool(self.S3_BUCKET)


def _format_errors(exc: ValidationError) -> List[str]:
    problems = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error.get("loc", ()))
        msg = error.get("msg", "invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        if error.get("type") == "missing":
            msg = "is required"
        problems.append(f"{loc}: {msg}" if loc else msg)
    return problems


def validate_environment(environ: Optional[Mapping[str, str]] = None) -> EnvSchema:
    """
    Validate the environment.

    Empty strings count as unset.

    Raises:
        EnvironmentConfigError: listing every problem found
    """
    environ = os.environ if environ is None else environ
    values = {
        name: environ[name]
        for name in EnvSchema.model_fields
        if environ.get(name) not in (None, "")
    }
    try:
        return EnvSchema.model_validate(values)
    except ValidationError as e:
        raise EnvironmentConfigError(_format_errors(e))


def validate_environment_or_exit(environ: Optional[Mapping[str, str]] = None) -> EnvSchema:
    """Validate the environment, exiting the process with status 1 on failure."""
    try:
        env = validate_environment(environ)
    except EnvironmentConfigError as e:
        print("=" * 60)
        print("ENVIRONMENT CONFIGURATION ERROR")
        print("=" * 60)
        print("The following environment variables are invalid or missing:\n")
        for problem in e.problems:
            print(f"  - {problem}")
        print("\nFix these before starting the application (see .env.example).")
        sys.stdout.flush()
        sys.exit(1)

    log("ENV", "Environment configuration validated", data={
        "provider": env.DEFAULT_LLM_PROVIDER,
        "object_storage": env.object_storage_enabled,
        "oauth": bool(env.GOOGLE_CLIENT_ID),
    })
    return env
