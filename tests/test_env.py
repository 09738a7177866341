# tests/test_env.py
"""
Startup environment validation.
"""
import pytest

from specflow.core.env import validate_environment, validate_environment_or_exit
from specflow.core.exceptions import EnvironmentConfigError


VALID = {
    "DATABASE_URL": "mongodb://localhost:27017/specflow",
    "AUTH_SECRET": "s" * 32,
    "DEFAULT_LLM_PROVIDER": "gemini",
    "GEMINI_API_KEY": "key",
    "PUBLIC_APP_URL": "https://specflow.example.com",
}


def _problems(**overrides):
    environ = {**VALID, **overrides}
    environ = {k: v for k, v in environ.items() if v is not None}
    with pytest.raises(EnvironmentConfigError) as exc_info:
        validate_environment(environ)
    return exc_info.value.problems


class TestValidateEnvironment:

    def test_valid_environment(self):
        env = validate_environment(VALID)

        assert env.RATE_LIMIT == "100/minute"
        assert env.object_storage_enabled is False

    def test_missing_database_url(self):
        assert _problems(DATABASE_URL=None) == ["DATABASE_URL: is required"]

    def test_empty_string_counts_as_unset(self):
        assert _problems(DATABASE_URL="") == ["DATABASE_URL: is required"]

    def test_every_problem_is_reported(self):
        problems = _problems(DATABASE_URL="postgres://db", AUTH_SECRET="short", PUBLIC_APP_URL="not a url")

        assert len(problems) == 3
        assert any(p.startswith("DATABASE_URL") for p in problems)
        assert any(p.startswith("AUTH_SECRET") for p in problems)
        assert any(p.startswith("PUBLIC_APP_URL") for p in problems)

    def test_provider_key_is_required_for_default_provider(self):
        problems = _problems(DEFAULT_LLM_PROVIDER="openai")

        assert "OPENAI_API_KEY is required when DEFAULT_LLM_PROVIDER=openai" in problems[0]

    def test_partial_object_storage(self):
        problems = _problems(S3_BUCKET="artifacts")

        assert "object storage is partially configured" in problems[0]

    def test_oauth_vars_go_together(self):
        problems = _problems(GOOGLE_CLIENT_ID="client")

        assert "must be set together" in problems[0]

    def test_rate_limit_format(self):
        assert validate_environment({**VALID, "RATE_LIMIT": "5/second"}).RATE_LIMIT == "5/second"
        assert _problems(RATE_LIMIT="fast")[0].startswith("RATE_LIMIT")


class TestExitOnFailure:

    def test_invalid_environment_exits_with_status_1(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            validate_environment_or_exit({})

        assert exc_info.value.code == 1
        output = capsys.readouterr().out
        assert "DATABASE_URL: is required" in output
        assert "AUTH_SECRET: is required" in output
