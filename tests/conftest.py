# tests/conftest.py
"""
Shared pytest fixtures for Specflow tests.

Provides:
- Test environment (set before anything from specflow is imported)
- Beanie over mongomock-motor, a fresh database per test
- Scripted fake LLM installed through the app's llm_factory
- App / HTTP client / users / auth headers
"""
import os

os.environ["DATABASE_URL"] = "mongodb://localhost:27017/specflow_test"
os.environ["AUTH_SECRET"] = "test-secret-0123456789abcdef0123456789abcdef"
os.environ["DEFAULT_LLM_PROVIDER"] = "gemini"
os.environ["GEMINI_API_KEY"] = "test-gemini-key"
os.environ["PUBLIC_APP_URL"] = "http://localhost:3000"

import json
import re
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from specflow.core.auth import create_access_token
from specflow.core.exceptions import LLMError
from specflow.db import init_database
from specflow.lib.artifact_store import ArtifactStore
from specflow.llm import LLMParams
from specflow.main import create_app
from specflow.models import Phase, Project, User
from specflow.orchestration.phase_spec import get_phase_spec


# ═══════════════════════════════════════════════════════
# FAKE LLM
# ═══════════════════════════════════════════════════════

REQUESTED_DOCUMENTS = re.compile(r"WRITE THESE DOCUMENTS: (.+)")


def render_documents(documents: Dict[str, str]) -> str:
    """Format documents the way a well-behaved model would."""
    return "\n\n".join(
        f'<<<FILE path="{name}">>>\n{content}\n<<<END_FILE>>>'
        for name, content in documents.items()
    )


def default_content(name: str) -> str:
    if name.endswith(".json"):
        return json.dumps({"document": name})
    return f"# {name}\n\nGenerated content for {name}."


@dataclass
class FakeLLM:
    """
    Stands in for LLMClient.

    By default answers every prompt with valid documents for the names the
    prompt asks for. `responses` overrides the raw output for a request that
    asks for a given document; `fail_on` makes such a request raise LLMError.
    """
    responses: Dict[str, str] = field(default_factory=dict)
    fail_on: List[str] = field(default_factory=list)
    calls: List[Tuple[str, str]] = field(default_factory=list)
    params: List[LLMParams] = field(default_factory=list)

    def factory(self, params: LLMParams) -> "FakeLLM":
        self.params.append(params)
        return self

    async def complete(self, prompt: str, system_prompt: str = "") -> str:
        self.calls.append((prompt, system_prompt))
        match = REQUESTED_DOCUMENTS.search(prompt)
        names = [n.strip() for n in match.group(1).split(",")] if match else []

        for name in names:
            if name in self.fail_on:
                raise LLMError("fake", f"scripted failure for {name}")
            if name in self.responses:
                return self.responses[name]

        return render_documents({name: default_content(name) for name in names})

    def prompts_asking_for(self, name: str) -> List[str]:
        return [prompt for prompt, _ in self.calls if name in prompt.split("WRITE THESE DOCUMENTS:")[-1]]


# ═══════════════════════════════════════════════════════
# FIXTURES - Database / storage
# ═══════════════════════════════════════════════════════

@pytest.fixture(autouse=True)
async def database():
    """Fresh in-memory MongoDB for every test."""
    client = AsyncMongoMockClient()
    db = client.get_database(f"specflow_test_{uuid.uuid4().hex[:8]}")
    await init_database(db)
    yield db


@pytest.fixture
def artifacts_dir(tmp_path):
    path = tmp_path / "artifacts"
    path.mkdir()
    return path


@pytest.fixture
def store(artifacts_dir):
    return ArtifactStore(artifacts_dir)


@pytest.fixture
def phase_spec():
    return get_phase_spec()


@pytest.fixture
def fake_llm():
    return FakeLLM()


# ═══════════════════════════════════════════════════════
# FIXTURES - App / client
# ═══════════════════════════════════════════════════════

@pytest.fixture
def app(artifacts_dir, fake_llm):
    return create_app(
        rate_limit="1000/minute",
        artifacts_dir=artifacts_dir,
        llm_factory=fake_llm.factory,
        monitoring=False,
    )


@pytest.fixture
async def async_client(app):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ═══════════════════════════════════════════════════════
# FIXTURES - Users / auth
# ═══════════════════════════════════════════════════════

async def make_user(email: str, role: str = "user") -> User:
    user = User(email=email, name=email.split("@")[0], role=role, email_verified=True)
    await user.insert()
    return user


def headers_for(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(str(user.id))}"}


@pytest.fixture
async def user():
    return await make_user("owner@example.com")


@pytest.fixture
async def other_user():
    return await make_user("someone-else@example.com")


@pytest.fixture
async def admin_user():
    return await make_user("admin@example.com", role="admin")


@pytest.fixture
async def super_admin():
    return await make_user("root@example.com", role="super_admin")


@pytest.fixture
def auth_headers(user):
    return headers_for(user)


# ═══════════════════════════════════════════════════════
# FIXTURES - Projects
# ═══════════════════════════════════════════════════════

async def make_project(
    owner: User,
    name: str = "Test Project",
    current_phase: Phase = Phase.ANALYSIS,
    completed: Optional[List[Phase]] = None,
    **fields,
) -> Project:
    """Insert a project directly, already positioned at a phase."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    project = Project(
        slug=slug,
        name=name,
        description=fields.pop("description", "A tool for testing"),
        owner_id=str(owner.id),
        current_phase=current_phase,
        phases_completed=completed if completed is not None else list(
            p for p in Phase if list(Phase).index(p) < list(Phase).index(current_phase)
        ),
        **fields,
    )
    await project.insert()
    return project


@pytest.fixture
async def project(user):
    return await make_project(user)
