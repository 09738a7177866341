# specflow/lib/artifact_store.py
"""
Versioned artifact persistence.

The database keeps every version of every artifact. The filesystem mirrors
the latest version at {root}/{slug}/{phase}/{name} so the documents can be
browsed outside the service.
"""
import re
import shutil
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

import aiofiles

from specflow.core.exceptions import NotFoundError, PersistenceError, RequestValidationFailed
from specflow.core.logging import log
from specflow.models import Artifact, Phase, Project


ARTIFACT_NAME_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9._-]*$')
MAX_ARTIFACT_NAME_LENGTH = 100


def validate_artifact_name(name: str) -> str:
    """
    Raises:
        RequestValidationFailed: empty, too long, or could escape the phase directory
    """
    if not name or len(name) > MAX_ARTIFACT_NAME_LENGTH or not ARTIFACT_NAME_PATTERN.match(name):
        raise RequestValidationFailed(f"Invalid artifact name: {name!r}", {"name": name})
    return name


def normalize_phase(phase: str) -> str:
    """
    Raises:
        RequestValidationFailed: not one of the six phases
    """
    try:
        return Phase((phase or "").strip().upper()).value
    except ValueError:
        raise RequestValidationFailed(f"Unknown phase: {phase}", {"phase": phase})


def artifact_key(phase: str, name: str) -> str:
    return f"{phase}/{name}"


class ArtifactStore:
    """Artifact reads and writes for one artifacts root directory."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def project_dir(self, project: Project) -> Path:
        return self.root / project.slug

    def path_for(self, project: Project, phase: str, name: str) -> Path:
        return self.project_dir(project) / normalize_phase(phase) / validate_artifact_name(name)

    # ------------------------------------------------------------------
    # WRITES
    # ------------------------------------------------------------------

    async def save(self, project: Project, phase: str, name: str, content: str) -> Artifact:
        """
        Insert the next version of an artifact, then mirror it to disk.

        Raises:
            RequestValidationFailed: bad phase or name
            PersistenceError: filesystem or database failure
        """
        phase = normalize_phase(phase)
        path = self.path_for(project, phase, name)
        project_id = str(project.id)

        latest = await self.latest(project, phase, name)
        version = latest.version + 1 if latest else 1

        artifact = Artifact(
            project_id=project_id,
            phase=phase,
            name=name,
            content=content,
            version=version,
        )
        try:
            await artifact.insert()
        except Exception as e:
            raise PersistenceError(f"artifacts/{project.slug}/{phase}/{name}", str(e))

        # The mirror never holds content the database does not
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "w", encoding="utf-8") as f:
                await f.write(content)
        except OSError as e:
            await artifact.delete()
            raise PersistenceError(str(path), str(e))

        log("ARTIFACTS", f"Saved {phase}/{name} v{version} ({len(content)} chars)", project_id=project.slug)
        return artifact

    async def save_many(self, project: Project, phase: str, documents: Mapping[str, str]) -> List[Artifact]:
        # Validate every name before the first write
        for name in documents:
            validate_artifact_name(name)
        return [await self.save(project, phase, name, content) for name, content in documents.items()]

    async def delete_project(self, project: Project) -> int:
        """Remove every artifact version and the project's directory."""
        result = await Artifact.find(Artifact.project_id == str(project.id)).delete()
        deleted = result.deleted_count if result is not None else 0

        directory = self.project_dir(project)
        if directory.exists():
            try:
                shutil.rmtree(directory)
            except OSError as e:
                raise PersistenceError(str(directory), str(e))

        log("ARTIFACTS", f"Deleted {deleted} artifact versions", project_id=project.slug)
        return deleted

    # ------------------------------------------------------------------
    # READS
    # ------------------------------------------------------------------

    async def latest(self, project: Project, phase: str, name: str) -> Optional[Artifact]:
        return await Artifact.find(
            Artifact.project_id == str(project.id),
            Artifact.phase == normalize_phase(phase),
            Artifact.name == name,
        ).sort(-Artifact.version).first_or_none()

    async def history(self, project: Project, phase: str, name: str) -> List[Artifact]:
        """Every version, newest first."""
        phase = normalize_phase(phase)
        validate_artifact_name(name)
        versions = await Artifact.find(
            Artifact.project_id == str(project.id),
            Artifact.phase == phase,
            Artifact.name == name,
        ).sort(-Artifact.version).to_list()
        if not versions:
            raise NotFoundError("Artifact", artifact_key(phase, name))
        return versions

    async def list_latest(self, project: Project, phase: Optional[str] = None) -> List[Artifact]:
        """Latest version of each artifact, ordered by phase then name."""
        query = [Artifact.project_id == str(project.id)]
        if phase:
            query.append(Artifact.phase == normalize_phase(phase))

        latest: Dict[str, Artifact] = {}
        for artifact in await Artifact.find(*query).to_list():
            current = latest.get(artifact.key)
            if current is None or artifact.version > current.version:
                latest[artifact.key] = artifact

        order = {p.value: i for i, p in enumerate(Phase)}
        return sorted(latest.values(), key=lambda a: (order.get(a.phase, len(order)), a.name))

    async def existing_names(self, project: Project, phase: str) -> List[str]:
        return [artifact.name for artifact in await self.list_latest(project, phase)]

    async def latest_contents(self, project: Project, phases: Iterable[str]) -> Dict[str, str]:
        """Latest content of every artifact in the given phases, keyed "{PHASE}/{name}"."""
        contents: Dict[str, str] = {}
        for phase in phases:
            for artifact in await self.list_latest(project, phase):
                contents[artifact.key] = artifact.content
        return contents

    async def read(self, project: Project, phase: str, name: str, version: Optional[int] = None) -> Artifact:
        """
        One artifact version (latest when version is None).

        Falls back to the mirrored file when the database has no record.

        Raises:
            RequestValidationFailed: bad phase or name
            NotFoundError: no such artifact or version
        """
        phase = normalize_phase(phase)
        validate_artifact_name(name)

        if version is not None:
            artifact = await Artifact.find_one(
                Artifact.project_id == str(project.id),
                Artifact.phase == phase,
                Artifact.name == name,
                Artifact.version == version,
            )
            if artifact is None:
                raise NotFoundError("Artifact", f"{artifact_key(phase, name)}@v{version}")
            return artifact

        artifact = await self.latest(project, phase, name)
        if artifact is not None:
            return artifact

        path = self.path_for(project, phase, name)
        if path.is_file():
            log("ARTIFACTS", f"{phase}/{name} served from disk (no database record)", project_id=project.slug)
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                content = await f.read()
            return Artifact(project_id=str(project.id), phase=phase, name=name, content=content, version=0)

        raise NotFoundError("Artifact", artifact_key(phase, name))
