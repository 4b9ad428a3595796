"""
In-memory job and artifact store.

The store is an explicit object owned by whoever runs the jobs (the CLI or a
web layer) and passed to the pipeline, not module-level state.
"""

import logging
import re
import unicodedata
import uuid
from dataclasses import replace

from .models import Artifact, ArtifactType, Job

logger = logging.getLogger("localizer")

CONTENT_TYPES: dict[str, str] = {
    "subtitle-srt": "application/x-subrip",
    "subtitle-vtt": "text/vtt",
    "titles-descriptions": "text/plain",
}


def slugify(text: str) -> str:
    """Filesystem-friendly name: lowercase, no diacritics, underscores."""
    normalized = unicodedata.normalize("NFD", text.lower())
    normalized = re.sub(r"[^\w\s-]", "", normalized).strip()
    normalized = re.sub(r"[\s_-]+", "_", normalized)
    return normalized.strip("_")


class InMemoryJobStore:
    """Jobs, their artifacts and artifact contents, keyed by id."""

    def __init__(self) -> None:
        self._jobs: dict[str, Job] = {}
        self._artifacts_by_job: dict[str, list[Artifact]] = {}
        self._content: dict[str, str] = {}

    def create_job(
        self,
        title: str,
        languages: list[str],
        *,
        source_kind: str = "upload",
        source_language: str = "ro",
        generate_subtitles: bool = True,
        generate_translations: bool = True,
    ) -> Job:
        job = Job(
            id=str(uuid.uuid4()),
            title=title,
            source_kind=source_kind,
            languages=list(languages),
            source_language=source_language,
            generate_subtitles=generate_subtitles,
            generate_translations=generate_translations,
        )
        self._jobs[job.id] = job
        self._artifacts_by_job[job.id] = []
        logger.debug(f"Created job {job.id} ({title!r}, languages: {', '.join(languages) or '-'})")
        return job

    def get_job(self, job_id: str) -> Job | None:
        return self._jobs.get(job_id)

    def update_job(self, job_id: str, **changes) -> Job:
        if job_id not in self._jobs:
            raise KeyError(f"Unknown job: {job_id}")
        job = replace(self._jobs[job_id], **changes)
        self._jobs[job_id] = job
        return job

    def add_artifact(
        self, job_id: str, language: str, filename: str, artifact_type: ArtifactType, content: str
    ) -> Artifact:
        if job_id not in self._jobs:
            raise KeyError(f"Unknown job: {job_id}")
        artifact = Artifact(
            id=str(uuid.uuid4()),
            job_id=job_id,
            language=language,
            filename=filename,
            content_type=CONTENT_TYPES[artifact_type],
            type=artifact_type,
            size_bytes=len(content.encode("utf-8")),
        )
        self._artifacts_by_job[job_id].append(artifact)
        self._content[artifact.id] = content
        return artifact

    def list_artifacts(self, job_id: str) -> list[Artifact]:
        return list(self._artifacts_by_job.get(job_id, []))

    def get_artifact_content(self, artifact_id: str) -> tuple[Artifact, str] | None:
        for artifacts in self._artifacts_by_job.values():
            for artifact in artifacts:
                if artifact.id == artifact_id:
                    return artifact, self._content.get(artifact_id, "")
        return None
