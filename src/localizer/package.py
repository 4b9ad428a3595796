"""
Zip packaging of job artifacts.
"""

import io
import logging
import zipfile

from .store import InMemoryJobStore, slugify

logger = logging.getLogger("localizer")

SUBTITLES_FOLDER = "Subtitrari"
TITLES_FOLDER = "Titluri_Descrieri"


def package_root(store: InMemoryJobStore, job_id: str) -> str:
    job = store.get_job(job_id)
    if job is None:
        raise KeyError(f"Unknown job: {job_id}")
    return slugify(job.title) or f"job_{job.id}"


def build_package(store: InMemoryJobStore, job_id: str) -> bytes:
    """Zip all artifacts of a job into subtitle and title/description folders."""
    root = package_root(store, job_id)
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for artifact in store.list_artifacts(job_id):
            found = store.get_artifact_content(artifact.id)
            if found is None:
                continue
            _, content = found
            if artifact.type in ("subtitle-srt", "subtitle-vtt"):
                zf.writestr(f"{root}/{SUBTITLES_FOLDER}/{artifact.filename}", content)
            elif artifact.type == "titles-descriptions":
                zf.writestr(f"{root}/{TITLES_FOLDER}/{artifact.filename}", content)
    data = buf.getvalue()
    logger.info(f"Packaged job {job_id} into {root}.zip ({len(data)} bytes)")
    return data


def write_package(store: InMemoryJobStore, job_id: str, path: str) -> str:
    with open(path, "wb") as f:
        f.write(build_package(store, job_id))
    return path
