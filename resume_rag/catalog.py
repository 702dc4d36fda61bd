"""Static job catalog, loaded once from YAML with every score at zero."""
from __future__ import annotations

from pathlib import Path

import yaml

from resume_rag.config import CATALOG_PATH
from resume_rag.log import get_logger
from resume_rag.models import Job, job_from_dict

log = get_logger(__name__)


def load_catalog(path: Path | None = None) -> tuple[Job, ...]:
    """Read and validate the job catalog. Raises ValueError on a bad record."""
    path = path or CATALOG_PATH
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    records = data.get("jobs", []) if isinstance(data, dict) else data
    if not isinstance(records, list):
        raise ValueError(f"{path.name}: expected a list of jobs")

    jobs: list[Job] = []
    seen: set[str] = set()
    for i, record in enumerate(records):
        if not isinstance(record, dict):
            raise ValueError(f"{path.name}: entry {i} is not a mapping")
        job = job_from_dict(record)
        if job.id in seen:
            raise ValueError(f"{path.name}: duplicate job id {job.id!r}")
        seen.add(job.id)
        jobs.append(job)

    log.info("Loaded %d jobs from %s", len(jobs), path.name)
    return tuple(jobs)
