import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Union
from jobboard.models import Job, JobData, JobFilter

DATA_FILE = Path("data/jobs.json")


def new_job_id() -> str:
    return str(time.time_ns() // 1_000_000)


def now_iso() -> str:
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def load_jobs(path: Union[str, Path, None] = None) -> list[Job]:
    data_file = Path(path) if path else DATA_FILE
    json_text = data_file.read_text(encoding="utf-8")
    return JobData.model_validate_json(json_text).jobs


def _contains(value: Optional[str], needle: str) -> bool:
    return bool(value) and needle in value.lower()


def matches(job: Job, filter: JobFilter) -> bool:
    """True when ``job`` satisfies every constraint set on ``filter``.

    Unset (or empty) fields do not constrain. ``remote=False`` is not an
    exclusion: it only means remote is not required.
    """
    if filter.search_term:
        term = filter.search_term.lower()
        if not (
            _contains(job.title, term)
            or _contains(job.company, term)
            or _contains(job.description, term)
        ):
            return False
    if filter.location:
        place = filter.location.lower()
        loc = job.location
        if not (
            _contains(loc.city, place)
            or _contains(loc.state, place)
            or _contains(loc.country, place)
        ):
            return False
    if filter.remote and not job.location.remote:
        return False
    if filter.type and job.type != filter.type:
        return False
    return True


def compute_view(jobs: Iterable[Job], filter: Optional[JobFilter]) -> list[Job]:
    if filter is None:
        return list(jobs)
    return [j for j in jobs if matches(j, filter)]


__all__ = ["DATA_FILE", "compute_view", "load_jobs", "matches", "new_job_id", "now_iso"]
