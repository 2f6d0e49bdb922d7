# tests/conftest.py
import os
import pathlib

import pytest

# The app resolves templates/, static/ and data/ relative to the repo root.
ROOT = pathlib.Path(__file__).resolve().parent.parent
os.chdir(ROOT)

from jobboard import sessions as session_registry
from jobboard.jobs import load_jobs
from jobboard.models import Job, JobLocation, SalaryRange
from jobboard.store import JobStore


@pytest.fixture
def seed_jobs() -> list[Job]:
    return load_jobs(ROOT / "data" / "jobs.json")


@pytest.fixture
def store(seed_jobs) -> JobStore:
    return JobStore(seed_jobs)


@pytest.fixture
def make_job():
    """Factory for jobs with sensible defaults; override any field by keyword."""
    def _make(**overrides) -> Job:
        fields = dict(
            id="",
            title="Site Reliability Engineer",
            company="Orbital",
            location=JobLocation(city="Denver", state="CO", country="USA", remote=False),
            type="Full-time",
            description="Keep our platform fast and available.",
            requirements=["On-call experience"],
            salary=SalaryRange(min=120000, max=150000, currency="USD"),
        )
        fields.update(overrides)
        return Job(**fields)
    return _make


@pytest.fixture(autouse=True)
def clear_sessions():
    yield
    session_registry.sessions.clear()
