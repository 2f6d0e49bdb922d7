"""Turn a free-form job description into a job record.

Stands in for an AI generator with a fixed set of keyword and regex rules.
The rules are order sensitive: title checks run in sequence and the last
match wins, while job types are scanned in order and the first match wins.
"""

import re
from typing import Optional
from jobboard.jobs import new_job_id, now_iso
from jobboard.models import JOB_TYPES, Job, JobLocation, SalaryRange

DEFAULT_TITLE = "Software Developer"
TITLE_RULES = [
    ("designer", "UI/UX Designer"),
    ("manager", "Project Manager"),
    ("engineer", "Software Engineer"),
    ("market", "Marketing Specialist"),
]

DEFAULT_SALARY = (50000, 100000)
# "$120k", "$120,000", "120k", "120,000"; tried in that order at each position.
SALARY_TOKEN = re.compile(r"\$\d+k|\$\d+,\d+|\d+k|\d+,\d+", re.ASCII)

REQUIREMENTS = [
    "Strong understanding of industry principles",
    "Excellent communication skills",
    "Problem-solving abilities",
    "Team collaboration",
]


def _title(lowered: str) -> str:
    title = DEFAULT_TITLE
    for keyword, candidate in TITLE_RULES:
        if keyword in lowered:
            title = candidate
    return title


def _job_type(lowered: str) -> str:
    return next((t for t in JOB_TYPES if t.lower() in lowered), "Full-time")


def _salary_value(token: str) -> Optional[int]:
    digits = re.sub(r"[$,k]", "", token)
    if not digits.isdigit():
        return None
    return int(digits) * (1000 if "k" in token else 1)


def _salary(text: str) -> SalaryRange:
    low, high = DEFAULT_SALARY
    tokens = SALARY_TOKEN.findall(text)
    if len(tokens) >= 2:
        first, second = (_salary_value(t) for t in tokens[:2])
        if first is not None and second is not None:
            low, high = min(first, second), max(first, second)
    return SalaryRange(min=low, max=high, currency="USD")


def extract_from_text(text: str) -> Job:
    """Build a complete job from ``text``. Never raises for string input."""
    lowered = text.lower()
    return Job(
        id=new_job_id(),
        title=_title(lowered),
        company="TechCorp",
        logo="",
        location=JobLocation(
            city="San Francisco",
            state="CA",
            country="USA",
            remote="remote" in lowered,
        ),
        type=_job_type(lowered),
        description=text,
        requirements=list(REQUIREMENTS),
        salary=_salary(text),
        posted_at=now_iso(),
        application_url="",
        featured=False,
    )


def merge_generated(draft: Optional[Job], generated: Job) -> Job:
    """Overlay ``generated`` on ``draft``, keeping the draft's identity.

    ``id``, ``posted_at`` and ``featured`` come from the draft when there
    is one; every other field is taken from the generated record.
    """
    if draft is None:
        return generated
    return generated.model_copy(update={
        "id": draft.id or generated.id,
        "posted_at": draft.posted_at or generated.posted_at,
        "featured": draft.featured,
    })


__all__ = ["REQUIREMENTS", "extract_from_text", "merge_generated"]
