import re
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from jobboard.models import CAMEL, Job, JobFilter, JobLocation, JobType, SalaryRange

_URL = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class SalaryInput(BaseModel):
    min: float = Field(ge=0)
    max: float = Field(ge=0)
    currency: str = "USD"


class JobDraft(BaseModel):
    """Admin input for creating or editing a job."""

    title: str = Field(min_length=3)
    company: str = Field(min_length=2)
    logo: str = ""
    location: JobLocation
    type: JobType
    description: str = Field(min_length=10)
    requirements: list[str] = []
    salary: SalaryInput
    application_url: str = ""
    featured: bool = False
    posted_at: str = ""
    model_config = CAMEL

    @field_validator("requirements")
    @classmethod
    def drop_blank_requirements(cls, value: list[str]) -> list[str]:
        return [r for r in value if r.strip()]

    @field_validator("application_url")
    @classmethod
    def check_url(cls, value: str) -> str:
        if value and not _URL.match(value):
            raise ValueError("Application URL must be a valid http(s) URL")
        return value

    def to_job(self, id: str = "") -> Job:
        return Job(
            id=id,
            title=self.title,
            company=self.company,
            logo=self.logo,
            location=self.location,
            type=self.type,
            description=self.description,
            requirements=self.requirements,
            salary=SalaryRange(**self.salary.model_dump()),
            posted_at=self.posted_at,
            application_url=self.application_url,
            featured=self.featured,
        )


FILTER_FIELDS = ("searchTerm", "location", "remote", "type")


def filter_from_input(data) -> JobFilter:
    """Build a filter from form or JSON input; empty values mean unset."""
    return JobFilter.model_validate({
        key: data[key] for key in FILTER_FIELDS
        if key in data and data[key] not in ("", None)
    })


def draft_from_form(form) -> JobDraft:
    """Build a draft from the flat fields of the admin HTML form."""
    requirements = form.get("requirements") or ""
    return JobDraft.model_validate({
        "title": form.get("title", ""),
        "company": form.get("company", ""),
        "logo": form.get("logo", ""),
        "location": {
            "city": form.get("city", ""),
            "state": form.get("state") or None,
            "country": form.get("country", ""),
            "remote": "remote" in form,
        },
        "type": form.get("type", ""),
        "description": form.get("description", ""),
        "requirements": requirements.splitlines(),
        "salary": {
            "min": form.get("salary_min") or 0,
            "max": form.get("salary_max") or 0,
            "currency": form.get("currency") or "USD",
        },
        "applicationUrl": form.get("applicationUrl", ""),
        "featured": "featured" in form,
        "postedAt": form.get("postedAt", ""),
    })


class Application(BaseModel):
    full_name: str = Field(min_length=1)
    email: str
    phone: Optional[str] = ""
    cover_letter: Optional[str] = ""
    model_config = CAMEL

    @field_validator("full_name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Full name is required")
        return value

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        value = value.strip()
        if not _EMAIL.match(value):
            raise ValueError("A valid email address is required")
        return value


__all__ = ["Application", "JobDraft", "SalaryInput", "draft_from_form", "filter_from_input"]
