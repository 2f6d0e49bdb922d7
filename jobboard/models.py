from typing import Literal, Optional, get_args
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

JobType = Literal["Full-time", "Part-time", "Contract", "Freelance", "Internship"]
JOB_TYPES: tuple[str, ...] = get_args(JobType)

# Field names are snake_case in Python and camelCase on the wire.
CAMEL = {
    "alias_generator": to_camel,
    "populate_by_name": True,
}


class JobLocation(BaseModel):
    city: str
    state: Optional[str] = None
    country: str
    remote: bool = False
    model_config = CAMEL


class SalaryRange(BaseModel):
    min: float
    max: float
    currency: str = "USD"
    model_config = CAMEL


class Job(BaseModel):
    id: str = ""
    title: str
    company: str
    logo: Optional[str] = None
    location: JobLocation
    type: JobType
    description: str
    requirements: list[str] = []
    salary: Optional[SalaryRange] = None
    posted_at: str = ""
    application_url: Optional[str] = None
    featured: bool = False
    model_config = CAMEL


class JobData(BaseModel):
    jobs: list[Job]


class JobFilter(BaseModel):
    search_term: Optional[str] = None
    location: Optional[str] = None
    remote: Optional[bool] = None
    type: Optional[JobType] = None
    model_config = CAMEL


class Notification(BaseModel):
    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"


class DashboardStats(BaseModel):
    total: int
    featured: int
    companies: int
    locations: int
    remote: int


__all__ = [
    "DashboardStats",
    "JOB_TYPES",
    "Job",
    "JobData",
    "JobFilter",
    "JobLocation",
    "JobType",
    "Notification",
    "SalaryRange",
]
