import logging
from typing import Iterable, Optional
from jobboard.ee import EventEmitter
from jobboard.jobs import compute_view, new_job_id, now_iso
from jobboard.models import DashboardStats, Job, JobFilter, Notification

logger = logging.getLogger(__name__)


class JobStore:
    """Owns the job collection, the active filter and the filtered view.

    Listeners on ``bus`` receive ``"notify"`` with a :class:`Notification`
    and ``"change"`` (no arguments) after every mutation or filter change.
    """

    def __init__(self, jobs: Optional[Iterable[Job]] = None, bus: Optional[EventEmitter] = None):
        self.bus = bus or EventEmitter()
        self.filter = JobFilter()
        self._jobs: list[Job] = []
        self.filtered_jobs: list[Job] = []
        self.loading = True
        if jobs is not None:
            self.seed(jobs)

    def seed(self, jobs: Iterable[Job]):
        self._jobs = list(jobs)
        self.loading = False
        logger.info("Seeded store with %d jobs", len(self._jobs))
        self._recompute()

    def list_all(self) -> list[Job]:
        return list(self._jobs)

    def list_filtered(self) -> list[Job]:
        return list(self.filtered_jobs)

    def get_job(self, id: str) -> Optional[Job]:
        return next((j for j in self._jobs if j.id == id), None)

    def add_job(self, job: Job) -> Job:
        # A blank or already taken id gets a fresh one; ids stay unique.
        job_id = job.id
        if not job_id or self.get_job(job_id) is not None:
            job_id = self._unique_id()
        new_job = job.model_copy(update={
            "id": job_id,
            "posted_at": job.posted_at or now_iso(),
        })
        self._jobs.insert(0, new_job)
        logger.info("Created job %s (%s at %s)", new_job.id, new_job.title, new_job.company)
        self._recompute()
        self._notify("Job Created", f"{new_job.title} at {new_job.company} has been created.")
        return new_job

    def update_job(self, job: Job):
        # Update never creates: an unknown id leaves the collection untouched.
        for i, existing in enumerate(self._jobs):
            if existing.id == job.id:
                self._jobs[i] = job.model_copy(update={"posted_at": existing.posted_at})
                break
        else:
            logger.warning("Update ignored, no job with id %r", job.id)
            return
        logger.info("Updated job %s", job.id)
        self._recompute()
        self._notify("Job Updated", f"{job.title} at {job.company} has been updated.")

    def delete_job(self, id: str):
        job = self.get_job(id)
        if job is None:
            logger.debug("Delete ignored, no job with id %r", id)
            return
        self._jobs = [j for j in self._jobs if j.id != id]
        logger.info("Deleted job %s", id)
        self._recompute()
        self._notify(
            "Job Deleted",
            f"{job.title} at {job.company} has been deleted.",
            variant="destructive",
        )

    def set_filter(self, filter: JobFilter):
        self.filter = filter
        self._recompute()

    def stats(self) -> DashboardStats:
        jobs = self._jobs
        return DashboardStats(
            total=len(jobs),
            featured=sum(1 for j in jobs if j.featured),
            companies=len({j.company for j in jobs}),
            locations=len({j.location.city for j in jobs}),
            remote=sum(1 for j in jobs if j.location.remote),
        )

    def _unique_id(self) -> str:
        taken = {j.id for j in self._jobs}
        candidate = new_job_id()
        while candidate in taken:
            candidate = str(int(candidate) + 1)
        return candidate

    def _recompute(self):
        self.filtered_jobs = compute_view(self._jobs, self.filter)
        self.bus.emit("change")

    def _notify(self, title: str, description: str, variant: str = "default"):
        self.bus.emit("notify", Notification(title=title, description=description, variant=variant))


__all__ = ["JobStore"]
