from datetime import datetime

from errors import InvalidState, ValidationError
from models import CANCELLED, SCHEDULED, Job, as_utc, can_transition, utcnow
from worker import log_transition


class JobService:
    """The operations the HTTP layer exposes, one call per route."""

    def __init__(self, store, executor, scheduler=None):
        self.store = store
        self.executor = executor
        self.scheduler = scheduler

    def submit(self, description, execute_at):
        if not isinstance(description, str) or not description.strip():
            raise ValidationError("Description is required")
        if not isinstance(execute_at, datetime):
            raise ValidationError("Invalid input")
        execute_at = as_utc(execute_at)
        if execute_at <= utcnow():
            raise ValidationError("Execution time is in the past")

        job_id = self.store.insert(Job(description=description, execute_at=execute_at))
        log_transition(job_id, "new", SCHEDULED, f"(execute_at={execute_at.isoformat()})")
        return self.store.get(job_id)

    def list_all(self):
        return self.store.list()

    def get(self, job_id):
        return self.store.get(job_id)

    def cancel(self, job_id):
        def _cancel(job):
            if not can_transition(job.status, CANCELLED):
                raise InvalidState(job.id, job.status, "cancelled")
            job.status = CANCELLED

        job = self.store.mutate(job_id, _cancel)
        log_transition(job_id, SCHEDULED, CANCELLED)
        return job

    def run_now(self, job_id):
        return self.executor.execute(job_id)
