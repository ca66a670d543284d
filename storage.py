import threading
import time
from dataclasses import replace

from errors import NotFound
from models import SCHEDULED


class JobStore:
    """In-memory register of live jobs, keyed by id.

    Every access goes through one lock. Callers only ever get copies of the
    records; changes are made with mutate().
    """

    def __init__(self):
        self._jobs = {}
        self._lock = threading.Lock()
        self._last_id = 0

    def __len__(self):
        with self._lock:
            return len(self._jobs)

    def _next_id(self):
        # Nanosecond clock, bumped past the previous id so two inserts in
        # the same tick still get distinct values.
        candidate = max(time.time_ns(), self._last_id + 1)
        self._last_id = candidate
        return str(candidate)

    # ---------------- Writes ----------------
    def insert(self, job):
        with self._lock:
            job_id = self._next_id()
            self._jobs[job_id] = replace(job, id=job_id, status=SCHEDULED, executed_at=None)
            return job_id

    def remove(self, job_id):
        with self._lock:
            self._jobs.pop(job_id, None)

    def mutate(self, job_id, fn):
        """
        Apply fn to the stored record under the lock and return a copy of the
        result. fn must validate before it writes: whatever it raises is
        passed on to the caller. id, description and execute_at are fixed;
        a change to any of them is undone and raises ValueError.
        """
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                raise NotFound(job_id)
            before = replace(job)
            fn(job)
            if (job.id, job.description, job.execute_at) != (before.id, before.description, before.execute_at):
                self._jobs[job_id] = before
                raise ValueError(f"Job {job_id}: id, description and execute_at cannot change")
            return replace(job)

    # ---------------- Reads ----------------
    def get(self, job_id):
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                raise NotFound(job_id)
            return replace(job)

    def list(self):
        with self._lock:
            return [replace(job) for job in self._jobs.values()]
