import threading
import time

from errors import InvalidState, NotFound
from models import EXECUTED, EXECUTING, SCHEDULED, can_transition, utcnow


def log_transition(job_id, old_state, new_state, extra=""):
    now = utcnow().isoformat()
    print(f"[{now}] Job {job_id}: {old_state} → {new_state} {extra}".rstrip())


class Executor:
    def __init__(self, store, work_seconds=1.0):
        self.store = store
        self.work_seconds = work_seconds

    def execute(self, job_id):
        """
        Run one scheduled job: mark it executing, wait out the simulated
        work with the store unlocked, mark it executed and drop it.
        Returns the executed snapshot.
        """
        started = self.store.mutate(job_id, self._begin)
        log_transition(job_id, SCHEDULED, EXECUTING)

        try:
            self._wait()
        finally:
            # an interrupted wait still retires the job
            finished = self.store.mutate(job_id, self._finish)
            self.store.remove(job_id)
            duration = (utcnow() - started.executed_at).total_seconds()
            log_transition(job_id, EXECUTING, EXECUTED, f"(removed, duration={duration:.3f}s)")
        return finished

    def _wait(self):
        time.sleep(self.work_seconds)

    @staticmethod
    def _begin(job):
        if not can_transition(job.status, EXECUTING):
            raise InvalidState(job.id, job.status, "run")
        job.status = EXECUTING
        job.executed_at = utcnow()

    @staticmethod
    def _finish(job):
        job.status = EXECUTED


class Scheduler:
    def __init__(self, store, executor, tick_seconds=1.0, stop_event=None):
        self.store = store
        self.executor = executor
        self.tick_seconds = tick_seconds
        self.stop_event = stop_event or threading.Event()
        self._thread = None

    def start(self):
        if self._thread and self._thread.is_alive():
            if not self.stop_event.is_set():
                return
            # still finishing a job after a timed-out stop
            self._thread.join()
        self._thread = None
        # each loop gets its own event; a set one is never cleared
        if self.stop_event.is_set():
            self.stop_event = threading.Event()
        self._thread = threading.Thread(target=self.run, args=(self.stop_event,), name="scheduler", daemon=True)
        self._thread.start()

    def stop(self, timeout=None):
        self.stop_event.set()
        if self._thread:
            self._thread.join(timeout=timeout)
            if not self._thread.is_alive():
                self._thread = None

    @property
    def running(self):
        return bool(self._thread and self._thread.is_alive())

    def run(self, stop_event=None):
        stop_event = stop_event or self.stop_event
        while not stop_event.wait(self.tick_seconds):
            try:
                self.scan_once(stop_event)
            except Exception as e:
                print(f"[{utcnow().isoformat()}] Scheduler scan failed: {e!r}")

    def scan_once(self, stop_event=None):
        """Execute every due job in the current snapshot; returns their ids."""
        stop_event = stop_event or self.stop_event
        now = utcnow()
        executed = []
        for job in self.store.list():
            if not job.is_due(now):
                continue
            if stop_event.is_set():
                break
            try:
                self.executor.execute(job.id)
            except (NotFound, InvalidState):
                # cancelled, run or removed since the snapshot
                continue
            executed.append(job.id)
        if executed:
            print(f"[{utcnow().isoformat()}] Scheduler scan: executed {len(executed)} job(s), {len(self.store)} live")
        return executed
