"""Shared fixtures: a fresh store per test and short simulated work."""

from datetime import timedelta

import pytest

from models import utcnow
from service import JobService
from storage import JobStore
from worker import Executor, Scheduler

WORK_SECONDS = 0.05
TICK_SECONDS = 0.02


def in_future(seconds=60.0):
    return utcnow() + timedelta(seconds=seconds)


@pytest.fixture
def store():
    return JobStore()


@pytest.fixture
def executor(store):
    return Executor(store, work_seconds=WORK_SECONDS)


@pytest.fixture
def service(store, executor):
    return JobService(store, executor)


@pytest.fixture
def scheduler(store, executor):
    sched = Scheduler(store, executor, tick_seconds=TICK_SECONDS)
    yield sched
    sched.stop(timeout=5.0)
