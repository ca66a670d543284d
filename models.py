from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

SCHEDULED = "scheduled"
EXECUTING = "executing"
EXECUTED = "executed"
CANCELLED = "cancelled"

STATUSES = (SCHEDULED, EXECUTING, EXECUTED, CANCELLED)

# Legal transitions; nothing leaves a terminal status.
TRANSITIONS = {
    SCHEDULED: (EXECUTING, CANCELLED),
    EXECUTING: (EXECUTED,),
    EXECUTED: (),
    CANCELLED: (),
}


def utcnow():
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive timestamps are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def can_transition(old: str, new: str) -> bool:
    return new in TRANSITIONS.get(old, ())


@dataclass
class Job:
    description: str
    execute_at: datetime
    id: str = ""
    status: str = SCHEDULED   # scheduled | executing | executed | cancelled
    executed_at: Optional[datetime] = None

    def is_due(self, now: Optional[datetime] = None) -> bool:
        now = now or utcnow()
        return self.status == SCHEDULED and self.execute_at <= now

    def to_dict(self):
        data = {
            "id": self.id,
            "description": self.description,
            "executeAt": self.execute_at.isoformat(),
            "status": self.status,
        }
        if self.executed_at is not None:
            data["executedAt"] = self.executed_at.isoformat()
        return data
