"""
Overlap detection for tasks on the same day.

A task occupies the half-open interval [start, start + duration) in minutes
since midnight, so a task ending at 10:00 and another starting at 10:00 do not
collide. Callers are responsible for handing in only siblings of the same
owner and date (and for leaving out the task being edited).
"""
from dataclasses import dataclass
from datetime import date, time

from backend.time_helpers import time_to_minutes


@dataclass(frozen=True)
class TaskSlot:
    date: date
    start_time: time
    duration: int

    @classmethod
    def from_fields(cls, fields):
        return cls(date=fields['date'], start_time=fields['start_time'], duration=int(fields['duration']))


def intervals_overlap(a_start, a_end, b_start, b_end):
    return a_start < b_end and a_end > b_start


def task_interval(task):
    start = time_to_minutes(task.start_time)
    return start, start + int(task.duration)


def find_conflict(candidate, siblings):
    """Return the first sibling overlapping `candidate`, or None."""
    cand_start, cand_end = task_interval(candidate)
    for existing in siblings:
        ex_start, ex_end = task_interval(existing)
        if intervals_overlap(cand_start, cand_end, ex_start, ex_end):
            return existing
    return None
