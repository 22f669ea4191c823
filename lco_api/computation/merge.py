# lco_api/computation/merge.py

import heapq

from .schemas import Schedule


def merge_schedules(first: Schedule, second: Schedule, third: Schedule, fourth: Schedule) -> Schedule:
    """
    Combine the schedules of a composite component's four parts into one
    chronological plan.

    Entries in the same year keep input order (first before second, and so
    on). The merged objective is the sum of the four objectives.
    """
    schedules = (first, second, third, fourth)
    entries = list(
        heapq.merge(*(s.entries for s in schedules), key=lambda entry: entry.repair_year)
    )
    return Schedule(
        entries=[entry.model_copy() for entry in entries],
        objective=sum(s.objective for s in schedules),
    )
