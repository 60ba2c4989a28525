from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Union

from ...common.datetime_utils import MonthWindow
from ..model import CourseFact, RetentionRow
from .base import Aggregator


class RetentionAggregator(Aggregator):
    """Month-over-month continuation of existing students.

    For month M, the cohort of M-1 under a key is every student with any
    enrollment row in a course that had a session in M-1. A student counts
    as retained when they are also in a qualifying course of M under the same
    key and their first-ever enrollment is no later than the end of M-1.
    Keys with an empty M-1 cohort have no rate and are left out.
    """

    def compute(self, month: Union[MonthWindow, str], courses: Iterable[CourseFact]) -> list[RetentionRow]:
        current = month if isinstance(month, MonthWindow) else MonthWindow.parse(month)
        previous = current.previous()
        cutoff = previous.end
        courses = list(courses)
        teachers = self.index(c.teacher for c in courses)

        cohort: dict = defaultdict(set)
        for course in courses:
            if not course.qualifies(previous):
                continue
            codes = course.student_codes
            for key in self.keys_for(course.teacher):
                cohort[key] |= codes

        retained: dict = defaultdict(set)
        for course in courses:
            if not course.qualifies(current):
                continue
            existing = {
                m.student_code
                for m in course.members
                if m.first_enrolled_at is not None and m.first_enrolled_at <= cutoff
            }
            for key in self.keys_for(course.teacher):
                if key in cohort:
                    retained[key] |= existing & cohort[key]

        rows = []
        for key, codes in cohort.items():
            if not codes:
                continue
            label, name = self.label_for(key, teachers)
            rows.append(
                RetentionRow(
                    key=key,
                    label=label,
                    previous_count=len(codes),
                    retained_count=len(retained.get(key, ())),
                    name=name,
                )
            )

        rows.sort(key=lambda r: (-r.rate, r.label))
        return rows
