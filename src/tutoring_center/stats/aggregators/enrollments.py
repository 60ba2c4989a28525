from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Union

from ...common.datetime_utils import MonthWindow
from ...core.enums import StatsMode, StatsView
from ..model import CourseFact, EnrollmentCountRow
from .base import Aggregator, resolve_window


class EnrollmentAggregator(Aggregator):
    """Distinct students per teacher or subject over qualifying courses.

    Every enrollment row counts, closed ones included: a student who was on
    the roster during the window is counted even if removed later.
    """

    def compute(
        self,
        mode: StatsMode,
        month: Union[MonthWindow, str, None],
        courses: Iterable[CourseFact],
    ) -> list[EnrollmentCountRow]:
        window = resolve_window(mode, month)
        courses = list(courses)
        teachers = self.index(c.teacher for c in courses)
        students: dict = defaultdict(set)

        for course in courses:
            if not course.qualifies(window):
                continue
            codes = course.student_codes
            for key in self.keys_for(course.teacher):
                students[key] |= codes

        rows = []
        for key, codes in students.items():
            # Teachers with a qualifying course stay listed at zero; subjects do not.
            if not codes and self.view == StatsView.SUBJECT:
                continue
            label, name = self.label_for(key, teachers)
            rows.append(EnrollmentCountRow(key=key, label=label, count=len(codes), name=name))

        rows.sort(key=lambda r: (-r.count, r.label))
        return rows
