from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Union

from ...common.datetime_utils import MonthWindow
from ...core.enums import StatsMode
from ..model import HoursRow, SessionFact, TeacherFact
from .base import Aggregator, resolve_window


class HoursAggregator(Aggregator):
    """Minutes taught per teacher, or per subject.

    In subject view each session's minutes are split evenly across all of the
    teacher's subjects, whichever subject the session actually covered.
    """

    def compute(
        self,
        mode: StatsMode,
        month: Union[MonthWindow, str, None],
        teachers: Iterable[TeacherFact],
        sessions: Iterable[SessionFact],
    ) -> list[HoursRow]:
        window = resolve_window(mode, month)
        by_id = self.index(teachers)
        buckets: dict = defaultdict(float)

        for s in sessions:
            if window is not None and not window.contains(s.session_date):
                continue
            teacher = by_id.get(s.teacher_id) or TeacherFact(s.teacher_id, str(s.teacher_id), "")
            keys = self.keys_for(teacher)
            if not keys:
                continue
            share = s.duration_minutes / len(keys)
            for key in keys:
                buckets[key] += share

        rows = []
        for key, minutes in buckets.items():
            label, name = self.label_for(key, by_id)
            rows.append(HoursRow(key=key, label=label, minutes=minutes, name=name))

        rows.sort(key=lambda r: (-r.minutes, r.label))
        return rows
