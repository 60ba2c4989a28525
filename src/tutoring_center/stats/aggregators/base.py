from __future__ import annotations

from abc import ABC
from typing import Iterable, Optional, Union

from ...common.datetime_utils import MonthWindow
from ...common.validators import normalize_tags
from ...core.enums import StatsMode, StatsView
from ...core.exceptions import InvalidInputError
from ..model import StatsKey, TeacherFact


def resolve_window(mode: StatsMode, month: Union[MonthWindow, str, None]) -> Optional[MonthWindow]:
    """Month window for monthly mode, None for cumulative mode."""
    mode = StatsMode(mode)
    if mode == StatsMode.CUMULATIVE:
        return None
    if month is None:
        raise InvalidInputError("Monthly statistics need a month")
    return month if isinstance(month, MonthWindow) else MonthWindow.parse(month)


class Aggregator(ABC):
    """Shared keying for the statistics aggregators.

    Teacher view buckets by teacher id; subject view buckets by each distinct
    subject the teacher holds.
    """

    def __init__(self, view: StatsView = StatsView.TEACHER):
        self._view = StatsView(view)

    @property
    def view(self) -> StatsView:
        return self._view

    def keys_for(self, teacher: TeacherFact) -> tuple[StatsKey, ...]:
        if self._view == StatsView.TEACHER:
            return (teacher.teacher_id,)
        return normalize_tags(teacher.subjects)

    def label_for(self, key: StatsKey, teachers: dict[int, TeacherFact]) -> tuple[str, Optional[str]]:
        if self._view == StatsView.TEACHER:
            t = teachers.get(key)
            if t:
                return t.teacher_code, t.name
            return str(key), None
        return str(key), None

    @staticmethod
    def index(teachers: Iterable[TeacherFact]) -> dict[int, TeacherFact]:
        return {t.teacher_id: t for t in teachers}
