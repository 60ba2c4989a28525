from datetime import date, datetime

from tutoring_center.core.enums import StatsMode, StatsView
from tutoring_center.stats.aggregators.enrollments import EnrollmentAggregator
from tutoring_center.stats.aggregators.hours import HoursAggregator
from tutoring_center.stats.aggregators.retention import RetentionAggregator
from tutoring_center.stats.model import CourseFact, MemberFact, SessionFact, TeacherFact


def test_hours_ties_sort_by_label():
    teachers = [TeacherFact(1, "T-B", "B"), TeacherFact(2, "T-A", "A")]
    sessions = [
        SessionFact(10, 100, 1, date(2026, 3, 1), 60),
        SessionFact(11, 101, 2, date(2026, 3, 2), 60),
    ]

    rows = HoursAggregator().compute(StatsMode.CUMULATIVE, None, teachers, sessions)

    assert [r.label for r in rows] == ["T-A", "T-B"]


def test_duplicate_subjects_count_once():
    teachers = [TeacherFact(1, "T1", "A", subjects=("Math", " Math", "Physics"))]
    sessions = [SessionFact(10, 100, 1, date(2026, 3, 1), 90)]

    rows = HoursAggregator(StatsView.SUBJECT).compute(StatsMode.MONTHLY, "2026-03", teachers, sessions)

    assert {r.key: r.minutes for r in rows} == {"Math": 45, "Physics": 45}


def test_teacher_without_subjects_drops_out_of_subject_view():
    teachers = [TeacherFact(1, "T1", "A", subjects=())]
    sessions = [SessionFact(10, 100, 1, date(2026, 3, 1), 90)]

    assert HoursAggregator(StatsView.SUBJECT).compute(StatsMode.CUMULATIVE, None, teachers, sessions) == []


def test_enrollments_by_subject_merge_teachers():
    t1 = TeacherFact(1, "T1", "A", subjects=("Math",))
    t2 = TeacherFact(2, "T2", "B", subjects=("Math", "Chemistry"))
    courses = [
        CourseFact(1, "C1", t1, (date(2026, 3, 1),), (MemberFact("S1"), MemberFact("S2"))),
        CourseFact(2, "C2", t2, (date(2026, 3, 2),), (MemberFact("S2"), MemberFact("S3"))),
    ]

    rows = EnrollmentAggregator(StatsView.SUBJECT).compute(StatsMode.MONTHLY, "2026-03", courses)

    assert [(r.key, r.count) for r in rows] == [("Math", 3), ("Chemistry", 2)]


def test_half_minutes_round_up_for_display():
    teachers = [TeacherFact(1, "T1", "A", subjects=("Math", "Physics"))]
    sessions = [SessionFact(10, 100, 1, date(2026, 3, 1), 121)]

    rows = HoursAggregator(StatsView.SUBJECT).compute(StatsMode.MONTHLY, "2026-03", teachers, sessions)

    assert [(r.key, r.minutes, r.rounded_minutes) for r in rows] == [("Math", 60.5, 61), ("Physics", 60.5, 61)]


def test_retention_by_subject_counts_each_subject_separately():
    early = datetime(2025, 12, 1)
    math = TeacherFact(1, "T1", "A", subjects=("Math",))
    physics = TeacherFact(2, "T2", "B", subjects=("Physics",))
    member = MemberFact("S1", first_enrolled_at=early)
    courses = [
        CourseFact(1, "M-FEB", math, (date(2026, 2, 3),), (member,)),
        CourseFact(2, "P-FEB", physics, (date(2026, 2, 4),), (member,)),
        CourseFact(3, "M-MAR", math, (date(2026, 3, 3),), (member,)),
    ]

    rows = RetentionAggregator(StatsView.SUBJECT).compute("2026-03", courses)

    assert [(r.key, r.previous_count, r.retained_count) for r in rows] == [("Math", 1, 1), ("Physics", 1, 0)]


def test_retention_excludes_first_enrollment_after_previous_month():
    teacher = TeacherFact(1, "T1", "A", subjects=("Math",))
    members = (
        MemberFact("EARLY", first_enrolled_at=datetime(2026, 1, 10)),
        MemberFact("LATE", first_enrolled_at=datetime(2026, 3, 1, 0, 0)),
    )
    courses = [CourseFact(1, "C1", teacher, (date(2026, 2, 10), date(2026, 3, 10)), members)]

    rows = RetentionAggregator().compute("2026-03", courses)

    assert [(r.label, r.previous_count, r.retained_count) for r in rows] == [("T1", 2, 1)]
    assert rows[0].display_rate == 50.0


def test_teacher_without_students_listed_at_zero_only_in_teacher_view():
    busy = TeacherFact(1, "T1", "A", subjects=("Math",))
    idle = TeacherFact(2, "T2", "B", subjects=("Physics",))
    courses = [
        CourseFact(1, "C1", busy, (date(2026, 3, 1),), (MemberFact("S1"),)),
        CourseFact(2, "C2", idle, (date(2026, 3, 2),), ()),
    ]

    by_teacher = EnrollmentAggregator().compute(StatsMode.MONTHLY, "2026-03", courses)
    by_subject = EnrollmentAggregator(StatsView.SUBJECT).compute(StatsMode.MONTHLY, "2026-03", courses)

    assert [(r.label, r.count) for r in by_teacher] == [("T1", 1), ("T2", 0)]
    assert [(r.key, r.count) for r in by_subject] == [("Math", 1)]
