from datetime import date, datetime

import pytest

from tutoring_center.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from tutoring_center.sessions.model import SessionEdit
from tutoring_center.sessions.scheduler import SessionScheduler


def _course_with_three_sessions(store):
    teacher = store.add_teacher()
    course = store.add_course("MATH9", teacher.teacher_id)
    sessions = [store.add_session(course.course_id, date(2026, 3, d)) for d in (2, 9, 16)]
    return course, sessions


def _keep(session):
    return SessionEdit(session.session_date, session.start_time, session.end_time, session_id=session.session_id)


def test_deleted_sequence_numbers_are_never_reused(store, fixed_now):
    course, (s1, s2, s3) = _course_with_three_sessions(store)

    result = SessionScheduler(store).schedule_sessions(
        course.course_id,
        [_keep(s1), _keep(s3), SessionEdit(date(2026, 3, 23), "10:00", "11:30")],
        actor_id=1,
        now=fixed_now,
    )

    assert [s.session_code for s in result] == ["MATH9-01", "MATH9-03", "MATH9-04"]
    assert result[-1].duration_minutes == 90
    assert store.state.courses[course.course_id].session_seq == 4


def test_update_keeps_code_and_recomputes_duration(store, fixed_now):
    course, (s1, s2, s3) = _course_with_three_sessions(store)

    edits = [
        SessionEdit(date(2026, 3, 3), "08:00", "08:45", session_id=s1.session_id),
        _keep(s2),
        _keep(s3),
    ]
    result = SessionScheduler(store).schedule_sessions(course.course_id, edits, actor_id=1, now=fixed_now)

    first = next(s for s in result if s.session_id == s1.session_id)
    assert first.session_code == "MATH9-01"
    assert first.session_date == date(2026, 3, 3)
    assert first.duration_minutes == 45
    assert store.state.audit[-1].action == "sessions_update"
    assert store.state.audit[-1].details["updated"] == 3


def test_deleting_a_session_removes_its_attendance(store, fixed_now):
    course, (s1, s2, s3) = _course_with_three_sessions(store)
    student = store.add_student("S1")
    store.add_attendance(s2.session_id, student.student_id)
    store.add_attendance(s1.session_id, student.student_id)

    SessionScheduler(store).schedule_sessions(course.course_id, [_keep(s1), _keep(s3)], actor_id=1, now=fixed_now)

    assert s2.session_id not in store.state.sessions
    assert [a.session_id for a in store.state.attendance.values()] == [s1.session_id]


def test_end_before_start_is_rejected_without_changes(store, fixed_now):
    course, (s1, s2, s3) = _course_with_three_sessions(store)
    before = dict(store.state.sessions)

    with pytest.raises(InvalidInputError):
        SessionScheduler(store).schedule_sessions(
            course.course_id,
            [_keep(s1), SessionEdit(date(2026, 3, 30), "11:00", "10:00")],
            actor_id=1,
            now=fixed_now,
        )

    assert store.state.sessions == before


def test_session_from_another_course_is_not_found(store, fixed_now):
    course, (s1, _, _) = _course_with_three_sessions(store)
    other = store.add_course("PHYS9", course.teacher_id)
    foreign = store.add_session(other.course_id, date(2026, 3, 4))

    with pytest.raises(NotFoundError):
        SessionScheduler(store).schedule_sessions(course.course_id, [_keep(s1), _keep(foreign)], actor_id=1, now=fixed_now)


def test_duplicate_session_id_is_invalid(store, fixed_now):
    course, (s1, _, _) = _course_with_three_sessions(store)

    with pytest.raises(InvalidInputError):
        SessionScheduler(store).schedule_sessions(course.course_id, [_keep(s1), _keep(s1)], actor_id=1, now=fixed_now)


def test_create_sessions_appends_after_highest_sequence(store, fixed_now):
    teacher = store.add_teacher()
    course = store.add_course("CHEM", teacher.teacher_id, session_seq=7)

    result = SessionScheduler(store).create_sessions(
        course.course_id,
        [SessionEdit(date(2026, 4, 1), "14:00", "16:00"), SessionEdit(date(2026, 4, 8), "14:00", "16:00")],
        actor_id=1,
        now=fixed_now,
    )

    assert [s.session_code for s in result] == ["CHEM-08", "CHEM-09"]
    assert store.state.audit[-1].action == "sessions_create"


def test_deleted_course_cannot_be_scheduled(store, fixed_now):
    teacher = store.add_teacher()
    course = store.add_course("OLD", teacher.teacher_id, is_deleted=True)

    with pytest.raises(ConflictError):
        SessionScheduler(store).create_sessions(
            course.course_id, [SessionEdit(date(2026, 4, 1), "14:00", "16:00")], actor_id=1, now=fixed_now
        )


def test_timetable_lists_live_courses_with_active_roster(store):
    t1 = store.add_teacher("T1", name="An")
    t2 = store.add_teacher("T2", name="Binh")
    math = store.add_course("MATH9", t1.teacher_id)
    chem = store.add_course("CHEM9", t2.teacher_id)
    gone = store.add_course("OLD", t1.teacher_id, is_deleted=True)
    store.add_session(math.course_id, date(2026, 3, 9), start="18:00", end="19:30", duration=90)
    store.add_session(chem.course_id, date(2026, 3, 2))
    store.add_session(gone.course_id, date(2026, 3, 3))
    store.add_session(math.course_id, date(2026, 4, 6))
    a = store.add_student("A")
    b = store.add_student("B")
    store.add_enrollment(math.course_id, a.student_id, datetime(2026, 2, 1))
    store.add_enrollment(math.course_id, b.student_id, datetime(2026, 2, 1), ended_at=datetime(2026, 2, 20))

    sched = SessionScheduler(store)
    march = sched.timetable(month="2026-03")
    mine = sched.timetable(teacher_id=t1.teacher_id)

    assert [(e.session_code, e.teacher_name, e.active_students) for e in march] == [
        ("CHEM9-01", "Binh", 0),
        ("MATH9-01", "An", 1),
    ]
    assert [e.session_code for e in mine] == ["MATH9-01", "MATH9-02"]
    assert march[1].duration_minutes == 90
