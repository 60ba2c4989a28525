from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Iterable, Optional

from tutoring_center.attendance.model import AttendanceRecord
from tutoring_center.audit.model import AuditEvent
from tutoring_center.core.enums import AttendanceStatus, TeacherStatus
from tutoring_center.courses.model import Course
from tutoring_center.enrollments.model import Enrollment
from tutoring_center.sessions.model import Session
from tutoring_center.students.model import Student
from tutoring_center.teachers.model import Teacher


@dataclass
class State:
    teachers: dict[int, Teacher] = field(default_factory=dict)
    students: dict[int, Student] = field(default_factory=dict)
    courses: dict[int, Course] = field(default_factory=dict)
    sessions: dict[int, Session] = field(default_factory=dict)
    enrollments: dict[int, Enrollment] = field(default_factory=dict)
    attendance: dict[int, AttendanceRecord] = field(default_factory=dict)
    audit: list[AuditEvent] = field(default_factory=list)
    next_id: int = 0

    def new_id(self) -> int:
        self.next_id += 1
        return self.next_id


class InMemoryTeachers:
    def __init__(self, state: State):
        self._s = state

    def get_by_id(self, teacher_id):
        return self._s.teachers.get(teacher_id)

    def get_by_code(self, teacher_code):
        return next((t for t in self._s.teachers.values() if t.teacher_code == teacher_code), None)

    def create(self, *, teacher_code, name, subjects, hire_date, status):
        tid = self._s.new_id()
        self._s.teachers[tid] = Teacher(tid, teacher_code, name, tuple(subjects), hire_date, status)
        return tid

    def update(self, teacher_id, *, name, subjects, status):
        t = self._s.teachers.get(teacher_id)
        if not t:
            return False
        self._s.teachers[teacher_id] = replace(t, name=name, subjects=tuple(subjects), status=status)
        return True

    def list_all(self):
        return sorted(self._s.teachers.values(), key=lambda t: t.name)


class InMemoryStudents:
    def __init__(self, state: State):
        self._s = state

    def get_by_id(self, student_id):
        return self._s.students.get(student_id)

    def get_by_code(self, student_code):
        return next((s for s in self._s.students.values() if s.student_code == student_code), None)

    def create(self, *, student_code, name, phone, grade):
        sid = self._s.new_id()
        self._s.students[sid] = Student(sid, student_code, name, phone, grade)
        return sid

    def update_profile(self, student_id, *, name, phone, grade):
        s = self._s.students.get(student_id)
        if not s:
            return False
        self._s.students[student_id] = replace(s, name=name, phone=phone, grade=grade)
        return True

    def mark_first_enrolled(self, student_id, *, at):
        s = self._s.students.get(student_id)
        if not s or s.first_enrolled_at is not None:
            return False
        self._s.students[student_id] = replace(s, first_enrolled_at=at)
        return True

    def mark_deleted(self, student_id):
        s = self._s.students.get(student_id)
        if not s or s.is_deleted:
            return False
        self._s.students[student_id] = replace(s, is_deleted=True)
        return True

    def list_all(self):
        return sorted(self._s.students.values(), key=lambda s: s.student_code)


class InMemoryCourses:
    def __init__(self, state: State):
        self._s = state

    def get_by_id(self, course_id, *, for_update=False):
        return self._s.courses.get(course_id)

    def get_by_code(self, course_code):
        return next((c for c in self._s.courses.values() if c.course_code == course_code), None)

    def create(self, *, course_code, teacher_id, grades):
        cid = self._s.new_id()
        self._s.courses[cid] = Course(cid, course_code, teacher_id, tuple(grades))
        return cid

    def update(self, course_id, *, teacher_id, grades):
        c = self._s.courses[course_id]
        self._s.courses[course_id] = replace(c, teacher_id=teacher_id, grades=tuple(grades))
        return True

    def set_session_seq(self, course_id, *, session_seq):
        c = self._s.courses[course_id]
        self._s.courses[course_id] = replace(c, session_seq=max(c.session_seq, session_seq))
        return True

    def mark_deleted(self, course_id):
        c = self._s.courses[course_id]
        if c.is_deleted:
            return False
        self._s.courses[course_id] = replace(c, is_deleted=True)
        return True

    def list_all(self):
        return sorted(self._s.courses.values(), key=lambda c: c.course_id)


class InMemorySessions:
    def __init__(self, state: State):
        self._s = state

    def get_by_id(self, session_id):
        return self._s.sessions.get(session_id)

    def list_for_course(self, course_id):
        items = [s for s in self._s.sessions.values() if s.course_id == course_id]
        return sorted(items, key=lambda s: (s.session_date, s.seq))

    def create(self, *, course_id, seq, session_code, session_date, start_time, end_time, duration_minutes):
        if any(s.session_code == session_code for s in self._s.sessions.values()):
            raise AssertionError(f"duplicate session code {session_code}")
        sid = self._s.new_id()
        self._s.sessions[sid] = Session(sid, course_id, seq, session_code, session_date, start_time, end_time, duration_minutes)
        return sid

    def update_times(self, session_id, *, session_date, start_time, end_time, duration_minutes):
        s = self._s.sessions.get(session_id)
        if not s:
            return False
        self._s.sessions[session_id] = replace(
            s, session_date=session_date, start_time=start_time, end_time=end_time, duration_minutes=duration_minutes
        )
        return True

    def delete_many(self, session_ids: Iterable[int]):
        count = 0
        for sid in list(session_ids):
            if self._s.sessions.pop(sid, None) is not None:
                count += 1
        return count

    def list_all(self):
        return sorted(self._s.sessions.values(), key=lambda s: (s.session_date, s.course_id, s.seq))


class InMemoryEnrollments:
    def __init__(self, state: State):
        self._s = state

    def list_active_for_course(self, course_id):
        return [e for e in self._s.enrollments.values() if e.course_id == course_id and e.is_active]

    def list_for_course(self, course_id):
        return [e for e in self._s.enrollments.values() if e.course_id == course_id]

    def find_latest(self, *, course_id, student_id):
        rows = [e for e in self._s.enrollments.values() if e.course_id == course_id and e.student_id == student_id]
        if not rows:
            return None
        return max(rows, key=lambda e: (e.joined_at, e.enrollment_id))

    def create(self, *, course_id, student_id, joined_at):
        if any(e.is_active for e in self.list_for_course(course_id) if e.student_id == student_id):
            raise AssertionError("second active enrollment for the same pair")
        eid = self._s.new_id()
        self._s.enrollments[eid] = Enrollment(eid, course_id, student_id, joined_at, None)
        return eid

    def close(self, enrollment_id, *, ended_at):
        e = self._s.enrollments.get(enrollment_id)
        if not e or not e.is_active:
            return False
        self._s.enrollments[enrollment_id] = replace(e, ended_at=ended_at)
        return True

    def reactivate(self, enrollment_id, *, joined_at):
        e = self._s.enrollments.get(enrollment_id)
        if not e or e.is_active:
            return False
        self._s.enrollments[enrollment_id] = replace(e, joined_at=joined_at, ended_at=None)
        return True

    def list_all(self):
        return list(self._s.enrollments.values())


class InMemoryAttendance:
    def __init__(self, state: State):
        self._s = state

    def get_for_session_and_student(self, *, session_id, student_id):
        return next(
            (a for a in self._s.attendance.values() if a.session_id == session_id and a.student_id == student_id),
            None,
        )

    def upsert(self, *, session_id, student_id, status, recorded_at):
        existing = self.get_for_session_and_student(session_id=session_id, student_id=student_id)
        if existing:
            rec = replace(existing, status=status, recorded_at=recorded_at)
        else:
            rec = AttendanceRecord(self._s.new_id(), session_id, student_id, status, recorded_at)
        self._s.attendance[rec.attendance_id] = rec
        return rec

    def list_for_session(self, session_id):
        return [a for a in self._s.attendance.values() if a.session_id == session_id]

    def delete_for_sessions(self, session_ids):
        ids = set(session_ids)
        doomed = [k for k, a in self._s.attendance.items() if a.session_id in ids]
        for k in doomed:
            del self._s.attendance[k]
        return len(doomed)


class InMemoryAudit:
    def __init__(self, state: State):
        self._s = state

    def append(self, event):
        self._s.audit.append(event)


@dataclass
class InMemorySession:
    teachers: InMemoryTeachers
    students: InMemoryStudents
    courses: InMemoryCourses
    sessions: InMemorySessions
    enrollments: InMemoryEnrollments
    attendance: InMemoryAttendance
    audit: InMemoryAudit

    @classmethod
    def bind(cls, state: State) -> "InMemorySession":
        return cls(
            teachers=InMemoryTeachers(state),
            students=InMemoryStudents(state),
            courses=InMemoryCourses(state),
            sessions=InMemorySessions(state),
            enrollments=InMemoryEnrollments(state),
            attendance=InMemoryAttendance(state),
            audit=InMemoryAudit(state),
        )


class InMemoryStore:
    """Store fake: every transaction works on a copy that replaces the state only on success."""

    def __init__(self):
        self.state = State()
        self.commits = 0
        self.rollbacks = 0

    @contextmanager
    def transaction(self):
        working = copy.deepcopy(self.state)
        try:
            yield InMemorySession.bind(working)
        except Exception:
            self.rollbacks += 1
            raise
        self.state = working
        self.commits += 1

    @contextmanager
    def reader(self):
        yield InMemorySession.bind(copy.deepcopy(self.state))

    # Seeding helpers: write straight into committed state.

    def add_teacher(self, code="T1", subjects=("Math",), name=None) -> Teacher:
        tid = self.state.new_id()
        t = Teacher(tid, code, name or f"Teacher {code}", tuple(subjects), date(2024, 1, 1), TeacherStatus.ACTIVE)
        self.state.teachers[tid] = t
        return t

    def add_student(self, code, first_enrolled_at: Optional[datetime] = None, *, is_deleted=False) -> Student:
        sid = self.state.new_id()
        s = Student(sid, code, f"Student {code}", "0000", "S3", first_enrolled_at, is_deleted)
        self.state.students[sid] = s
        return s

    def add_course(self, code, teacher_id, *, is_deleted=False, session_seq=0) -> Course:
        cid = self.state.new_id()
        c = Course(cid, code, teacher_id, ("S3",), session_seq, is_deleted)
        self.state.courses[cid] = c
        return c

    def add_session(self, course_id, session_date, start="10:00", end="12:00", duration=120) -> Session:
        course = self.state.courses[course_id]
        seq = course.session_seq + 1
        self.state.courses[course_id] = replace(course, session_seq=seq)
        sid = self.state.new_id()
        s = Session(sid, course_id, seq, f"{course.course_code}-{seq:02d}", session_date, start, end, duration)
        self.state.sessions[sid] = s
        return s

    def add_enrollment(self, course_id, student_id, joined_at, ended_at=None) -> Enrollment:
        eid = self.state.new_id()
        e = Enrollment(eid, course_id, student_id, joined_at, ended_at)
        self.state.enrollments[eid] = e
        return e

    def add_attendance(self, session_id, student_id, status=AttendanceStatus.PRESENT, at=None) -> AttendanceRecord:
        aid = self.state.new_id()
        a = AttendanceRecord(aid, session_id, student_id, status, at or datetime(2026, 1, 1))
        self.state.attendance[aid] = a
        return a

    def enrollments_for(self, course_id, student_id):
        return [e for e in self.state.enrollments.values() if e.course_id == course_id and e.student_id == student_id]
