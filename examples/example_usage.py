"""Example: drive the services directly (no HTTP layer).

Creates a teacher, a course with two sessions and two students, sets the
roster, and prints this month's hours per teacher.
"""

from datetime import date

from tutoring_center.core.enums import StatsMode
from tutoring_center.main import create_container
from tutoring_center.sessions.model import SessionEdit

ADMIN_ID = 1


def main():
    container = create_container()

    teacher = container.teacher_service.create_teacher(
        teacher_code="T001",
        name="Demo Teacher",
        subjects=["Math", "Physics"],
        hire_date=date(2024, 9, 1),
        actor_id=ADMIN_ID,
    )
    today = date.today()
    course = container.course_service.create_course(
        course_code="MATH-S3-A",
        teacher_id=teacher.teacher_id,
        grades=["S3"],
        sessions=[
            SessionEdit(session_date=today, start_time="16:00", end_time="18:00"),
            SessionEdit(session_date=today, start_time="18:30", end_time="19:30"),
        ],
        actor_id=ADMIN_ID,
    )
    students = [
        container.student_service.create_student(
            student_code=code, name=name, phone="0000", grade="S3", actor_id=ADMIN_ID
        )
        for code, name in (("S001", "Student One"), ("S002", "Student Two"))
    ]

    change = container.roster_reconciler.apply_roster(
        course.course_id,
        [s.student_id for s in students],
        authorized=True,
        actor_id=ADMIN_ID,
    )
    print(f"roster: added={change.added} removed={change.removed}")

    month = f"{today.year:04d}-{today.month:02d}"
    for row in container.statistics_service.compute_hours(StatsMode.MONTHLY, month):
        print(f"{row.label}: {row.rounded_minutes} min ({row.hours} h)")


if __name__ == "__main__":
    main()
