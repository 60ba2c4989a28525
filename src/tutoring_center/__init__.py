"""Tutoring Center core package.

Organized by feature modules (teachers, students, courses, sessions,
enrollments, attendance, stats) with protocol repositories, a MySQL storage
adapter and service classes wired together in ``container``.
"""
