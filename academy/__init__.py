"""
Academy Package

This package contains the school/academy domain of the backend: user
profiles and roles, the course catalog, enrollments, attendance and grades.

Structure:
- users/: Profiles, roles and JWT authentication
- courses/: Course catalog and enrollment workflow
- records/: Attendance records and grades

Payments live in core.stripe_integration and write back into the
enrollment and profile tables of this package.
"""
