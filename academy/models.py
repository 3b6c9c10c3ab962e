"""
Academy Models Registry

Imports and exposes all models from the logical submodules (users, courses,
records) so they are registered with Django's ORM under the "academy" label.

Architecture:
- users/: Profile with role, fee status and cached payment customer id
- courses/: Course and CourseEnrollment
- records/: AttendanceRecord and Grade
"""

from .users.models import *  # noqa: F401,F403

from .courses.models import *  # noqa: F401,F403

from .records.models import *  # noqa: F401,F403
