"""
Enrollment workflow services.

All writes are keyed on (student, course) and rely on the unique constraint
of CourseEnrollment, so every operation here can be repeated without
creating a second row.
"""

from __future__ import annotations

import logging
from typing import Tuple

from django.db import transaction

from .models import ApprovalStatus, Course, CourseEnrollment, EnrollmentStatus

logger = logging.getLogger(__name__)


class EnrollmentTransitionError(ValueError):
    """Raised when an approval transition is not allowed."""


def request_enrollment(student, course: Course) -> Tuple[CourseEnrollment, bool]:
    """
    Create a pending enrollment request, or reset a previously rejected one.

    Returns:
        (enrollment, created)
    """
    with transaction.atomic():
        enrollment, created = CourseEnrollment.objects.select_for_update().get_or_create(
            student=student,
            course=course,
            defaults={"approval_status": ApprovalStatus.PENDING},
        )
        if not created and enrollment.approval_status == ApprovalStatus.REJECTED:
            enrollment.approval_status = ApprovalStatus.PENDING
            enrollment.save(update_fields=["approval_status", "updated_at"])
            logger.info(
                "Re-requested enrollment student=%s course=%s", student.id, course.id
            )
    if created:
        logger.info("Enrollment requested student=%s course=%s", student.id, course.id)
    return enrollment, created


def set_approval_status(enrollment: CourseEnrollment, approval_status: str) -> CourseEnrollment:
    """
    Teacher decision on a pending request. Only approved/rejected are valid targets.
    """
    if approval_status not in (ApprovalStatus.APPROVED, ApprovalStatus.REJECTED):
        raise EnrollmentTransitionError(
            f"Approval status must be '{ApprovalStatus.APPROVED}' or '{ApprovalStatus.REJECTED}'."
        )
    if enrollment.approval_status != approval_status:
        enrollment.approval_status = approval_status
        enrollment.save(update_fields=["approval_status", "updated_at"])
        logger.info(
            "Enrollment %s set to %s (course=%s)", enrollment.id, approval_status, enrollment.course_id
        )
    return enrollment


def mark_enrolled(student, course: Course) -> Tuple[CourseEnrollment, bool]:
    """
    Upsert the enrollment of a student who paid for a course.

    A new row is created as (approved, enrolled). An existing row keeps its
    approval status and only has its enrollment status set to enrolled.

    Returns:
        (enrollment, changed) where changed is False if it was already enrolled.
    """
    with transaction.atomic():
        enrollment, created = CourseEnrollment.objects.select_for_update().get_or_create(
            student=student,
            course=course,
            defaults={
                "approval_status": ApprovalStatus.APPROVED,
                "enrollment_status": EnrollmentStatus.ENROLLED,
            },
        )
        if created:
            logger.info("Enrolled student=%s course=%s after payment", student.id, course.id)
            return enrollment, True

        if enrollment.enrollment_status == EnrollmentStatus.ENROLLED:
            logger.info("Enrollment already active for student=%s course=%s", student.id, course.id)
            return enrollment, False

        enrollment.enrollment_status = EnrollmentStatus.ENROLLED
        enrollment.save(update_fields=["enrollment_status", "updated_at"])
        logger.info("Activated enrollment student=%s course=%s after payment", student.id, course.id)
        return enrollment, True
