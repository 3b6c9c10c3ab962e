"""
Academy Course Models

Models:
- Course: Catalog entry taught by a teacher, optionally priced
- CourseEnrollment: Binding between a student and a course

An enrollment carries two independent states: the teacher approval
workflow (ApprovalStatus) and the payment workflow (EnrollmentStatus).
There is at most one enrollment per (student, course).
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

__all__ = ["Course", "CourseEnrollment", "ApprovalStatus", "EnrollmentStatus"]


class ApprovalStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    APPROVED = "approved", _("Approved")
    REJECTED = "rejected", _("Rejected")


class EnrollmentStatus(models.TextChoices):
    NOT_ENROLLED = "not_enrolled", _("Not enrolled")
    ENROLLED = "enrolled", _("Enrolled")


class Course(models.Model):
    """A course of the catalog."""

    code = models.CharField(max_length=32, unique=True, verbose_name=_("Code"))
    name = models.CharField(max_length=255, verbose_name=_("Name"))
    description = models.TextField(blank=True, verbose_name=_("Description"))
    room = models.CharField(max_length=64, blank=True, verbose_name=_("Room"))
    teacher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="taught_courses",
        verbose_name=_("Teacher"),
    )
    price = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Price"),
        help_text=_("Course fee in minor currency units (e.g. cents), 0 = free"),
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Course")
        verbose_name_plural = _("Courses")
        ordering = ["code"]

    def __str__(self) -> str:
        return f"{self.code} – {self.name}"


class CourseEnrollment(models.Model):
    """Enrollment of a student in a course."""

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="enrollments",
        verbose_name=_("Student"),
    )
    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="enrollments",
        verbose_name=_("Course"),
    )
    approval_status = models.CharField(
        max_length=16,
        choices=ApprovalStatus.choices,
        default=ApprovalStatus.PENDING,
        verbose_name=_("Approval status"),
    )
    enrollment_status = models.CharField(
        max_length=16,
        choices=EnrollmentStatus.choices,
        default=EnrollmentStatus.NOT_ENROLLED,
        verbose_name=_("Enrollment status"),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Course enrollment")
        verbose_name_plural = _("Course enrollments")
        constraints = [
            models.UniqueConstraint(
                fields=["student", "course"], name="unique_enrollment_per_student_course"
            ),
        ]
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["course", "approval_status"], name="academy_cou_course__3f1a2b_idx"),
        ]

    def __str__(self):
        return f"{self.student} – {self.course.code}: {self.approval_status}/{self.enrollment_status}"

    @property
    def is_enrolled(self) -> bool:
        return self.enrollment_status == EnrollmentStatus.ENROLLED

