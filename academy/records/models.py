"""
Academy Records Models

Models:
- AttendanceRecord: Present/absent students of one course session (course + date)
- Grade: Score of a student for one assessment in a course
"""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from academy.courses.models import Course

__all__ = ["AttendanceRecord", "Grade"]


class AttendanceRecord(models.Model):
    """Attendance of one course session."""

    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="attendance_records",
        verbose_name=_("Course"),
    )
    date = models.DateField(verbose_name=_("Date"))
    present_students = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name="attended_sessions",
        blank=True,
        verbose_name=_("Present students"),
    )
    absent_students = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name="missed_sessions",
        blank=True,
        verbose_name=_("Absent students"),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Attendance record")
        verbose_name_plural = _("Attendance records")
        unique_together = ("course", "date")
        ordering = ["-date"]

    def __str__(self):
        return f"{self.course.code} – {self.date}"


class Grade(models.Model):
    """Score for one assessment."""

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="grades",
        verbose_name=_("Student"),
    )
    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="grades",
        verbose_name=_("Course"),
    )
    assessment_name = models.CharField(max_length=255, verbose_name=_("Assessment"))
    score = models.DecimalField(
        max_digits=7,
        decimal_places=2,
        validators=[MinValueValidator(0)],
        verbose_name=_("Score"),
    )
    max_score = models.DecimalField(
        max_digits=7,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        verbose_name=_("Max score"),
    )
    graded_at = models.DateTimeField(default=timezone.now, verbose_name=_("Graded at"))

    class Meta:
        verbose_name = _("Grade")
        verbose_name_plural = _("Grades")
        ordering = ["-graded_at"]
        indexes = [
            models.Index(fields=["student", "course"], name="academy_gra_student_7c4d9e_idx"),
        ]

    def __str__(self):
        return f"{self.student} – {self.course.code} {self.assessment_name}: {self.score}/{self.max_score}"
