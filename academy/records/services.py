"""
Attendance and grade aggregation.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple, Union

from django.db import transaction

from .models import AttendanceRecord

Number = Union[int, float, Decimal]

# Lower bound (percent) for each letter, checked top-down
LETTER_THRESHOLDS = (
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
)


def attendance_percentage(present: int, absent: int) -> Optional[float]:
    """Share of attended sessions in percent, one decimal; None without sessions."""
    if present < 0 or absent < 0:
        raise ValueError("Session counts cannot be negative.")
    total = present + absent
    if total == 0:
        return None
    return round(present * 100 / total, 1)


def score_percentage(score: Number, max_score: Number) -> float:
    if max_score <= 0:
        raise ValueError("max_score must be positive.")
    return round(float(score) * 100 / float(max_score), 1)


def letter_grade(score: Number, max_score: Number) -> str:
    percentage = score_percentage(score, max_score)
    for lower_bound, letter in LETTER_THRESHOLDS:
        if percentage >= lower_bound:
            return letter
    return "F"


@transaction.atomic
def record_attendance(course, date, present: Iterable, absent: Iterable) -> Tuple[AttendanceRecord, bool]:
    """Create or replace the attendance of one course session."""
    record, created = AttendanceRecord.objects.get_or_create(course=course, date=date)
    record.present_students.set(present)
    record.absent_students.set(absent)
    record.save()
    return record, created


def attendance_summary(student) -> List[Dict]:
    """Per-course attendance of a student across all recorded sessions."""
    counts = defaultdict(lambda: {"present": 0, "absent": 0})
    courses = {}

    records = (
        AttendanceRecord.objects.filter(present_students=student)
        .select_related("course")
        .distinct()
    )
    for record in records:
        courses[record.course_id] = record.course
        counts[record.course_id]["present"] += 1

    records = (
        AttendanceRecord.objects.filter(absent_students=student)
        .select_related("course")
        .distinct()
    )
    for record in records:
        courses[record.course_id] = record.course
        counts[record.course_id]["absent"] += 1

    summary = []
    for course_id, course in sorted(courses.items(), key=lambda item: item[1].code):
        present = counts[course_id]["present"]
        absent = counts[course_id]["absent"]
        summary.append(
            {
                "course": course_id,
                "course_code": course.code,
                "present": present,
                "absent": absent,
                "percentage": attendance_percentage(present, absent),
            }
        )
    return summary
