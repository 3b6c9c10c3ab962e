"""
Academy Records Views

- Attendance: teachers record sessions, students read their own summary
- Grades: teachers record scores, students read their grades with letters
"""

import logging

from django.db.models import Q
from rest_framework import generics, permissions, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView

from academy.permissions import IsTeacherOrAdmin, is_admin, is_teacher_or_admin
from .models import AttendanceRecord, Grade
from .serializers import AttendanceRecordSerializer, AttendanceSummarySerializer, GradeSerializer
from .services import attendance_summary, record_attendance

logger = logging.getLogger(__name__)


def _ensure_course_teacher(user, course):
    if not is_admin(user) and course.teacher_id != user.id:
        raise PermissionDenied("Only the teacher of this course can do this.")


class AttendanceListCreateView(generics.ListCreateAPIView):
    serializer_class = AttendanceRecordSerializer
    permission_classes = [IsTeacherOrAdmin]

    def get_queryset(self):
        user = self.request.user
        qs = AttendanceRecord.objects.select_related("course").prefetch_related(
            "present_students", "absent_students"
        )
        if not is_teacher_or_admin(user):
            qs = qs.filter(Q(present_students=user) | Q(absent_students=user)).distinct()
        course_id = self.request.query_params.get("course")
        if course_id:
            qs = qs.filter(course_id=course_id)
        return qs.order_by("-date")

    def create(self, request, *args, **kwargs):
        """Upsert: an existing record for course+date is replaced."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        _ensure_course_teacher(request.user, data["course"])

        record, created = record_attendance(
            data["course"],
            data["date"],
            data.get("present_students", []),
            data.get("absent_students", []),
        )
        logger.info(
            "Attendance %s for course=%s date=%s",
            "recorded" if created else "updated",
            record.course_id,
            record.date,
        )

        return Response(
            self.get_serializer(record).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class AttendanceSummaryView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        summary = attendance_summary(request.user)
        return Response(AttendanceSummarySerializer(summary, many=True).data)


class GradeListCreateView(generics.ListCreateAPIView):
    serializer_class = GradeSerializer
    permission_classes = [IsTeacherOrAdmin]

    def get_queryset(self):
        user = self.request.user
        qs = Grade.objects.select_related("course", "student")
        if not is_admin(user):
            if is_teacher_or_admin(user):
                qs = qs.filter(course__teacher=user)
            else:
                qs = qs.filter(student=user)

        student_id = self.request.query_params.get("student")
        if student_id:
            qs = qs.filter(student_id=student_id)
        course_id = self.request.query_params.get("course")
        if course_id:
            qs = qs.filter(course_id=course_id)
        return qs.order_by("-graded_at")

    def perform_create(self, serializer):
        _ensure_course_teacher(self.request.user, serializer.validated_data["course"])
        grade = serializer.save()
        logger.info(
            "Grade recorded student=%s course=%s assessment=%s",
            grade.student_id,
            grade.course_id,
            grade.assessment_name,
        )
