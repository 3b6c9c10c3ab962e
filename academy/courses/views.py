"""
Academy Course Views

- Course catalog (list, detail, create)
- "My courses" for students and teachers
- Enrollment requests and teacher approval decisions
"""

from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from academy.permissions import IsCourseTeacherOrAdmin, IsTeacherOrAdmin, get_role, is_admin
from .models import ApprovalStatus, Course, CourseEnrollment, EnrollmentStatus
from .serializers import ApprovalDecisionSerializer, CourseEnrollmentSerializer, CourseSerializer
from .services import EnrollmentTransitionError, request_enrollment, set_approval_status


class CourseListCreateView(generics.ListCreateAPIView):
    """Lists the catalog; teachers and admins may add courses."""

    serializer_class = CourseSerializer
    permission_classes = [IsTeacherOrAdmin]

    def get_queryset(self):
        qs = Course.objects.select_related("teacher")
        teacher_id = self.request.query_params.get("teacher")
        if teacher_id:
            qs = qs.filter(teacher_id=teacher_id)
        return qs.order_by("code")

    def perform_create(self, serializer):
        # Teachers always create courses for themselves
        if is_admin(self.request.user) and serializer.validated_data.get("teacher"):
            serializer.save()
        else:
            serializer.save(teacher=self.request.user)


class CourseDetailView(generics.RetrieveAPIView):
    serializer_class = CourseSerializer
    queryset = Course.objects.select_related("teacher")
    permission_classes = [permissions.IsAuthenticated]


class MyCoursesView(generics.ListAPIView):
    """Courses a student is enrolled in or approved for, or courses a teacher teaches."""

    serializer_class = CourseSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        user = self.request.user
        if get_role(user) == "teacher":
            return Course.objects.filter(teacher=user).order_by("code")
        return (
            Course.objects.filter(enrollments__student=user)
            .filter(
                Q(enrollments__enrollment_status=EnrollmentStatus.ENROLLED)
                | Q(enrollments__approval_status=ApprovalStatus.APPROVED)
            )
            .distinct()
            .order_by("code")
        )


class CourseEnrollView(APIView):
    """Student asks to join a course; repeated requests reuse the same row."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, pk):
        course = get_object_or_404(Course, pk=pk)
        enrollment, created = request_enrollment(request.user, course)
        return Response(
            CourseEnrollmentSerializer(enrollment).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class CourseEnrollmentListView(generics.ListAPIView):
    serializer_class = CourseEnrollmentSerializer
    permission_classes = [IsCourseTeacherOrAdmin]

    def get_queryset(self):
        course = get_object_or_404(Course, pk=self.kwargs["pk"])
        self.check_object_permissions(self.request, course)
        qs = CourseEnrollment.objects.filter(course=course).select_related("student", "course")
        approval = self.request.query_params.get("approval_status")
        if approval:
            qs = qs.filter(approval_status=approval)
        return qs


class EnrollmentDecisionView(APIView):
    """Teacher of the course (or an admin) approves or rejects a request."""

    permission_classes = [IsCourseTeacherOrAdmin]

    def patch(self, request, pk):
        enrollment = get_object_or_404(
            CourseEnrollment.objects.select_related("course", "student"), pk=pk
        )
        self.check_object_permissions(request, enrollment)

        serializer = ApprovalDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            set_approval_status(enrollment, serializer.validated_data["approval_status"])
        except EnrollmentTransitionError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CourseEnrollmentSerializer(enrollment).data, status=status.HTTP_200_OK)
