"""
Academy URL Configuration

URL Structure:
- token/: Authentication endpoints (JWT token management)
- users/: Current user and logout
- courses/, enrollments/: Catalog and enrollment workflow
- attendance/, grades/: Academic records
"""

from typing import List
from django.urls import path, include, URLPattern
from rest_framework_simplejwt.views import TokenVerifyView

from .users import views as user_views
from .courses import views as course_views
from .records import views as record_views

app_name = "academy"

# --- User Management URL Patterns ---

users_urlpatterns: List[URLPattern] = [
    path("me/", user_views.CurrentUserView.as_view(), name="current-user"),
    path("logout/", user_views.LogoutView.as_view(), name="logout"),
]

# --- Course and Enrollment URL Patterns ---

courses_urlpatterns: List[URLPattern] = [
    path("", course_views.CourseListCreateView.as_view(), name="course-list"),
    path("mine/", course_views.MyCoursesView.as_view(), name="my-courses"),
    path("<int:pk>/", course_views.CourseDetailView.as_view(), name="course-detail"),
    path("<int:pk>/enroll/", course_views.CourseEnrollView.as_view(), name="course-enroll"),
    path(
        "<int:pk>/enrollments/",
        course_views.CourseEnrollmentListView.as_view(),
        name="course-enrollments",
    ),
]

# --- Attendance and Grades URL Patterns ---

attendance_urlpatterns: List[URLPattern] = [
    path("", record_views.AttendanceListCreateView.as_view(), name="attendance-list"),
    path("summary/", record_views.AttendanceSummaryView.as_view(), name="attendance-summary"),
]

urlpatterns: List[URLPattern] = [
    # Authentication endpoints (JWT token management)
    path("token/", user_views.CustomTokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("token/refresh/", user_views.CustomTokenRefreshView.as_view(), name="token_refresh"),
    path("token/verify/", TokenVerifyView.as_view(), name="token_verify"),

    path("users/", include((users_urlpatterns, "users"))),
    path("courses/", include((courses_urlpatterns, "courses"))),
    path(
        "enrollments/<int:pk>/",
        course_views.EnrollmentDecisionView.as_view(),
        name="enrollment-decision",
    ),
    path("attendance/", include((attendance_urlpatterns, "attendance"))),
    path("grades/", record_views.GradeListCreateView.as_view(), name="grade-list"),
]
