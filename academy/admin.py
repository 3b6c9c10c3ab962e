"""
Academy Django Admin Configuration

- User Management: User admin with inline profile (role, fee status)
- Courses: Catalog with inline enrollments
- Records: Attendance and grades
"""

from typing import Optional
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import User
from django.db.models import QuerySet
from django.http import HttpRequest
from django.utils.translation import gettext_lazy as _

from .models import AttendanceRecord, Course, CourseEnrollment, Grade, Profile

# --- User Management Administration ---


class ProfileInline(admin.StackedInline):
    model = Profile
    can_delete = False
    verbose_name_plural = "Profile Information"
    fk_name = "user"
    fields = ("role", "fees_paid", "phone", "stripe_customer_id")
    readonly_fields = ("stripe_customer_id",)

    def get_extra(self, request: HttpRequest, obj: Optional[User] = None, **kwargs) -> int:
        """Profiles are created automatically, never as extra forms."""
        return 0


class UserAdmin(BaseUserAdmin):
    inlines = (ProfileInline,)
    list_display = (
        "username",
        "email",
        "first_name",
        "last_name",
        "get_role",
        "get_fees_paid",
        "is_active",
    )
    list_select_related = ("profile",)
    list_filter = ("is_staff", "is_active", "profile__role", "profile__fees_paid")
    search_fields = ("username", "first_name", "last_name", "email")
    ordering = ("username",)

    @admin.display(description=_("Role"))
    def get_role(self, instance: User) -> Optional[str]:
        try:
            return instance.profile.get_role_display()
        except Profile.DoesNotExist:
            return None

    @admin.display(boolean=True, description=_("Fees Paid"))
    def get_fees_paid(self, instance: User) -> Optional[bool]:
        try:
            return instance.profile.fees_paid
        except Profile.DoesNotExist:
            return None

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        return super().get_queryset(request).select_related("profile")


admin.site.unregister(User)
admin.site.register(User, UserAdmin)


# --- Course Administration ---


class CourseEnrollmentInline(admin.TabularInline):
    model = CourseEnrollment
    extra = 0
    fields = ("student", "approval_status", "enrollment_status", "created_at")
    readonly_fields = ("created_at",)
    autocomplete_fields = ("student",)


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "teacher", "room", "price")
    search_fields = ("code", "name")
    list_filter = ("teacher",)
    inlines = (CourseEnrollmentInline,)


@admin.register(CourseEnrollment)
class CourseEnrollmentAdmin(admin.ModelAdmin):
    list_display = ("student", "course", "approval_status", "enrollment_status", "created_at")
    list_filter = ("approval_status", "enrollment_status", "course")
    search_fields = ("student__username", "student__email", "course__code")
    list_select_related = ("student", "course")


# --- Records Administration ---


@admin.register(AttendanceRecord)
class AttendanceRecordAdmin(admin.ModelAdmin):
    list_display = ("course", "date")
    list_filter = ("course",)
    date_hierarchy = "date"
    filter_horizontal = ("present_students", "absent_students")


@admin.register(Grade)
class GradeAdmin(admin.ModelAdmin):
    list_display = ("student", "course", "assessment_name", "score", "max_score", "graded_at")
    list_filter = ("course",)
    search_fields = ("student__username", "assessment_name")
