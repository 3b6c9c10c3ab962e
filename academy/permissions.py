from rest_framework.permissions import BasePermission, SAFE_METHODS

# ------------------------------------------------------------
# Helpers: role checks based on the academy Profile.
# Staff users count as admins regardless of their profile role.
# ------------------------------------------------------------


def get_role(user) -> str:
    """Returns the profile role of the user, or an empty string if unknown."""

    from academy.users.models import Profile  # local import to avoid circular

    if not user or not user.is_authenticated:
        return ""
    try:
        return user.profile.role
    except Profile.DoesNotExist:
        return ""


def is_admin(user) -> bool:
    if not user or not user.is_authenticated:
        return False
    return user.is_staff or get_role(user) == "admin"


def is_teacher_or_admin(user) -> bool:
    return is_admin(user) or get_role(user) == "teacher"


class IsTeacherOrAdmin(BasePermission):
    """Write access only for teachers and admins, reads for authenticated users."""

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return is_teacher_or_admin(request.user)


class IsCourseTeacherOrAdmin(BasePermission):
    """Object access for the teacher of the course the object belongs to, or admins."""

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated) and is_teacher_or_admin(
            request.user
        )

    def has_object_permission(self, request, view, obj):
        if is_admin(request.user):
            return True
        course = getattr(obj, "course", obj)
        return course.teacher_id == request.user.id
