from rest_framework import serializers

from .models import ApprovalStatus, Course, CourseEnrollment


class CourseSerializer(serializers.ModelSerializer):
    teacher_name = serializers.SerializerMethodField()

    class Meta:
        model = Course
        fields = ["id", "code", "name", "description", "room", "teacher", "teacher_name", "price"]
        extra_kwargs = {"teacher": {"required": False}}

    def get_teacher_name(self, obj):
        if obj.teacher is None:
            return None
        return obj.teacher.get_full_name() or obj.teacher.username


class CourseEnrollmentSerializer(serializers.ModelSerializer):
    student_name = serializers.SerializerMethodField()
    student_email = serializers.EmailField(source="student.email", read_only=True)
    course_code = serializers.CharField(source="course.code", read_only=True)

    class Meta:
        model = CourseEnrollment
        fields = [
            "id",
            "student",
            "student_name",
            "student_email",
            "course",
            "course_code",
            "approval_status",
            "enrollment_status",
            "created_at",
        ]
        read_only_fields = fields

    def get_student_name(self, obj):
        return obj.student.get_full_name() or obj.student.username


class ApprovalDecisionSerializer(serializers.Serializer):
    approval_status = serializers.ChoiceField(
        choices=[ApprovalStatus.APPROVED, ApprovalStatus.REJECTED]
    )
