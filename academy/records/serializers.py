from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import AttendanceRecord, Grade
from .services import letter_grade, score_percentage

User = get_user_model()


class AttendanceRecordSerializer(serializers.ModelSerializer):
    present_student_ids = serializers.PrimaryKeyRelatedField(
        source="present_students", queryset=User.objects.all(), many=True, required=False
    )
    absent_student_ids = serializers.PrimaryKeyRelatedField(
        source="absent_students", queryset=User.objects.all(), many=True, required=False
    )

    class Meta:
        model = AttendanceRecord
        fields = ["id", "course", "date", "present_student_ids", "absent_student_ids"]
        # (course, date) is upserted by the view instead of rejected as duplicate
        validators = []

    def validate(self, attrs):
        present = {user.pk for user in attrs.get("present_students", [])}
        absent = {user.pk for user in attrs.get("absent_students", [])}
        overlap = present & absent
        if overlap:
            raise serializers.ValidationError(
                {"absent_student_ids": f"Students cannot be present and absent: {sorted(overlap)}"}
            )
        return attrs


class AttendanceSummarySerializer(serializers.Serializer):
    course = serializers.IntegerField()
    course_code = serializers.CharField()
    present = serializers.IntegerField()
    absent = serializers.IntegerField()
    percentage = serializers.FloatField(allow_null=True)


class GradeSerializer(serializers.ModelSerializer):
    percentage = serializers.SerializerMethodField()
    letter = serializers.SerializerMethodField()
    course_code = serializers.CharField(source="course.code", read_only=True)

    class Meta:
        model = Grade
        fields = [
            "id",
            "student",
            "course",
            "course_code",
            "assessment_name",
            "score",
            "max_score",
            "graded_at",
            "percentage",
            "letter",
        ]
        extra_kwargs = {"graded_at": {"required": False}}

    def get_percentage(self, obj):
        return score_percentage(obj.score, obj.max_score)

    def get_letter(self, obj):
        return letter_grade(obj.score, obj.max_score)
