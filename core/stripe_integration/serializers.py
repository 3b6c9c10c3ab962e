from rest_framework import serializers

from academy.courses.models import Course
from .models import PaymentRecord


class CheckoutItemSerializer(serializers.Serializer):
    """One purchase item of a checkout request."""

    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    amount = serializers.IntegerField(min_value=1)
    type = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
    course_id = serializers.PrimaryKeyRelatedField(
        source="course",
        queryset=Course.objects.all(),
        required=False,
        allow_null=True,
    )


class CheckoutRequestSerializer(serializers.Serializer):
    items = CheckoutItemSerializer(many=True, allow_empty=False)


class VerifyPaymentSerializer(serializers.Serializer):
    session_id = serializers.CharField(required=False, allow_blank=True, default="")
    course_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1), required=False, default=list
    )


class PaymentRecordSerializer(serializers.ModelSerializer):
    course_code = serializers.CharField(source="course.code", read_only=True, default=None)

    class Meta:
        model = PaymentRecord
        fields = [
            "id",
            "amount",
            "currency",
            "description",
            "transaction_id",
            "status",
            "payment_type",
            "course",
            "course_code",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
