from django.contrib import admin

from .models import PaymentRecord


@admin.register(PaymentRecord)
class PaymentRecordAdmin(admin.ModelAdmin):
    list_display = (
        "description",
        "user",
        "amount",
        "currency",
        "payment_type",
        "status",
        "transaction_id",
        "created_at",
    )
    list_filter = ("status", "payment_type", "currency")
    search_fields = ("description", "transaction_id", "user__username", "user__email")
    readonly_fields = ("id", "transaction_id", "created_at", "updated_at")
    raw_id_fields = ("user", "course")
    date_hierarchy = "created_at"

    def has_delete_permission(self, request, obj=None):
        # ledger rows are never deleted
        return False
