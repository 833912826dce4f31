from rest_framework import serializers
from .models import AuditLog

class AuditLogSerializer(serializers.ModelSerializer):
    user_email = serializers.SerializerMethodField()

    class Meta:
        model = AuditLog
        fields = (
            "id",
            "action",
            "reference_id",
            "user",
            "user_email",
            "metadata",
            "created_at",
        )
        read_only_fields = fields

    def get_user_email(self, obj):
        return obj.user.email if obj.user else None
