# apps/locations/serializers.py
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers
from .models import Location, FieldStaff
from .validators import validate_postal_code_tokens


class PostalCodeTokensField(serializers.ListField):
    """
    Accepts a list of tokens or the comma separated form the editors type ("01, 96, 06-09").
    """
    child = serializers.CharField()

    def to_internal_value(self, data):
        if isinstance(data, str):
            data = [token.strip() for token in data.split(",") if token.strip()]
        return super().to_internal_value(data)


class LocationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Location
        fields = (
            "id",
            "name",
            "company_name",
            "street_address",
            "postal_code",
            "city",
            "phone",
            "fax",
            "email",
            "description",
            "service_areas",
            "opening_hours",
            "google_maps_embed_url",
            "google_business_url",
            "logo_url",
            "has_showroom",
            "showroom_info_url",
            "latitude",
            "longitude",
            "is_active",
            "is_default",
            "display_order",
        )


class ContactLocationSerializer(LocationSerializer):
    distance_km = serializers.SerializerMethodField()

    class Meta(LocationSerializer.Meta):
        fields = LocationSerializer.Meta.fields + ("distance_km",)

    def get_distance_km(self, obj):
        distance = getattr(obj, "distance", None)
        return round(distance, 1) if distance is not None else None


class FieldStaffSerializer(serializers.ModelSerializer):
    assigned_postal_codes = PostalCodeTokensField(allow_empty=True)

    class Meta:
        model = FieldStaff
        fields = (
            "id",
            "area_name",
            "area_number",
            "first_name",
            "last_name",
            "full_name",
            "phone",
            "email",
            "image_url",
            "assigned_postal_codes",
            "contact_form_url",
            "is_active",
            "display_order",
        )
        read_only_fields = ("full_name",)

    def validate_assigned_postal_codes(self, value):
        try:
            validate_postal_code_tokens(value)
        except DjangoValidationError as e:
            raise serializers.ValidationError(e.messages)
        return value
