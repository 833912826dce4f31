from rest_framework import serializers
from apps.reviews.models import PRODUCT_CATEGORIES
from .models import SEOSettings

CATEGORY_TEXT_FIELDS = (
    "meta_title_template",
    "meta_description_template",
    "heading",
    "description",
)


class FAQItemSerializer(serializers.Serializer):
    question = serializers.CharField()
    answer = serializers.CharField()


class CategorySEOContentSerializer(serializers.Serializer):
    meta_title_template = serializers.CharField(allow_blank=True, required=False, default="")
    meta_description_template = serializers.CharField(allow_blank=True, required=False, default="")
    heading = serializers.CharField(allow_blank=True, required=False, default="")
    description = serializers.CharField(allow_blank=True, required=False, default="")
    faq = FAQItemSerializer(many=True, required=False, default=list)


class SEOSettingsSerializer(serializers.ModelSerializer):
    service_areas = serializers.ListField(child=serializers.CharField(), required=False)
    regional_keywords = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = SEOSettings
        exclude = ("id",)
        read_only_fields = ("created_at", "updated_at")

    def validate_category_seo_content(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Expected an object keyed by product category.")

        unknown = sorted(set(value) - set(PRODUCT_CATEGORIES))
        if unknown:
            raise serializers.ValidationError(f"Unknown product categories: {', '.join(unknown)}")

        cleaned = {}
        for category, content in value.items():
            item = CategorySEOContentSerializer(data=content)
            if not item.is_valid():
                raise serializers.ValidationError({category: item.errors})
            cleaned[category] = item.validated_data
        return cleaned


class PublicSEOSettingsSerializer(serializers.ModelSerializer):
    """
    Read-only view for the public site (no timestamps).
    """
    class Meta:
        model = SEOSettings
        exclude = ("id", "created_at", "updated_at")
