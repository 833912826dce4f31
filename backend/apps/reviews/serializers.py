# apps/reviews/serializers.py
from rest_framework import serializers
from apps.locations.services import is_valid_coordinate
from .images import ReviewImageService, IMAGE_KINDS, ALLOWED_TYPES
from .models import Review, RATING_FIELDS
from .services import ReviewService


class ReviewImagesMixin(serializers.Serializer):
    before_image_url = serializers.SerializerMethodField()
    after_image_url = serializers.SerializerMethodField()

    def get_before_image_url(self, obj):
        return ReviewImageService.public_url(obj.before_image_key)

    def get_after_image_url(self, obj):
        return ReviewImageService.public_url(obj.after_image_key)


class PublicReviewListSerializer(ReviewImagesMixin, serializers.ModelSerializer):
    coordinates = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = (
            "id",
            "slug",
            "customer_salutation",
            "customer_lastname",
            "postal_code",
            "city",
            "product_category",
            "installation_date",
            "average_rating",
            "customer_comment",
            "before_image_url",
            "after_image_url",
            "coordinates",
        )

    def get_coordinates(self, obj):
        # Out-of-bounds coordinates are not shown on the map
        if not is_valid_coordinate(obj.latitude, obj.longitude):
            return None
        return {"lat": float(obj.latitude), "lng": float(obj.longitude)}


class PublicReviewDetailSerializer(PublicReviewListSerializer):
    class Meta(PublicReviewListSerializer.Meta):
        fields = PublicReviewListSerializer.Meta.fields + RATING_FIELDS + ("installed_by",)


class SimilarReviewSerializer(serializers.ModelSerializer):
    class Meta:
        model = Review
        fields = (
            "id",
            "slug",
            "customer_salutation",
            "customer_lastname",
            "city",
            "product_category",
            "average_rating",
            "installation_date",
        )


class AdminReviewSerializer(ReviewImagesMixin, serializers.ModelSerializer):
    """
    Editor form. Writes go through ReviewService so slug handling and
    auditing stay in one place.
    """
    created_by_email = serializers.SerializerMethodField()
    updated_by_email = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = (
            "id",
            "slug",
            "status",
            "customer_salutation",
            "customer_firstname",
            "customer_lastname",
            "street",
            "house_number",
            "postal_code",
            "city",
            "installation_date",
            "product_category",
            "installed_by",
            *RATING_FIELDS,
            "average_rating",
            "customer_comment",
            "internal_notes",
            "before_image_key",
            "after_image_key",
            "before_image_url",
            "after_image_url",
            "latitude",
            "longitude",
            "geocoding_status",
            "geocoded_at",
            "meta_title",
            "meta_description",
            "created_by_email",
            "updated_by_email",
            "created_at",
            "updated_at",
        )
        read_only_fields = (
            "slug",
            "average_rating",
            "latitude",
            "longitude",
            "geocoding_status",
            "geocoded_at",
            "created_at",
            "updated_at",
        )

    def get_created_by_email(self, obj):
        return obj.created_by.email if obj.created_by else None

    def get_updated_by_email(self, obj):
        return obj.updated_by.email if obj.updated_by else None

    def validate_customer_lastname(self, value):
        if not value.strip():
            raise serializers.ValidationError("Nachname ist erforderlich.")
        return value.strip()

    def validate_city(self, value):
        if not value.strip():
            raise serializers.ValidationError("Ort ist erforderlich.")
        return value.strip()

    def validate_postal_code(self, value):
        value = value.strip()
        if value and (len(value) != 5 or not value.isdigit()):
            raise serializers.ValidationError("Postleitzahl muss aus 5 Ziffern bestehen.")
        return value

    def _validate_key(self, value):
        if value and not ReviewImageService.is_review_key(value):
            raise serializers.ValidationError("Invalid image key.")
        return value

    def validate_before_image_key(self, value):
        return self._validate_key(value)

    def validate_after_image_key(self, value):
        return self._validate_key(value)

    def _user(self):
        request = self.context.get("request")
        return request.user if request else None

    def create(self, validated_data):
        return ReviewService.create_review(validated_data, self._user())

    def update(self, instance, validated_data):
        review, self.slug_changed = ReviewService.update_review(instance, validated_data, self._user())
        return review


class ImagePresignSerializer(serializers.Serializer):
    kind = serializers.ChoiceField(choices=IMAGE_KINDS)
    content_type = serializers.ChoiceField(choices=sorted(ALLOWED_TYPES))
