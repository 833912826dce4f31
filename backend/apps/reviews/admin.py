from django.contrib import admin
from django.utils.html import format_html
from import_export import resources
from import_export.admin import ExportMixin

from .images import ReviewImageService
from .models import Review, RATING_FIELDS
from .services import ReviewService


class ReviewResource(resources.ModelResource):
    class Meta:
        model = Review
        fields = (
            'id',
            'slug',
            'status',
            'customer_salutation',
            'customer_lastname',
            'postal_code',
            'city',
            'installation_date',
            'product_category',
            *RATING_FIELDS,
            'average_rating',
            'latitude',
            'longitude',
            'geocoding_status',
            'created_at',
        )
        export_order = fields


@admin.register(Review)
class ReviewAdmin(ExportMixin, admin.ModelAdmin):
    """
    Writes go through ReviewService so the slug, image checks and the
    audit trail behave exactly as in the editor API.
    """
    resource_class = ReviewResource

    list_display = (
        'slug',
        'customer_lastname',
        'city',
        'product_category',
        'average_rating',
        'status_badge',
        'geocoding_status',
        'installation_date',
    )
    list_filter = ('status', 'product_category', 'geocoding_status')
    search_fields = ('slug', 'customer_lastname', 'city', 'postal_code')
    date_hierarchy = 'installation_date'
    list_per_page = 25
    actions = ['publish_reviews', 'unpublish_reviews']

    fieldsets = (
        ('Customer', {
            'fields': ('customer_salutation', 'customer_firstname', 'customer_lastname')
        }),
        ('Address', {
            'fields': ('street', 'house_number', 'postal_code', 'city')
        }),
        ('Installation', {
            'fields': ('installation_date', 'product_category', 'installed_by', 'status')
        }),
        ('Ratings', {
            'fields': RATING_FIELDS + ('average_rating',)
        }),
        ('Content', {
            'fields': ('customer_comment', 'internal_notes', 'before_image_key', 'after_image_key', 'image_preview')
        }),
        ('SEO', {
            'fields': ('slug', 'meta_title', 'meta_description'),
            'classes': ('collapse',)
        }),
        ('Geocoding', {
            'fields': ('latitude', 'longitude', 'geocoding_status', 'geocoded_at'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_by', 'updated_by', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    readonly_fields = (
        'slug', 'average_rating', 'image_preview',
        'latitude', 'longitude', 'geocoding_status', 'geocoded_at',
        'created_by', 'updated_by', 'created_at', 'updated_at',
    )

    def status_badge(self, obj):
        if obj.is_published:
            return format_html('<span style="color: green; font-weight: bold;">● Published</span>')
        return format_html('<span style="color: gray;">○ Draft</span>')
    status_badge.short_description = "Status"

    def image_preview(self, obj):
        urls = [ReviewImageService.public_url(k) for k in (obj.before_image_key, obj.after_image_key) if k]
        if not urls:
            return "No Images"
        return format_html(
            "".join('<img src="{}" style="max-height: 120px; margin-right: 8px;" />' for _ in urls),
            *urls
        )
    image_preview.short_description = "Images"

    def save_model(self, request, obj, form, change):
        if change:
            review = Review.objects.get(pk=obj.pk)
            data = {f: form.cleaned_data[f] for f in form.changed_data if f in form.cleaned_data}
            ReviewService.update_review(review, data, request.user)
        else:
            review = ReviewService.create_review(dict(form.cleaned_data), request.user)
        obj.pk = review.pk
        obj.slug = review.slug

    def delete_model(self, request, obj):
        ReviewService.delete_review(obj, request.user)

    def delete_queryset(self, request, queryset):
        for review in queryset:
            ReviewService.delete_review(review, request.user)

    @admin.action(description='Publish selected reviews')
    def publish_reviews(self, request, queryset):
        for review in queryset:
            ReviewService.publish(review, request.user)
        self.message_user(request, f"{queryset.count()} reviews published.")

    @admin.action(description='Unpublish selected reviews')
    def unpublish_reviews(self, request, queryset):
        reviews = list(queryset)
        for review in reviews:
            ReviewService.unpublish(review, request.user)
        self.message_user(request, f"{len(reviews)} reviews moved to draft.")

