from django.contrib import admin
from import_export.admin import ImportExportModelAdmin
from .models import SEOSettings


@admin.register(SEOSettings)
class SEOSettingsAdmin(ImportExportModelAdmin):
    list_display = ['company_name', 'canonical_base_url', 'enable_indexing', 'updated_at']

    fieldsets = (
        ('Company', {
            'fields': ('company_name', 'company_legal_name', 'company_description', 'company_email',
                       'company_phone', 'company_website', 'company_logo_url')
        }),
        ('Address', {
            'fields': ('address_street', 'address_postal_code', 'address_city', 'address_region', 'address_country')
        }),
        ('Social', {
            'fields': ('social_facebook', 'social_instagram', 'social_pinterest', 'social_youtube', 'social_xing'),
            'classes': ('collapse',)
        }),
        ('SEO', {
            'fields': ('enable_indexing', 'canonical_base_url', 'default_meta_description', 'default_og_image_url',
                       'service_areas', 'regional_keywords', 'google_analytics_id', 'google_tag_manager_id')
        }),
        ('Category Content', {
            'fields': ('category_seo_content',),
        }),
    )

    def has_add_permission(self, request):
        if self.model.objects.exists():
            return False
        return super().has_add_permission(request)

    def has_delete_permission(self, request, obj=None):
        return False
