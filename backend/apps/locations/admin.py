from django.contrib import admin
from django.utils.html import format_html
from django.utils.timezone import localtime
from import_export import resources
from import_export.admin import ImportExportModelAdmin

from .models import Location, FieldStaff


class LocationResource(resources.ModelResource):
    class Meta:
        model = Location
        fields = (
            'id',
            'name',
            'company_name',
            'street_address',
            'postal_code',
            'city',
            'phone',
            'email',
            'latitude',
            'longitude',
            'is_active',
            'is_default',
            'display_order',
        )
        export_order = fields


class FieldStaffResource(resources.ModelResource):
    class Meta:
        model = FieldStaff
        fields = (
            'id',
            'area_name',
            'area_number',
            'first_name',
            'last_name',
            'phone',
            'email',
            'assigned_postal_codes',
            'is_active',
            'display_order',
        )
        export_order = fields


@admin.register(Location)
class LocationAdmin(ImportExportModelAdmin):
    resource_class = LocationResource

    list_display = (
        'name',
        'city',
        'coordinates',
        'is_default_badge',
        'is_active_badge',
        'display_order',
    )
    list_filter = ('is_active', 'is_default', 'has_showroom')
    search_fields = ('name', 'city', 'postal_code', 'street_address')
    list_editable = ('display_order',)
    list_per_page = 25
    actions = ['activate_locations', 'deactivate_locations']

    fieldsets = (
        ('Location Information', {
            'fields': ('name', 'company_name', 'street_address', 'postal_code', 'city')
        }),
        ('Contact', {
            'fields': ('phone', 'fax', 'email', 'opening_hours')
        }),
        ('Content', {
            'fields': ('description', 'service_areas', 'has_showroom', 'showroom_info_url',
                       'google_maps_embed_url', 'google_business_url', 'logo_url'),
            'classes': ('collapse',)
        }),
        ('Geographic Coordinates', {
            'fields': ('latitude', 'longitude')
        }),
        ('Status', {
            'fields': ('is_active', 'is_default', 'display_order')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    readonly_fields = ('created_at', 'updated_at')

    def coordinates(self, obj):
        if obj.latitude is None or obj.longitude is None:
            return "-"
        return f"{obj.latitude}, {obj.longitude}"
    coordinates.short_description = "Coordinates"

    def is_default_badge(self, obj):
        if obj.is_default:
            return format_html('<span style="color: green; font-weight: bold;">✓ Default</span>')
        return format_html('<span style="color: gray;">-</span>')
    is_default_badge.short_description = "Default"

    def is_active_badge(self, obj):
        if obj.is_active:
            return format_html('<span style="color: green; font-weight: bold;">✓ Active</span>')
        return format_html('<span style="color: red; font-weight: bold;">✗ Inactive</span>')
    is_active_badge.short_description = "Status"

    @admin.action(description='Activate selected locations')
    def activate_locations(self, request, queryset):
        updated = queryset.update(is_active=True)
        self.message_user(request, f"{updated} locations activated.")

    @admin.action(description='Deactivate selected locations')
    def deactivate_locations(self, request, queryset):
        updated = queryset.update(is_active=False)
        self.message_user(request, f"{updated} locations deactivated.")


@admin.register(FieldStaff)
class FieldStaffAdmin(ImportExportModelAdmin):
    resource_class = FieldStaffResource

    list_display = (
        'full_name',
        'area_name',
        'area_number',
        'postal_codes_preview',
        'is_active_badge',
        'display_order',
        'updated_at_date',
    )
    list_filter = ('is_active', 'area_number')
    search_fields = ('first_name', 'last_name', 'area_name', 'email')
    list_editable = ('display_order',)
    list_per_page = 25

    readonly_fields = ('created_at', 'updated_at')

    def postal_codes_preview(self, obj):
        codes = obj.assigned_postal_codes or []
        preview = ", ".join(codes[:5])
        if len(codes) > 5:
            preview += f" +{len(codes) - 5}"
        return preview or "-"
    postal_codes_preview.short_description = "PLZ"

    def is_active_badge(self, obj):
        if obj.is_active:
            return format_html('<span style="color: green; font-weight: bold;">✓ Active</span>')
        return format_html('<span style="color: red; font-weight: bold;">✗ Inactive</span>')
    is_active_badge.short_description = "Status"

    def updated_at_date(self, obj):
        if obj.updated_at:
            return localtime(obj.updated_at).strftime('%d.%m.%Y %H:%M')
        return "N/A"
    updated_at_date.short_description = "Updated"
    updated_at_date.admin_order_field = 'updated_at'
