from django import forms
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.utils.html import format_html
from django.utils.timezone import localtime
from import_export import resources, fields, widgets
from import_export.admin import ImportExportModelAdmin, ImportExportMixin
from .models import User, UserRole


class CustomUserCreationForm(forms.ModelForm):
    password = forms.CharField(widget=forms.PasswordInput, min_length=8)

    class Meta:
        model = User
        fields = ('email', 'first_name', 'last_name')

    def save(self, commit=True):
        user = super().save(commit=False)
        user.set_password(self.cleaned_data["password"])
        if commit:
            user.save()
        return user


class UserRoleInline(admin.TabularInline):
    model = UserRole
    extra = 1
    can_delete = True
    fields = ('role',)
    show_change_link = False


class UserResource(resources.ModelResource):
    class Meta:
        model = User
        import_id_fields = ('email',)
        fields = ('id', 'email', 'first_name', 'last_name', 'is_active', 'is_staff', 'is_superuser', 'created_at')


class UserRoleResource(resources.ModelResource):
    user = fields.Field(
        column_name='user',
        attribute='user',
        widget=widgets.ForeignKeyWidget(User, 'email')
    )

    class Meta:
        model = UserRole
        fields = ('id', 'user', 'role')


@admin.register(User)
class CustomUserAdmin(ImportExportMixin, UserAdmin):
    resource_class = UserResource
    add_form = CustomUserCreationForm

    list_display = (
        'email',
        'full_name',
        'user_roles_display',
        'is_active_badge',
        'created_at_date'
    )
    list_filter = ('is_active', 'is_staff', 'is_superuser', 'created_at')
    search_fields = ('email', 'first_name', 'last_name')
    ordering = ('-created_at',)
    list_per_page = 25
    actions = ['activate_users', 'deactivate_users']
    inlines = [UserRoleInline]

    fieldsets = (
        ('Authentication Info', {
            'fields': ('email', 'password')
        }),
        ('Personal Info', {
            'fields': ('first_name', 'last_name')
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')
        }),
        ('Important Dates', {
            'fields': ('last_login', 'created_at'),
            'classes': ('collapse',)
        }),
    )

    add_fieldsets = (
        ('Authentication Info', {
            'classes': ('wide',),
            'fields': ('email', 'password')
        }),
        ('Personal Info', {
            'classes': ('wide',),
            'fields': ('first_name', 'last_name')
        }),
    )

    readonly_fields = ('created_at', 'last_login')

    def full_name(self, obj):
        name = f"{obj.first_name} {obj.last_name}".strip()
        return name or "N/A"
    full_name.short_description = "Name"
    full_name.admin_order_field = 'first_name'

    def user_roles_display(self, obj):
        roles = obj.roles.all()
        if not roles:
            return format_html('<span style="color: orange;">No roles</span>')

        role_text = ", ".join(role.get_role_display() for role in roles)
        if UserRole.ADMIN in [r.role for r in roles]:
            return format_html('<span style="color: blue; font-weight: bold;">{}</span>', role_text)
        return format_html('<span style="color: gray;">{}</span>', role_text)
    user_roles_display.short_description = "Roles"

    def is_active_badge(self, obj):
        if obj.is_active:
            return format_html('<span style="color: green; font-weight: bold;">✓ Active</span>')
        return format_html('<span style="color: red; font-weight: bold;">✗ Inactive</span>')
    is_active_badge.short_description = "Status"

    def created_at_date(self, obj):
        if obj.created_at:
            return localtime(obj.created_at).strftime('%d.%m.%Y %H:%M')
        return "N/A"
    created_at_date.short_description = "Joined"
    created_at_date.admin_order_field = 'created_at'

    @admin.action(description='Activate selected users')
    def activate_users(self, request, queryset):
        updated = queryset.update(is_active=True)
        self.message_user(request, f"{updated} users activated.")

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        updated = queryset.update(is_active=False)
        self.message_user(request, f"{updated} users deactivated.")


@admin.register(UserRole)
class UserRoleAdmin(ImportExportModelAdmin):
    resource_class = UserRoleResource
    list_display = ('user_email', 'role_badge')
    list_filter = ('role',)
    search_fields = ('user__email', 'user__first_name', 'user__last_name')
    list_select_related = ('user',)
    raw_id_fields = ('user',)
    list_per_page = 25

    def user_email(self, obj):
        return obj.user.email
    user_email.short_description = "E-Mail"
    user_email.admin_order_field = 'user__email'

    def role_badge(self, obj):
        colors = {
            UserRole.ADMIN: '#007bff',
            UserRole.USER: '#6c757d',
        }
        color = colors.get(obj.role, '#6c757d')
        return format_html(
            '<span style="background-color: {}; color: white; padding: 2px 6px; border-radius: 3px; font-size: 0.8em;">{}</span>',
            color,
            obj.get_role_display()
        )
    role_badge.short_description = "Role"
