from django.db import models
from django.core.exceptions import ValidationError


class SEOSettings(models.Model):
    """
    Site-wide SEO and company data. Exactly one row (pk=1) exists.
    """
    company_name = models.CharField(max_length=200, default="Der Kamindoktor")
    company_legal_name = models.CharField(max_length=200, blank=True)
    company_description = models.TextField(blank=True)
    company_email = models.EmailField(blank=True)
    company_phone = models.CharField(max_length=50, blank=True)
    company_website = models.URLField(blank=True)
    company_logo_url = models.URLField(blank=True)

    address_street = models.CharField(max_length=200, blank=True)
    address_city = models.CharField(max_length=100, blank=True)
    address_postal_code = models.CharField(max_length=10, blank=True)
    address_region = models.CharField(max_length=100, blank=True)
    address_country = models.CharField(max_length=2, default="DE")

    social_facebook = models.URLField(blank=True)
    social_instagram = models.URLField(blank=True)
    social_pinterest = models.URLField(blank=True)
    social_youtube = models.URLField(blank=True)
    social_xing = models.URLField(blank=True)

    service_areas = models.JSONField(default=list, blank=True)
    regional_keywords = models.JSONField(default=list, blank=True)

    default_meta_description = models.TextField(blank=True)
    default_og_image_url = models.URLField(blank=True)
    canonical_base_url = models.URLField(blank=True)
    google_analytics_id = models.CharField(max_length=50, blank=True)
    google_tag_manager_id = models.CharField(max_length=50, blank=True)
    enable_indexing = models.BooleanField(default=True)

    # {"Kaminofen": {"meta_title_template": ..., "meta_description_template": ...,
    #                "heading": ..., "description": ..., "faq": [{"question", "answer"}]}}
    category_seo_content = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "SEO Setting"
        verbose_name_plural = "SEO Settings"

    def clean(self):
        if SEOSettings.objects.exists() and not self.pk:
            raise ValidationError("Only one SEOSettings instance is allowed.")

    def save(self, *args, **kwargs):
        self.pk = 1
        super().save(*args, **kwargs)

    @classmethod
    def load(cls):
        obj, created = cls.objects.get_or_create(pk=1)
        return obj

    def category_content(self, category):
        content = (self.category_seo_content or {}).get(category)
        return content if isinstance(content, dict) else None

    def __str__(self):
        return f"SEO Settings ({self.company_name})"
