from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="SEOSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("company_name", models.CharField(default="Der Kamindoktor", max_length=200)),
                ("company_legal_name", models.CharField(blank=True, max_length=200)),
                ("company_description", models.TextField(blank=True)),
                ("company_email", models.EmailField(blank=True, max_length=254)),
                ("company_phone", models.CharField(blank=True, max_length=50)),
                ("company_website", models.URLField(blank=True)),
                ("company_logo_url", models.URLField(blank=True)),
                ("address_street", models.CharField(blank=True, max_length=200)),
                ("address_city", models.CharField(blank=True, max_length=100)),
                ("address_postal_code", models.CharField(blank=True, max_length=10)),
                ("address_region", models.CharField(blank=True, max_length=100)),
                ("address_country", models.CharField(default="DE", max_length=2)),
                ("social_facebook", models.URLField(blank=True)),
                ("social_instagram", models.URLField(blank=True)),
                ("social_pinterest", models.URLField(blank=True)),
                ("social_youtube", models.URLField(blank=True)),
                ("social_xing", models.URLField(blank=True)),
                ("service_areas", models.JSONField(blank=True, default=list)),
                ("regional_keywords", models.JSONField(blank=True, default=list)),
                ("default_meta_description", models.TextField(blank=True)),
                ("default_og_image_url", models.URLField(blank=True)),
                ("canonical_base_url", models.URLField(blank=True)),
                ("google_analytics_id", models.CharField(blank=True, max_length=50)),
                ("google_tag_manager_id", models.CharField(blank=True, max_length=50)),
                ("enable_indexing", models.BooleanField(default=True)),
                ("category_seo_content", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "SEO Setting",
                "verbose_name_plural": "SEO Settings",
            },
        ),
    ]
