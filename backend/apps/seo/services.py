import logging
from .templating import ReviewContext, CustomerContext, render

logger = logging.getLogger(__name__)

COMMENT_EXCERPT_LENGTH = 150


def format_rating(rating):
    if not rating:
        return "Nicht bewertet"
    return f"{float(rating):.1f}"


class SEOContentService:
    """
    Renders the per-category SEO texts for a single review page.
    The settings row is always passed in by the caller.
    """

    @staticmethod
    def build_context(review, settings):
        return ReviewContext(
            category=review.product_category,
            city=review.city,
            postal_code=review.postal_code or "",
            region=settings.address_region or "",
            installation_date=review.installation_date,
            customer=CustomerContext(
                salutation=review.customer_salutation or "",
                lastname=review.customer_lastname or "",
            ),
            rating=review.average_rating or 0,
        )

    @staticmethod
    def fallback_title(review, settings):
        return (
            f"{review.customer_salutation} {review.customer_lastname} - "
            f"{review.product_category} in {review.city} | {settings.company_name}"
        )

    @staticmethod
    def fallback_description(review):
        comment = (review.customer_comment or "")[:COMMENT_EXCERPT_LENGTH]
        excerpt = comment or f"Kundenbewertung für {review.product_category}"
        return f"{format_rating(review.average_rating)}/5.0 - {excerpt}..."

    @staticmethod
    def review_page_content(review, settings):
        """
        Meta tags and the category text block for a review page.

        Per-review meta fields win over the category templates; categories
        without configured content fall back to generated defaults.
        """
        content = settings.category_content(review.product_category)
        context = SEOContentService.build_context(review, settings)

        if content:
            meta_title = render(content.get("meta_title_template", ""), context)
            meta_description = render(content.get("meta_description_template", ""), context)
            heading = render(content.get("heading", ""), context)
            description = render(content.get("description", ""), context)
            faq = [
                {
                    "question": render(item.get("question", ""), context),
                    "answer": render(item.get("answer", ""), context),
                }
                for item in content.get("faq") or []
                if isinstance(item, dict)
            ]
        else:
            meta_title = meta_description = heading = description = ""
            faq = []

        if not meta_title:
            meta_title = SEOContentService.fallback_title(review, settings)
        if not meta_description:
            meta_description = SEOContentService.fallback_description(review)

        if review.meta_title:
            meta_title = review.meta_title
        if review.meta_description:
            meta_description = review.meta_description

        return {
            "meta_title": meta_title,
            "meta_description": meta_description,
            "heading": heading,
            "description": description,
            "faq": faq,
            "canonical_url": SEOContentService.canonical_url(review, settings),
            "robots": "index, follow" if settings.enable_indexing else "noindex, nofollow",
        }

    @staticmethod
    def canonical_url(review, settings):
        base = (settings.canonical_base_url or "").rstrip("/")
        if not base:
            return None
        return f"{base}/bewertung/{review.slug}"

    @staticmethod
    def local_business_schema(review, settings, location=None, stats=None):
        """
        schema.org LocalBusiness JSON-LD for the review page.
        Location data wins over the company defaults from the settings row.
        """
        schema = {
            "@context": "https://schema.org",
            "@type": "LocalBusiness",
            "name": f"{settings.company_name} {location.city}" if location else settings.company_name,
            "description": (location.description if location else None) or settings.company_description,
            "address": {
                "@type": "PostalAddress",
                "streetAddress": location.street_address if location else settings.address_street,
                "addressLocality": location.city if location else settings.address_city,
                "postalCode": location.postal_code if location else settings.address_postal_code,
                "addressRegion": settings.address_region,
                "addressCountry": settings.address_country or "DE",
            },
            "telephone": (location.phone if location else None) or settings.company_phone,
            "email": (location.email if location else None) or settings.company_email,
            "url": settings.company_website,
            "review": {
                "@type": "Review",
                "author": {
                    "@type": "Person",
                    "name": f"{review.customer_salutation} {review.customer_lastname}",
                },
                "datePublished": review.installation_date.isoformat() if review.installation_date else None,
                "reviewRating": {
                    "@type": "Rating",
                    "ratingValue": format_rating(review.average_rating),
                    "bestRating": "5",
                    "worstRating": "1",
                },
                "reviewBody": review.customer_comment or "",
            },
        }

        if location and location.service_areas:
            schema["areaServed"] = [
                {"@type": "City", "name": area.strip()}
                for area in location.service_areas.split(",")
                if area.strip()
            ]
        if location and location.opening_hours:
            schema["openingHours"] = location.opening_hours

        if stats and stats.get("total_reviews"):
            schema["aggregateRating"] = {
                "@type": "AggregateRating",
                "ratingValue": f"{stats['average_rating']:.2f}",
                "reviewCount": stats["total_reviews"],
                "bestRating": "5",
                "worstRating": "1",
            }

        return schema
