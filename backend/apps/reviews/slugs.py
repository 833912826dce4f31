# apps/reviews/slugs.py
"""
Review URL slugs: "{category}-{lastname}-{city}-{year}", e.g.
"kaminofen-mueller-bamberg-2024". Collisions get the lowest free
numeric suffix starting at 2 ("...-2024-2", "...-2024-3").
"""
import re
from dataclasses import dataclass
from datetime import date, datetime

from .models import Review

TRANSLITERATION = str.maketrans({"ä": "ae", "ö": "oe", "ü": "ue", "ß": "ss"})
NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def normalize(text):
    text = (text or "").lower().translate(TRANSLITERATION)
    return NON_ALNUM_RE.sub("-", text).strip("-")


def installation_year(value):
    if isinstance(value, (date, datetime)):
        return value.year
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10]).year
        except ValueError:
            return None
    return None


def base_slug(category, lastname, city, installation_date):
    year = installation_year(installation_date)
    if year is None:
        raise ValueError(f"Invalid installation date: {installation_date!r}")
    return f"{normalize(category)}-{normalize(lastname)}-{normalize(city)}-{year}"


async def review_slug_exists(candidate, exclude_id=None):
    qs = Review.objects.filter(slug=candidate)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return await qs.aexists()


async def ensure_unique(candidate, exclude_id=None, exists=review_slug_exists):
    """
    Returns `candidate` if no other review uses it, otherwise the first free
    `candidate-N` for N = 2, 3, ... Probes run one after another; errors
    raised by `exists` propagate to the caller.
    """
    if not await exists(candidate, exclude_id):
        return candidate

    counter = 2
    while True:
        probe = f"{candidate}-{counter}"
        if not await exists(probe, exclude_id):
            return probe
        counter += 1


@dataclass(frozen=True)
class SlugSource:
    category: str
    lastname: str
    city: str
    installation_date: object

    @property
    def year(self):
        return installation_year(self.installation_date)

    @classmethod
    def from_review(cls, review):
        return cls(
            category=review.product_category,
            lastname=review.customer_lastname,
            city=review.city,
            installation_date=review.installation_date,
        )

    def slug(self):
        return base_slug(self.category, self.lastname, self.city, self.installation_date)


def should_regenerate(old, new):
    return (
        old.lastname != new.lastname
        or old.city != new.city
        or old.category != new.category
        or old.year != new.year
    )
