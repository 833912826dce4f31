# apps/seo/templating.py
"""
Placeholder rendering for the per-category SEO texts.

Editors write templates such as
``"{category} in {city} - {customer_salutation} {customer_lastname}"``.
Rendering is a single pass over the template: values are inserted verbatim
and never scanned again, so a customer called ``"{city}"`` stays ``"{city}"``.
Tokens outside the fixed vocabulary are left untouched.
"""
import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

MONTH_NAMES_DE = {
    1: "Januar", 2: "Februar", 3: "März", 4: "April",
    5: "Mai", 6: "Juni", 7: "Juli", 8: "August",
    9: "September", 10: "Oktober", 11: "November", 12: "Dezember",
}

PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")

INVALID_DATE = "NaN"


@dataclass(frozen=True)
class CustomerContext:
    salutation: str = ""
    lastname: str = ""


@dataclass(frozen=True)
class ReviewContext:
    category: str = ""
    city: str = ""
    postal_code: str = ""
    region: str = ""
    installation_date: object = None
    customer: CustomerContext = CustomerContext()
    rating: object = 0


def _parse_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            return None
    return None


def format_number(value):
    """
    Number-to-text as editors expect it: 5.0 -> "5", 4.5 -> "4.5".
    """
    if value is None:
        return "0"
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, Decimal):
        value = float(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def _text(value):
    return "" if value is None else str(value)


def placeholder_values(context):
    installed = _parse_date(context.installation_date)
    if installed is None:
        month = year = INVALID_DATE
    else:
        month = MONTH_NAMES_DE[installed.month]
        year = str(installed.year)

    return {
        "category": _text(context.category),
        "city": _text(context.city),
        "postal_code": _text(context.postal_code),
        "region": _text(context.region),
        "installation_month": month,
        "installation_year": year,
        "customer_salutation": _text(context.customer.salutation),
        "customer_lastname": _text(context.customer.lastname),
        "rating": format_number(context.rating),
    }


def render(template, context):
    if not template:
        return ""

    values = placeholder_values(context)

    def _substitute(match):
        return values.get(match.group(1), match.group(0))

    return PLACEHOLDER_RE.sub(_substitute, template)
