# apps/locations/validators.py
import re
from django.core.exceptions import ValidationError

POSTAL_CODE_TOKEN_RE = re.compile(r"^\d{2}(-\d{2})?$")


def parse_postal_code_token(token):
    """
    Returns (lower, upper) as ints for a valid token, None otherwise.
    "96" -> (96, 96), "06-09" -> (6, 9)
    """
    if not isinstance(token, str) or not POSTAL_CODE_TOKEN_RE.match(token):
        return None
    lower, _, upper = token.partition("-")
    lower = int(lower)
    upper = int(upper) if upper else lower
    if lower > upper:
        return None
    return lower, upper


def validate_postal_code_tokens(tokens):
    if not isinstance(tokens, (list, tuple)) or not tokens:
        raise ValidationError(
            "Mindestens ein PLZ-Bereich ist erforderlich.",
            code="postal_codes_required",
        )

    for token in tokens:
        if not isinstance(token, str) or not POSTAL_CODE_TOKEN_RE.match(token):
            raise ValidationError(
                "Ungültiges Format '%(token)s'. Verwenden Sie: 01, 96, 06-09",
                code="invalid_postal_code_token",
                params={"token": token},
            )
        if parse_postal_code_token(token) is None:
            raise ValidationError(
                "Ungültiger Bereich '%(token)s': Untergrenze ist größer als Obergrenze.",
                code="invalid_postal_code_range",
                params={"token": token},
            )
