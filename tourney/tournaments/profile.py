"""Validation and normalization of the detailed participant profile.

The registration form submits a flat camelCase payload. The ledger treats the
profile as opaque once validated; it is stored grouped by section.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date

from tourney.tournaments.errors import ValidationError

REQUIRED_PROFILE_FIELDS = (
    "fullName",
    "email",
    "phone",
    "dateOfBirth",
    "gender",
    "address",
    "city",
    "state",
    "zipCode",
    "emergencyContactName",
    "emergencyContactPhone",
    "emergencyContactRelation",
    "agreeTerms",
)

GENDERS = frozenset({"male", "female", "other", "prefer-not-to-say"})
EMERGENCY_RELATIONS = frozenset({"parent", "spouse", "sibling", "friend", "guardian", "other"})
EXPERIENCE_LEVELS = frozenset({"beginner", "intermediate", "advanced", "professional"})
TSHIRT_SIZES = frozenset({"XS", "S", "M", "L", "XL", "XXL"})
REFERRAL_SOURCES = frozenset(
    {
        "social-media",
        "friends",
        "website",
        "advertisement",
        "sports-club",
        "search-engine",
        "other",
    }
)
DEFAULT_COUNTRY = "India"


def _is_missing(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _text(payload: Mapping[str, object], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    stripped = str(value).strip()
    return stripped or None


def _check_choice(
    payload: Mapping[str, object],
    key: str,
    allowed: frozenset[str],
    errors: list[str],
) -> None:
    value = _text(payload, key)
    if value is not None and value not in allowed:
        errors.append(f"{key}: unsupported value")


def validate_profile(payload: Mapping[str, object]) -> dict[str, object]:
    """Validate the flat form payload and return the grouped profile document."""
    missing = [field for field in REQUIRED_PROFILE_FIELDS if _is_missing(payload.get(field))]
    if missing:
        raise ValidationError(
            "missing required profile fields",
            details=[f"{field}: required" for field in missing],
        )
    if payload.get("agreeTerms") is not True:
        raise ValidationError("terms must be accepted", details=["agreeTerms: must be true"])

    errors: list[str] = []
    email = str(payload["email"]).strip().lower()
    if "@" not in email:
        errors.append("email: invalid")
    try:
        date_of_birth = date.fromisoformat(str(payload["dateOfBirth"]).strip()[:10])
    except ValueError:
        errors.append("dateOfBirth: invalid date")
        date_of_birth = None
    _check_choice(payload, "gender", GENDERS, errors)
    _check_choice(payload, "emergencyContactRelation", EMERGENCY_RELATIONS, errors)
    _check_choice(payload, "experience", EXPERIENCE_LEVELS, errors)
    _check_choice(payload, "tshirtSize", TSHIRT_SIZES, errors)
    _check_choice(payload, "howDidYouHear", REFERRAL_SOURCES, errors)
    if errors:
        raise ValidationError("invalid profile fields", details=errors)

    return {
        "personal": {
            "full_name": _text(payload, "fullName"),
            "email": email,
            "phone": _text(payload, "phone"),
            "date_of_birth": date_of_birth.isoformat() if date_of_birth else None,
            "gender": _text(payload, "gender"),
        },
        "address": {
            "address": _text(payload, "address"),
            "city": _text(payload, "city"),
            "state": _text(payload, "state"),
            "zip_code": _text(payload, "zipCode"),
            "country": _text(payload, "country") or DEFAULT_COUNTRY,
        },
        "emergency_contact": {
            "name": _text(payload, "emergencyContactName"),
            "phone": _text(payload, "emergencyContactPhone"),
            "relation": _text(payload, "emergencyContactRelation"),
        },
        "sports": {
            "experience": _text(payload, "experience") or "beginner",
            "previous_tournaments": _text(payload, "previousTournaments"),
            "medical_conditions": _text(payload, "medicalConditions"),
            "special_requirements": _text(payload, "specialRequirements"),
            "dietary_restrictions": _text(payload, "dietaryRestrictions"),
        },
        "additional": {
            "how_did_you_hear": _text(payload, "howDidYouHear"),
            "comments": _text(payload, "additionalComments"),
            "tshirt_size": _text(payload, "tshirtSize") or "M",
        },
        "agreements": {
            "terms_and_conditions": True,
            "marketing_consent": payload.get("marketingConsent") is True,
            "photo_consent": payload.get("photoConsent") is True,
        },
    }
