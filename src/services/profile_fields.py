"""Editable profile fields: validation rules and value normalization."""

from dataclasses import dataclass
from typing import Any

from src.schemas.profile import (
    EmailPreferencesSchema,
    PrivacySettingsSchema,
    ProfileSport,
    SkillLevel,
)


@dataclass(frozen=True)
class FieldRule:
    """Declared constraints for one editable profile field."""

    required: bool = False
    min_length: int | None = None
    max_length: int | None = None
    allowed_values: frozenset[str] | None = None
    is_object: bool = False


@dataclass(frozen=True)
class FieldValidationError:
    """A validation failure scoped to one field."""

    field: str
    message: str

    def to_detail(self) -> dict[str, Any]:
        """Render as an ErrorResponse detail entry."""
        return {"loc": [self.field], "msg": self.message, "type": "field_validation"}


FIELD_RULES: dict[str, FieldRule] = {
    # Required: never null or blank
    "name": FieldRule(required=True, min_length=1, max_length=100),
    "skill_level": FieldRule(required=True, allowed_values=frozenset(s.value for s in SkillLevel)),
    # Optional: blank is stored as null
    "sport": FieldRule(allowed_values=frozenset(s.value for s in ProfileSport)),
    "location": FieldRule(max_length=100),
    "bio": FieldRule(max_length=150),
    "instagram_handle": FieldRule(max_length=50),
    "profile_photo_url": FieldRule(),
    # Settings objects always carry defaults
    "privacy_settings": FieldRule(required=True, is_object=True),
    "email_preferences": FieldRule(required=True, is_object=True),
}

# Saved on loss of focus, debounced
TEXT_FIELDS = frozenset({"name", "location", "bio", "instagram_handle"})

# Saved as soon as they change
SELECTION_FIELDS = frozenset(
    {"sport", "skill_level", "profile_photo_url", "privacy_settings", "email_preferences"}
)

SETTINGS_DEFAULTS: dict[str, type[PrivacySettingsSchema] | type[EmailPreferencesSchema]] = {
    "privacy_settings": PrivacySettingsSchema,
    "email_preferences": EmailPreferencesSchema,
}


def is_editable(field: str) -> bool:
    return field in FIELD_RULES


def validate_field(field: str, value: Any) -> FieldValidationError | None:
    """Check a normalized value against the field's declared rule.

    Args:
        field: Profile column name.
        value: Value as it would be written.

    Returns:
        FieldValidationError | None: The first failing constraint, if any.
    """
    rule = FIELD_RULES.get(field)
    if rule is None:
        return FieldValidationError(field, f"{field} is not an editable field")

    if rule.required and (value is None or value == ""):
        return FieldValidationError(field, f"{field} is required")

    if value is None:
        return None

    if rule.is_object:
        if not isinstance(value, dict):
            return FieldValidationError(field, f"{field} must be an object")
        return None

    if not isinstance(value, str):
        return FieldValidationError(field, f"{field} must be text")

    if rule.min_length is not None and len(value) < rule.min_length:
        return FieldValidationError(field, f"{field} must be at least {rule.min_length} characters")
    if rule.max_length is not None and len(value) > rule.max_length:
        return FieldValidationError(field, f"{field} must be less than {rule.max_length} characters")

    if rule.allowed_values is not None and value and value not in rule.allowed_values:
        return FieldValidationError(field, f"Invalid value for {field}")

    return None


def prepare_field_value(field: str, value: Any) -> Any:
    """Normalize a raw editor value into what gets stored.

    Optional strings are trimmed and blank becomes None; required strings
    are trimmed but stay strings. Settings objects are merged over their
    defaults so no key is ever missing.
    """
    rule = FIELD_RULES.get(field)
    if rule is None:
        return value

    if isinstance(value, str):
        trimmed = value.strip()
        if not rule.required and trimmed == "":
            return None
        return trimmed

    if rule.is_object and isinstance(value, dict):
        schema = SETTINGS_DEFAULTS[field]
        defaults = schema().model_dump()
        known = {k: v for k, v in value.items() if k in defaults}
        return {**defaults, **known}

    return value


def default_form_data(profile: dict[str, Any]) -> dict[str, Any]:
    """Build editor state from a profile row, filling every gap.

    Text fields become "" rather than None so the form always holds a
    string, skill level falls back to beginner and settings get defaults.
    """
    privacy = profile.get("privacy_settings") or {}
    email_prefs = profile.get("email_preferences") or {}
    return {
        "name": profile.get("name") or "",
        "email": profile.get("email") or "",
        "sport": profile.get("sport") or "",
        "skill_level": profile.get("skill_level") or SkillLevel.BEGINNER.value,
        "location": profile.get("location") or "",
        "bio": profile.get("bio") or "",
        "instagram_handle": profile.get("instagram_handle") or "",
        "profile_photo_url": profile.get("profile_photo_url") or "",
        "privacy_settings": prepare_field_value("privacy_settings", dict(privacy)),
        "email_preferences": prepare_field_value("email_preferences", dict(email_prefs)),
    }
