"""
Payload validation + builders for the three Crewcharge request kinds.

Builders are pure: they never touch the network and never raise for bad
input. They return Result(ok=True, value=RequestEnvelope) or
Result(ok=False, error=ValidationError).
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, StrictBool
from pydantic import ValidationError as PydanticValidationError

from crewcharge.errors import ValidationError
from crewcharge.models import (
    HashedIdentifier,
    Identifier,
    RawIdentifier,
    RequestEnvelope,
    RequestKind,
    Result,
)

INVALID_PRIVACY_OPTIONS = "Invalid privacy options"

# Attach any attributes you like; these are the ones Crewcharge understands.
RECOMMENDED_USER_ATTRIBUTES = {
    "pii_name": "pii_name",
    "pii_email": "pii_email",
    "pii_image": "pii_image",
    "locale": "locale",
}

# Documented shape (and defaults) of a privacy preference selection.
VALID_PRIVACY_PREFERENCES = {
    "anon": False,
    "test": False,
    "analytics": {
        "pii": False,
    },
    "feedback": {
        "email": False,
        "push": False,
        "sms": False,
        "in_app": True,
    },
    "marketing": {
        "email": False,
        "push": False,
        "sms": False,
        "in_app": True,
    },
}


class PrivacyPreferences(BaseModel):
    """Top-level keys are closed; channel names inside a group are open."""

    model_config = ConfigDict(extra="forbid")

    anon: Optional[StrictBool] = None
    test: Optional[StrictBool] = None
    analytics: Optional[Dict[str, StrictBool]] = None
    feedback: Optional[Dict[str, StrictBool]] = None
    marketing: Optional[Dict[str, StrictBool]] = None


def _privacy_error(exc: PydanticValidationError) -> ValidationError:
    errors = exc.errors()
    if any(err.get("type") in ("extra_forbidden", "dict_type") and len(err.get("loc", ())) <= 1
           for err in errors):
        return ValidationError(INVALID_PRIVACY_OPTIONS)
    where = ".".join(str(p) for p in errors[0].get("loc", ()))
    return ValidationError(f"{INVALID_PRIVACY_OPTIONS}: {where} must be a boolean")


def validate_privacy_preferences(preferences: Any) -> Dict[str, Any]:
    """Return the normalized preference dict or raise ValidationError."""
    if not isinstance(preferences, Mapping):
        raise ValidationError(INVALID_PRIVACY_OPTIONS)
    try:
        model = PrivacyPreferences.model_validate(dict(preferences))
    except PydanticValidationError as e:
        raise _privacy_error(e) from e
    return model.model_dump(exclude_none=True)


def validate_attributes(attributes: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    if attributes is None:
        return {}
    if not isinstance(attributes, Mapping):
        raise ValidationError("attributes must be a mapping")
    if not all(isinstance(k, str) for k in attributes):
        raise ValidationError("attribute keys must be strings")
    try:
        json.dumps(attributes)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"attributes are not JSON-serializable: {e}") from e
    return dict(attributes)


def _check_identifier(identifier: Identifier) -> None:
    if not isinstance(identifier, (HashedIdentifier, RawIdentifier)):
        raise ValidationError("identifier must be a HashedIdentifier or RawIdentifier")
    if not isinstance(identifier.value, str) or not identifier.value:
        raise ValidationError("identifier must not be empty")


def build_attach_attributes(
    identifier: Identifier,
    attributes: Optional[Mapping[str, Any]],
    test_user: bool = False,
    preferences: Optional[Mapping[str, Any]] = None,
) -> Result[RequestEnvelope]:
    try:
        _check_identifier(identifier)
        attrs = validate_attributes(attributes)
        prefs = validate_privacy_preferences(preferences) if preferences is not None else None
        if not isinstance(test_user, bool):
            raise ValidationError("test_user must be a boolean")
    except ValidationError as e:
        return Result.failure(e)
    return Result.success(
        RequestEnvelope(
            kind=RequestKind.attach_attributes,
            identifier=identifier,
            attributes=attrs,
            preferences=prefs,
            test_user=test_user,
        )
    )


def build_change_privacy_preferences(
    identifier: Identifier,
    preferences: Mapping[str, Any],
) -> Result[RequestEnvelope]:
    try:
        _check_identifier(identifier)
        prefs = validate_privacy_preferences(preferences)
    except ValidationError as e:
        return Result.failure(e)
    return Result.success(
        RequestEnvelope(
            kind=RequestKind.change_privacy_preferences,
            identifier=identifier,
            preferences=prefs,
        )
    )


def build_log_trigger(identifier: Identifier, trigger_key: str) -> Result[RequestEnvelope]:
    try:
        _check_identifier(identifier)
        if not isinstance(trigger_key, str) or not trigger_key.strip():
            raise ValidationError("trigger_key must be a non-empty string")
    except ValidationError as e:
        return Result.failure(e)
    return Result.success(
        RequestEnvelope(
            kind=RequestKind.log_trigger,
            identifier=identifier,
            trigger_key=trigger_key,
        )
    )
