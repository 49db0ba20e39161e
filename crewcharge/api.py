"""
One-call helpers that mirror the classic Crewcharge SDK functions.
Each opens a client from settings (env / .env), sends one request and closes it.
For many calls in a row, keep a CrewchargeClient open instead.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

import httpx

from crewcharge.client import CrewchargeClient
from crewcharge.config import Settings, settings as default_settings
from crewcharge.errors import TransportError, ValidationError
from crewcharge.hashing import hash_identifier
from crewcharge.models import HashedIdentifier, Identifier, RequestEnvelope, Result


def _as_identifier(uid_hashed: Union[str, Identifier]) -> Identifier:
    # A bare string is what the classic SDK took: an already-hashed uid
    if isinstance(uid_hashed, str):
        return HashedIdentifier(uid_hashed)
    return uid_hashed


def _settings_with(settings: Optional[Settings], **overrides: Any) -> Settings:
    base = settings or default_settings
    changes = {k: v for k, v in overrides.items() if v is not None}
    return base.model_copy(update=changes) if changes else base


def _open_client(cfg: Settings) -> CrewchargeClient:
    try:
        return CrewchargeClient.from_settings(cfg)
    except (ValueError, httpx.InvalidURL) as e:
        raise TransportError(f"Invalid Crewcharge endpoint {cfg.CREWCHARGE_ENDPOINT!r}: {e}") from e


def gen_hash(
    project_key: Optional[str],
    raw_identifier: str,
    *,
    settings: Optional[Settings] = None,
) -> Result[Identifier]:
    """
    Hash a user id, same argument order as hashing.gen_hash.
    Pass project_key=None to use CREWCHARGE_PROJECT_KEY from settings.
    """
    key = project_key if project_key is not None else (settings or default_settings).CREWCHARGE_PROJECT_KEY
    if not key:
        return Result.failure(ValidationError("project_key is not set (pass it or set CREWCHARGE_PROJECT_KEY)"))
    return hash_identifier(key, raw_identifier)


async def attach_user_attributes(
    uid_hashed: Union[str, Identifier],
    attributes: Optional[Mapping[str, Any]] = None,
    privacy_preferences: Optional[Mapping[str, Any]] = None,
    test_user: bool = False,
    *,
    api_key: Optional[str] = None,
    analytics_tag: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> Result[RequestEnvelope]:
    cfg = _settings_with(settings, CREWCHARGE_API_KEY=api_key, CREWCHARGE_ANALYTICS_TAG=analytics_tag)
    try:
        client = _open_client(cfg)
    except TransportError as e:
        return Result.failure(e)
    async with client:
        return await client.attach_user_attributes(
            _as_identifier(uid_hashed), attributes, privacy_preferences, test_user
        )


async def change_privacy_preferences(
    uid_hashed: Union[str, Identifier],
    privacy_preferences: Mapping[str, Any],
    *,
    api_key: Optional[str] = None,
    analytics_tag: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> Result[RequestEnvelope]:
    cfg = _settings_with(settings, CREWCHARGE_API_KEY=api_key, CREWCHARGE_ANALYTICS_TAG=analytics_tag)
    try:
        client = _open_client(cfg)
    except TransportError as e:
        return Result.failure(e)
    async with client:
        return await client.change_privacy_preferences(_as_identifier(uid_hashed), privacy_preferences)


async def log_trigger(
    uid_hashed: Union[str, Identifier],
    trigger_key: str,
    *,
    api_key: Optional[str] = None,
    analytics_tag: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> Result[RequestEnvelope]:
    cfg = _settings_with(settings, CREWCHARGE_API_KEY=api_key, CREWCHARGE_ANALYTICS_TAG=analytics_tag)
    try:
        client = _open_client(cfg)
    except TransportError as e:
        return Result.failure(e)
    async with client:
        return await client.log_trigger(_as_identifier(uid_hashed), trigger_key)
