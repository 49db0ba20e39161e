"""
Crewcharge REST client (async, via httpx).

- The base endpoint, API key and analytics tag are passed in, not read from globals.
  Use CrewchargeClient.from_settings() to build one from environment variables.
- Every call returns a Result; network errors and non-2xx responses become
  Result(ok=False, error=TransportError(...)) instead of exceptions.
- We log the request kind and status, never the user id or the API key.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import httpx

from crewcharge.config import Settings
from crewcharge.errors import TransportError
from crewcharge.logging_setup import get_logger
from crewcharge.models import DEFAULT_SUCCESS_MESSAGE, Identifier, RequestEnvelope, RequestKind, Result
from crewcharge.payloads import (
    build_attach_attributes,
    build_change_privacy_preferences,
    build_log_trigger,
)

log = get_logger()


class CrewchargeClient:
    PATHS = {
        RequestKind.attach_attributes: "/api/v1/users/attach-attributes",
        RequestKind.change_privacy_preferences: "/api/v1/users/change-privacy-preferences",
        RequestKind.log_trigger: "/api/v1/log",
    }
    # Kinds the API rejects without an api-key header
    KEYED_KINDS = (RequestKind.attach_attributes, RequestKind.change_privacy_preferences)
    SCOPE = "user,project"

    def __init__(
        self,
        base_endpoint: str,
        api_key: Optional[str] = None,
        analytics_tag: Optional[str] = None,
        timeout_s: float = 20,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not base_endpoint:
            raise ValueError("base_endpoint is required")
        self.base_endpoint = base_endpoint.rstrip("/")
        self.api_key = api_key
        self.analytics_tag = analytics_tag
        self._http = httpx.AsyncClient(
            base_url=self.base_endpoint,
            timeout=timeout_s,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "CrewchargeClient":
        return cls(
            base_endpoint=settings.CREWCHARGE_ENDPOINT,
            api_key=settings.CREWCHARGE_API_KEY,
            analytics_tag=settings.CREWCHARGE_ANALYTICS_TAG,
            timeout_s=settings.CREWCHARGE_TIMEOUT_S,
            **kwargs,
        )

    async def __aenter__(self) -> "CrewchargeClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "scope": self.SCOPE}
        if self.api_key:
            headers["api-key"] = self.api_key
        return headers

    async def _post(self, envelope: RequestEnvelope) -> str:
        """POST one envelope; return the success message or raise TransportError."""
        if envelope.kind in self.KEYED_KINDS and not self.api_key:
            raise TransportError("Missing Crewcharge API key")

        path = self.PATHS[envelope.kind]
        try:
            resp = await self._http.post(path, headers=self._headers(), json=envelope.to_body(self.analytics_tag))
        except (TypeError, ValueError) as e:
            raise TransportError(f"Could not encode request body: {e}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"Request to {path} failed: {e!r}") from e

        if resp.is_error:
            raise TransportError(
                f"Crewcharge {path} returned {resp.status_code}: {resp.text[:300]}",
                status_code=resp.status_code,
            )

        try:
            data = resp.json() if resp.content else {}
        except ValueError:
            data = {}
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return DEFAULT_SUCCESS_MESSAGE

    async def send(self, envelope: RequestEnvelope) -> Result[RequestEnvelope]:
        try:
            message = await self._post(envelope)
        except TransportError as e:
            log.warning("crewcharge.request_failed", kind=envelope.kind.value, status=e.status_code, error=str(e))
            return Result.failure(e)
        log.info("crewcharge.request_ok", kind=envelope.kind.value)
        return Result.success(envelope, message=message)

    # ---- One call per request kind: build, then send ----

    async def attach_user_attributes(
        self,
        identifier: Identifier,
        attributes: Optional[Mapping[str, Any]] = None,
        privacy_preferences: Optional[Mapping[str, Any]] = None,
        test_user: bool = False,
    ) -> Result[RequestEnvelope]:
        built = build_attach_attributes(identifier, attributes, test_user, privacy_preferences)
        if not built.ok:
            return built
        return await self.send(built.value)

    async def change_privacy_preferences(
        self,
        identifier: Identifier,
        privacy_preferences: Mapping[str, Any],
    ) -> Result[RequestEnvelope]:
        built = build_change_privacy_preferences(identifier, privacy_preferences)
        if not built.ok:
            return built
        return await self.send(built.value)

    async def log_trigger(self, identifier: Identifier, trigger_key: str) -> Result[RequestEnvelope]:
        built = build_log_trigger(identifier, trigger_key)
        if not built.ok:
            return built
        return await self.send(built.value)
