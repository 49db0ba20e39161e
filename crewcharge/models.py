"""
Plain value types shared by the hasher, the payload builders and the client:
- Result: uniform {ok, message} / {ok, error} outcome
- HashedIdentifier / RawIdentifier: how a user is identified on the wire
- RequestEnvelope: one validated request, ready to be rendered as a JSON body
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar, Union

from crewcharge.errors import CrewchargeError

T = TypeVar("T")

DEFAULT_SUCCESS_MESSAGE = "All good! 👍"


@dataclass(frozen=True)
class Result(Generic[T]):
    ok: bool
    value: Optional[T] = None
    message: Optional[str] = None
    error: Optional[CrewchargeError] = None
    # True only when a raw identifier was returned in place of a hash
    degraded: bool = False

    @classmethod
    def success(cls, value: Optional[T] = None, message: Optional[str] = None, degraded: bool = False) -> "Result[T]":
        return cls(ok=True, value=value, message=message, degraded=degraded)

    @classmethod
    def failure(cls, error: CrewchargeError) -> "Result[T]":
        return cls(ok=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            out: Dict[str, Any] = {"ok": True, "message": self.message or DEFAULT_SUCCESS_MESSAGE}
            if self.degraded:
                out["degraded"] = True
            return out
        return {"ok": False, "error": str(self.error) if self.error else "Unexpected error happened!"}


@dataclass(frozen=True)
class HashedIdentifier:
    """A namespaced one-way hash, sent as `uid_hashed`."""
    value: str

    wire_key = "uid_hashed"
    is_hashed = True


@dataclass(frozen=True)
class RawIdentifier:
    """An unhashed user id, sent as `uid`. Only use when the id carries no PII."""
    value: str

    wire_key = "uid"
    is_hashed = False


Identifier = Union[HashedIdentifier, RawIdentifier]


class RequestKind(Enum):
    attach_attributes = "attach_attributes"
    change_privacy_preferences = "change_privacy_preferences"
    log_trigger = "log_trigger"


@dataclass(frozen=True)
class RequestEnvelope:
    kind: RequestKind
    identifier: Identifier
    attributes: Optional[Dict[str, Any]] = None
    preferences: Optional[Dict[str, Any]] = None
    trigger_key: Optional[str] = None
    test_user: bool = False

    def to_body(self, analytics_tag: Optional[str] = None) -> Dict[str, Any]:
        """Render the JSON body the Crewcharge API expects for this kind."""
        body: Dict[str, Any] = {}
        if analytics_tag:
            body["analytics_tag"] = analytics_tag
        body[self.identifier.wire_key] = self.identifier.value

        if self.kind is RequestKind.attach_attributes:
            body["as_test_user"] = self.test_user
            body["attributes"] = dict(self.attributes or {})
            body["crewcharge_preferences"] = self.preferences
        elif self.kind is RequestKind.change_privacy_preferences:
            body["crewcharge_preferences"] = self.preferences
        else:
            body["trigger_key"] = self.trigger_key
        return body
