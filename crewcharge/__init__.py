"""
Crewcharge SDK: hash user ids, validate payloads and talk to the Crewcharge API.
"""

from crewcharge.api import attach_user_attributes, change_privacy_preferences, gen_hash, log_trigger
from crewcharge.client import CrewchargeClient
from crewcharge.errors import CrewchargeError, HashingError, TransportError, ValidationError
from crewcharge.hashing import hash_identifier
from crewcharge.models import HashedIdentifier, RawIdentifier, RequestEnvelope, RequestKind, Result
from crewcharge.payloads import (
    RECOMMENDED_USER_ATTRIBUTES,
    VALID_PRIVACY_PREFERENCES,
    build_attach_attributes,
    build_change_privacy_preferences,
    build_log_trigger,
)

__all__ = [
    "CrewchargeClient",
    "CrewchargeError",
    "HashedIdentifier",
    "HashingError",
    "RECOMMENDED_USER_ATTRIBUTES",
    "RawIdentifier",
    "RequestEnvelope",
    "RequestKind",
    "Result",
    "TransportError",
    "VALID_PRIVACY_PREFERENCES",
    "ValidationError",
    "attach_user_attributes",
    "build_attach_attributes",
    "build_change_privacy_preferences",
    "build_log_trigger",
    "change_privacy_preferences",
    "gen_hash",
    "hash_identifier",
    "log_trigger",
]
