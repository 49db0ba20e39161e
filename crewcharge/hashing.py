"""
User identity hashing.

Crewcharge must never receive your raw user id (GDPR). If you store
{"id": 1, "name": "Alice"}, do NOT send 1: send gen_hash("<project>", "1").

The hash is SHA3-512 over the UTF-8 bytes of the id, hex encoded and
prefixed with the project key, so the same user always maps to the same
Crewcharge identity and ids from different projects never mix.
"""

import hashlib

from crewcharge.errors import HashingError, ValidationError
from crewcharge.models import HashedIdentifier, Identifier, RawIdentifier, Result

DIGEST_NAME = "sha3_512"
DIGEST_HEX_LENGTH = 128


def _new_digest():
    # Some FIPS builds of OpenSSL do not expose SHA-3
    try:
        return hashlib.new(DIGEST_NAME)
    except ValueError as e:
        raise HashingError(f"{DIGEST_NAME} is not available: {e}") from e


def gen_hash(project_key: str, raw_identifier: str) -> str:
    """Return '{project_key}_{hex digest}'. Raises ValidationError / HashingError."""
    if not isinstance(project_key, str) or not project_key:
        raise ValidationError("project_key must be a non-empty string")
    if not isinstance(raw_identifier, str) or not raw_identifier:
        raise ValidationError("raw_identifier must be a non-empty string")

    digest = _new_digest()
    try:
        digest.update(raw_identifier.encode("utf-8"))
        hex_digest = digest.hexdigest()
    except (UnicodeEncodeError, ValueError) as e:
        raise HashingError(f"could not hash identifier: {e}") from e
    return f"{project_key}_{hex_digest}"


def hash_identifier(
    project_key: str,
    raw_identifier: str,
    *,
    allow_raw_fallback: bool = False,
) -> Result[Identifier]:
    """
    Result-returning wrapper around gen_hash.

    Fails closed by default: if hashing breaks you get ok=False and the raw id
    goes nowhere. With allow_raw_fallback=True you get ok=True, a RawIdentifier
    and degraded=True instead, so the caller can still see the result is NOT private.
    """
    try:
        return Result.success(HashedIdentifier(gen_hash(project_key, raw_identifier)))
    except ValidationError as e:
        return Result.failure(e)
    except HashingError as e:
        if not allow_raw_fallback:
            return Result.failure(e)
        return Result.success(
            RawIdentifier(raw_identifier),
            message=f"Hashing failed ({e}); raw identifier returned, result is NOT private",
            degraded=True,
        )
