"""Tests for user id hashing."""

import hashlib
import re

import pytest

from crewcharge import hashing
from crewcharge.errors import HashingError, ValidationError
from crewcharge.hashing import gen_hash, hash_identifier
from crewcharge.models import HashedIdentifier, RawIdentifier

HEX_128 = re.compile(r"^[0-9a-f]{128}$")


class TestGenHash:
    def test_is_deterministic(self):
        assert gen_hash("acme", "42") == gen_hash("acme", "42")

    def test_distinct_ids_differ(self):
        assert gen_hash("p", "1") != gen_hash("p", "2")

    def test_same_id_different_projects_differ(self):
        assert gen_hash("a", "1") != gen_hash("b", "1")

    @pytest.mark.parametrize("raw", ["1", "alice@example.com", "ünïcödé", "x" * 10_000])
    def test_shape_is_prefix_plus_lowercase_hex(self, raw):
        value = gen_hash("acme", raw)
        assert value.startswith("acme_")
        assert HEX_128.match(value[len("acme_"):])

    def test_matches_sha3_512_of_utf8_bytes(self):
        expected = hashlib.sha3_512("alice@example.com".encode("utf-8")).hexdigest()
        assert gen_hash("acme", "alice@example.com") == f"acme_{expected}"

    def test_project_key_with_underscore_is_kept_verbatim(self):
        assert gen_hash("my_project", "1").startswith("my_project_")

    @pytest.mark.parametrize("project_key, raw", [("", "1"), ("acme", ""), (None, "1"), ("acme", None)])
    def test_empty_inputs_are_rejected(self, project_key, raw):
        with pytest.raises(ValidationError):
            gen_hash(project_key, raw)

    def test_unhashable_string_raises_hashing_error(self):
        # Lone surrogates cannot be UTF-8 encoded
        with pytest.raises(HashingError):
            gen_hash("acme", "\ud800")

    def test_missing_digest_engine_raises_hashing_error(self, monkeypatch):
        def broken(name):
            raise ValueError("unsupported hash type")

        monkeypatch.setattr(hashing.hashlib, "new", broken)
        with pytest.raises(HashingError):
            gen_hash("acme", "42")


class TestHashIdentifier:
    def test_success_returns_hashed_identifier(self):
        result = hash_identifier("acme", "42")
        assert result.ok
        assert isinstance(result.value, HashedIdentifier)
        assert result.value.value == gen_hash("acme", "42")
        assert result.degraded is False

    def test_validation_failure_is_returned_not_raised(self):
        result = hash_identifier("", "42")
        assert not result.ok
        assert isinstance(result.error, ValidationError)

    def test_hashing_failure_fails_closed_by_default(self, monkeypatch):
        monkeypatch.setattr(hashing, "_new_digest", _raise_hashing_error)
        result = hash_identifier("acme", "42")
        assert not result.ok
        assert isinstance(result.error, HashingError)
        assert result.value is None
        assert "42" not in result.to_dict()["error"]

    def test_raw_fallback_requires_opt_in_and_is_flagged(self, monkeypatch):
        monkeypatch.setattr(hashing, "_new_digest", _raise_hashing_error)
        result = hash_identifier("acme", "42", allow_raw_fallback=True)
        assert result.ok
        assert result.degraded is True
        assert isinstance(result.value, RawIdentifier)
        assert result.value.value == "42"
        assert "NOT private" in result.message
        assert result.to_dict()["degraded"] is True

    def test_private_result_dict_has_no_degraded_flag(self):
        assert "degraded" not in hash_identifier("acme", "42").to_dict()

    def test_fallback_does_not_hide_validation_errors(self):
        result = hash_identifier("acme", "", allow_raw_fallback=True)
        assert not result.ok
        assert isinstance(result.error, ValidationError)


def _raise_hashing_error():
    raise HashingError("sha3_512 is not available")
