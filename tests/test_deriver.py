"""Tests for identifier derivation."""

import hashlib

import pytest

from targetedid.config import build_value_configs
from targetedid.deriver import (
    DerivedIdentifier,
    ResolvedFields,
    build_payload,
    compute_digest,
    derive,
)
from targetedid.models import Field, HashAlgorithm

ALL_FIELDS = (Field.SALT, Field.USER_ID, Field.TARGET_ID, Field.SOURCE_ID)


def sha256(text):
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def value_config(**options):
    options.setdefault("fields", ["salt", "userID", "targetID", "sourceID"])
    return build_value_configs(options)["default"]


class TestBuildPayload:
    """Tests for raw payload assembly."""

    def test_skips_empty_fields(self):
        """Test empty values do not leave empty segments."""
        resolved = ResolvedFields(user_id="u1", target_id="", source_id="idp1", salt="")
        assert build_payload(ALL_FIELDS, resolved, "@@") == "u1@@idp1"

    def test_order_follows_fields(self):
        """Test payload order is the configured field order."""
        resolved = ResolvedFields(user_id="u", target_id="t", source_id="s", salt="x")
        fields = (Field.SOURCE_ID, Field.USER_ID)
        assert build_payload(fields, resolved, "|") == "s|u"

    def test_duplicate_fields_kept(self):
        """Test a field listed twice appears twice."""
        resolved = ResolvedFields(user_id="u", target_id="t", source_id="s", salt="x")
        fields = ALL_FIELDS + (Field.SALT,)
        assert build_payload(fields, resolved, "@@") == "x@@u@@t@@s@@x"

    def test_empty_separator(self):
        """Test values concatenate with an empty separator."""
        resolved = ResolvedFields(user_id="u", target_id="t")
        assert build_payload(ALL_FIELDS, resolved, "") == "ut"

    def test_all_empty(self):
        """Test payload of nothing."""
        assert build_payload(ALL_FIELDS, ResolvedFields(), "@@") == ""


class TestComputeDigest:
    """Tests for payload hashing."""

    def test_hex_digest(self):
        """Test digest is lowercase hex."""
        assert compute_digest("abc", HashAlgorithm.SHA1) == hashlib.sha1(b"abc").hexdigest()

    def test_algorithm_changes_digest(self):
        """Test the payload is hashed with the given algorithm."""
        digest = compute_digest("u1@@sp1", HashAlgorithm.SHA512)
        assert digest == hashlib.sha512(b"u1@@sp1").hexdigest()
        assert "u1" not in compute_digest("u1@@sp1", HashAlgorithm.MD5)


class TestDerive:
    """Tests for full derivation."""

    def test_end_to_end_value(self):
        """Test salted sha256 derivation without prefix."""
        config = value_config(salt="s3cr3t", hashFunction="sha256", fieldSeparator="@@")
        resolved = ResolvedFields(user_id="alice", target_id="sp1", source_id="idp1", salt="s3cr3t")

        derived = derive(config, resolved)

        assert derived == DerivedIdentifier(value=sha256("s3cr3t@@alice@@sp1@@idp1"))
        assert derived.structured is None

    def test_prefix_prepended_verbatim(self):
        """Test the prefix is added with no extra separator."""
        config = value_config(salt="s3cr3t", prefix="urn:mace:example:")
        resolved = ResolvedFields(user_id="alice", target_id="sp1", source_id="idp1", salt="s3cr3t")

        derived = derive(config, resolved)

        assert derived.value == "urn:mace:example:" + sha256("s3cr3t@@alice@@sp1@@idp1")

    @pytest.mark.parametrize("algorithm", list(HashAlgorithm))
    def test_deterministic(self, algorithm):
        """Test identical inputs give identical outputs for every algorithm."""
        config = value_config(hashFunction=algorithm.value, salt="pepper")
        resolved = ResolvedFields(user_id="alice", target_id="sp1", source_id="idp1", salt="pepper")
        assert derive(config, resolved) == derive(config, resolved)

    def test_different_targets_differ(self):
        """Test the same user gets distinct values per target."""
        config = value_config()
        first = derive(config, ResolvedFields(user_id="alice", target_id="sp1"))
        second = derive(config, ResolvedFields(user_id="alice", target_id="sp2"))
        assert first.value != second.value

    def test_structured_output(self):
        """Test structured output carries prefixed value and qualifiers."""
        config = value_config(nameId=True, prefix="p:")
        resolved = ResolvedFields(user_id="alice", target_id="sp1", source_id="idp1")

        derived = derive(config, resolved)

        assert derived.structured is not None
        assert derived.structured.value == derived.value
        assert derived.structured.value.startswith("p:")
        assert derived.structured.name_qualifier == "idp1"
        assert derived.structured.sp_name_qualifier == "sp1"

    def test_structured_output_without_qualifiers(self):
        """Test empty source/target leave qualifiers unset."""
        config = value_config(structuredOutput=True)
        derived = derive(config, ResolvedFields(user_id="alice"))
        assert derived.structured.name_qualifier is None
        assert derived.structured.sp_name_qualifier is None

    def test_to_dict(self):
        """Test serialization of a derived identifier."""
        config = value_config(nameId=True)
        data = derive(config, ResolvedFields(user_id="alice")).to_dict()
        assert data["structured"]["value"] == data["value"]
