"""
Identifier derivation.

The configured fields are joined into a raw payload, hashed, optionally
prefixed and, for structured output, packaged with their qualifiers:

    raw payload = separator.join(non-empty values of the configured fields)
    value       = prefix + hexdigest(raw payload)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from targetedid.models import Field, HashAlgorithm, ValueConfig
from targetedid.nameid import StructuredIdentifier


@dataclass(frozen=True)
class ResolvedFields:
    """Values resolved for one named value during one request."""

    user_id: str = ""
    target_id: str = ""
    source_id: str = ""
    salt: str = ""

    def get(self, field: Field) -> str:
        return {
            Field.SALT: self.salt,
            Field.USER_ID: self.user_id,
            Field.TARGET_ID: self.target_id,
            Field.SOURCE_ID: self.source_id,
        }[field]


@dataclass(frozen=True)
class DerivedIdentifier:
    """Result of a derivation."""

    value: str
    structured: StructuredIdentifier | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "structured": self.structured.to_dict() if self.structured else None,
        }


def build_payload(fields: tuple[Field, ...], resolved: ResolvedFields, separator: str) -> str:
    """Join the non-empty field values in configured order (duplicates kept)."""
    values = [resolved.get(field) for field in fields]
    return separator.join(v for v in values if v)


def compute_digest(payload: str, algorithm: HashAlgorithm) -> str:
    """Lowercase hex digest of the payload."""
    return algorithm.hexdigest(payload)


def derive(config: ValueConfig, resolved: ResolvedFields) -> DerivedIdentifier:
    """
    Derive the identifier for one named value.

    The prefix is applied to the digest before any structured packaging, so
    a structured identifier carries the prefixed value.
    """
    payload = build_payload(config.fields, resolved, config.field_separator)
    value = compute_digest(payload, config.hash_algorithm)
    if config.prefix:
        value = config.prefix + value

    structured = None
    if config.structured_output:
        structured = StructuredIdentifier(
            value=value,
            name_qualifier=resolved.source_id or None,
            sp_name_qualifier=resolved.target_id or None,
        )
    return DerivedIdentifier(value=value, structured=structured)
