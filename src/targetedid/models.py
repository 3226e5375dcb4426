"""
Data model for targeted identifier derivation.

Provides the typed pieces the resolver and deriver work with: attribute
path specifiers, the closed set of digest algorithms, target transformation
rules and the effective configuration of one named output value.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from targetedid.errors import ConfigurationError

PATH_SEPARATOR = "/"


class Field(StrEnum):
    """Names usable in the ``fields`` option."""

    SALT = "salt"
    USER_ID = "userID"
    TARGET_ID = "targetID"
    SOURCE_ID = "sourceID"

    @classmethod
    def from_name(cls, name: Any) -> Field:
        try:
            return cls(str(name))
        except ValueError:
            raise ConfigurationError(
                f"unknown field: {name}",
                details={"allowed": ", ".join(f.value for f in cls)},
            ) from None


class HashAlgorithm(StrEnum):
    """Digest algorithms accepted by ``hashFunction``."""

    MD5 = "md5"
    SHA1 = "sha1"
    SHA224 = "sha224"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"
    SHA3_224 = "sha3-224"
    SHA3_256 = "sha3-256"
    SHA3_384 = "sha3-384"
    SHA3_512 = "sha3-512"

    @classmethod
    def from_name(cls, name: Any) -> HashAlgorithm:
        """
        Look up an algorithm by name.

        Matching is case-insensitive and accepts ``_`` in place of ``-``
        (``SHA3_256`` and ``sha3-256`` are the same algorithm).

        Raises:
            ConfigurationError: If the name is not a supported digest
        """
        normalized = str(name).strip().lower().replace("_", "-")
        try:
            return cls(normalized)
        except ValueError:
            raise ConfigurationError(f"unsupported hash algorithm: {name}") from None

    @property
    def hashlib_name(self) -> str:
        return self.value.replace("-", "_")

    def hexdigest(self, payload: str) -> str:
        """Hex digest of the UTF-8 encoding of ``payload``."""
        return hashlib.new(self.hashlib_name, payload.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class PathSpec:
    """
    Reference into the request state, at most two levels deep.

    ``core:SP`` names a top-level key; ``Attributes/uid`` names the ``uid``
    key inside the top-level ``Attributes`` mapping.
    """

    key: str
    subkey: str | None = None

    @classmethod
    def parse(cls, spec: Any) -> PathSpec:
        text = str(spec)
        parts = text.split(PATH_SEPARATOR)
        if len(parts) > 2 or not all(parts):
            raise ConfigurationError(
                f"invalid attribute path: {text}",
                details={"expected": "key or key/subkey"},
            )
        return cls(key=parts[0], subkey=parts[1] if len(parts) == 2 else None)

    def __str__(self) -> str:
        if self.subkey is None:
            return self.key
        return f"{self.key}{PATH_SEPARATOR}{self.subkey}"


@dataclass(frozen=True)
class TransformRule:
    """A single target transformation (regex substitution)."""

    pattern: re.Pattern[str]
    replacement: str

    @classmethod
    def compile(cls, pattern: Any, replacement: Any) -> TransformRule:
        return cls(
            pattern=compile_pattern(pattern, option="targetTransform"),
            replacement="" if replacement is None else str(replacement),
        )

    def apply(self, value: str) -> str:
        return self.pattern.sub(self.replacement, value)


def compile_pattern(pattern: Any, option: str) -> re.Pattern[str]:
    """Compile a configured regular expression, reporting bad ones as config errors."""
    try:
        return re.compile(str(pattern))
    except re.error as e:
        raise ConfigurationError(
            f"invalid regular expression in {option}: {pattern}",
            details={"error": str(e)},
        ) from e


@dataclass(frozen=True)
class ValueConfig:
    """
    Effective configuration of one named output value.

    Built once from the merged configuration layers and never mutated.
    ``user_filter``/``target_filter`` are None when no filter is configured;
    an empty tuple is a filter that admits nothing.
    """

    name: str
    user_paths: tuple[PathSpec, ...]
    user_filter: tuple[re.Pattern[str], ...] | None
    target_paths: tuple[PathSpec, ...]
    target_transform: tuple[TransformRule, ...]
    target_filter: tuple[re.Pattern[str], ...] | None
    source_paths: tuple[PathSpec, ...]
    salt: str
    hash_algorithm: HashAlgorithm
    fields: tuple[Field, ...]
    field_separator: str
    prefix: str
    structured_output: bool

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary (the salt is masked)."""
        return {
            "name": self.name,
            "userID": [str(p) for p in self.user_paths],
            "ifUser": _patterns_to_list(self.user_filter),
            "targetID": [str(p) for p in self.target_paths],
            "targetTransform": [
                [rule.pattern.pattern, rule.replacement] for rule in self.target_transform
            ],
            "ifTarget": _patterns_to_list(self.target_filter),
            "sourceID": [str(p) for p in self.source_paths],
            "salt": "***" if self.salt else None,
            "hashFunction": self.hash_algorithm.value,
            "fields": [f.value for f in self.fields],
            "fieldSeparator": self.field_separator,
            "prefix": self.prefix or None,
            "nameId": self.structured_output,
        }


def _patterns_to_list(patterns: tuple[re.Pattern[str], ...] | None) -> list[str] | None:
    if patterns is None:
        return None
    return [p.pattern for p in patterns]
