"""
Pseudonymous per-service identifiers (eduPersonTargetedID).

Derives a stable, non-reversible identifier from a user identifier, the
requesting service provider, the identity provider and a secret salt,
for one or more independently configured named values.
"""

from targetedid.attributes import lookup, resolve_value
from targetedid.config import (
    DEFAULTS,
    UNSET,
    ConfigLayer,
    build_value_configs,
    load_config,
)
from targetedid.deriver import (
    DerivedIdentifier,
    ResolvedFields,
    build_payload,
    compute_digest,
    derive,
)
from targetedid.errors import ConfigurationError, TargetedIDError, ValidationError
from targetedid.events import (
    DerivationObserver,
    GuardedObserver,
    LoggingObserver,
    NullObserver,
)
from targetedid.filters import apply_transforms, is_admitted, some_match
from targetedid.models import Field, HashAlgorithm, PathSpec, TransformRule, ValueConfig
from targetedid.nameid import NAMEID_PERSISTENT, StructuredIdentifier, serialize_name_id
from targetedid.processor import OUTPUT_ATTRIBUTE, TargetedIDProcessor

__all__ = [
    # Models
    "Field",
    "HashAlgorithm",
    "PathSpec",
    "TransformRule",
    "ValueConfig",
    # Configuration
    "ConfigLayer",
    "DEFAULTS",
    "UNSET",
    "build_value_configs",
    "load_config",
    # Resolution and filtering
    "lookup",
    "resolve_value",
    "some_match",
    "is_admitted",
    "apply_transforms",
    # Derivation
    "ResolvedFields",
    "DerivedIdentifier",
    "build_payload",
    "compute_digest",
    "derive",
    # Structured output
    "StructuredIdentifier",
    "NAMEID_PERSISTENT",
    "serialize_name_id",
    # Processing
    "TargetedIDProcessor",
    "OUTPUT_ATTRIBUTE",
    "DerivationObserver",
    "GuardedObserver",
    "LoggingObserver",
    "NullObserver",
    # Errors
    "TargetedIDError",
    "ConfigurationError",
    "ValidationError",
]
