"""
Targeted identifier processing step.

Generates the eduPersonTargetedID attribute for an authenticated user
from:

- an attribute identifying the user
- (optionally) a value identifying the target service provider
- (optionally) a value identifying the identity provider
- (optionally) a fixed secret salt
- a hash algorithm

Each named value of the configuration yields at most one attribute value
per request. Users and targets can be filtered with regular expressions,
and the target identifier can be rewritten before it is used.

Example configuration:

    salt: 9f2c1e0b7a
    hashFunction: sha256
    values:
      default: {}
      persistent:
        nameId: true
        ifTarget: ['^https://sp\\.example\\.org/']
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, MutableMapping
from typing import Any

import structlog

from targetedid.attributes import resolve_value
from targetedid.config import build_value_configs
from targetedid.deriver import DerivedIdentifier, ResolvedFields, derive
from targetedid.events import DerivationObserver, GuardedObserver, LoggingObserver
from targetedid.filters import apply_transforms, is_admitted
from targetedid.models import Field, ValueConfig
from targetedid.nameid import StructuredIdentifier, serialize_name_id

logger = structlog.get_logger()

ATTRIBUTES_KEY = "Attributes"
OUTPUT_ATTRIBUTE = "eduPersonTargetedID"
MISSING_USER_MESSAGE = "no user identifier found"


class TargetedIDProcessor:
    """Derives eduPersonTargetedID values into a request state."""

    def __init__(
        self,
        config: Mapping[str, Any],
        observer: DerivationObserver | None = None,
        serializer: Callable[[StructuredIdentifier], Any] = serialize_name_id,
    ):
        self.values = build_value_configs(config)
        self.observer = GuardedObserver(observer or LoggingObserver())
        self.serializer = serializer
        logger.debug("processor_initialized", values=list(self.values))

    def process(self, state: MutableMapping[str, Any]) -> list[Any]:
        """
        Replace the output attribute in ``state`` with freshly derived values.

        Returns:
            The list stored under Attributes/eduPersonTargetedID
        """
        attributes = state.get(ATTRIBUTES_KEY)
        if attributes is None:
            attributes = {}
            state[ATTRIBUTES_KEY] = attributes
        output: list[Any] = []
        attributes[OUTPUT_ATTRIBUTE] = output

        for value_config in self.values.values():
            derived = self.derive_value(value_config, state)
            if derived is None:
                continue
            if derived.structured is not None:
                output.append(self.serializer(derived.structured))
            else:
                output.append(derived.value)

        return output

    def derive_value(
        self, value_config: ValueConfig, state: Mapping[str, Any]
    ) -> DerivedIdentifier | None:
        """
        Run one named value through resolution, filtering and derivation.

        Returns:
            The derived identifier, or None if a filter rejected the value
        """
        name = value_config.name

        user_id = ""
        if value_config.user_paths:
            user_id = resolve_value(
                state, value_config.user_paths, MISSING_USER_MESSAGE, self.observer
            )
        if not is_admitted(user_id, value_config.user_filter):
            self.observer.value_skipped(name, Field.USER_ID, user_id)
            return None
        self.observer.field_resolved(name, Field.USER_ID, user_id)

        target_id = resolve_value(state, value_config.target_paths)
        target_id = apply_transforms(target_id, value_config.target_transform)
        if not is_admitted(target_id, value_config.target_filter):
            self.observer.value_skipped(name, Field.TARGET_ID, target_id)
            return None
        self.observer.field_resolved(name, Field.TARGET_ID, target_id)

        source_id = resolve_value(state, value_config.source_paths)
        self.observer.field_resolved(name, Field.SOURCE_ID, source_id)

        resolved = ResolvedFields(
            user_id=user_id,
            target_id=target_id,
            source_id=source_id,
            salt=value_config.salt,
        )
        derived = derive(value_config, resolved)
        self.observer.value_derived(name, value_config.hash_algorithm, derived.value)
        return derived
