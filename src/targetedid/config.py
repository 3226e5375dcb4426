"""
Configuration layering for named output values.

Precedence (lowest to highest):
1. Hard-coded defaults
2. Module-level options
3. The named value's own overrides

A key present in a higher layer always wins, even when its value is empty
(null, "" or an empty list): that is how an inherited setting is cleared.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import structlog
import yaml

from targetedid.errors import ConfigurationError
from targetedid.models import (
    Field,
    HashAlgorithm,
    PathSpec,
    TransformRule,
    ValueConfig,
    compile_pattern,
)
from targetedid.settings import Settings

logger = structlog.get_logger()

DEFAULT_VALUE_NAME = "default"
VALUES_KEY = "values"


class _Unset:
    """Marker for an option a layer does not mention."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

# Configuration key -> ConfigLayer attribute
OPTION_KEYS = {
    "userID": "user_id",
    "ifUser": "if_user",
    "targetID": "target_id",
    "targetTransform": "target_transform",
    "ifTarget": "if_target",
    "sourceID": "source_id",
    "salt": "salt",
    "hashFunction": "hash_function",
    "fields": "fields",
    "fieldSeparator": "field_separator",
    "prefix": "prefix",
    "nameId": "structured_output",
    "structuredOutput": "structured_output",
}


@dataclass(frozen=True)
class ConfigLayer:
    """
    One layer of raw options.

    Every attribute is UNSET unless the layer mentions the option, so an
    explicit null/empty value stays distinguishable from an absent one.
    """

    user_id: Any = UNSET
    if_user: Any = UNSET
    target_id: Any = UNSET
    target_transform: Any = UNSET
    if_target: Any = UNSET
    source_id: Any = UNSET
    salt: Any = UNSET
    hash_function: Any = UNSET
    fields: Any = UNSET
    field_separator: Any = UNSET
    prefix: Any = UNSET
    structured_output: Any = UNSET

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], ignore: tuple[str, ...] = ()) -> ConfigLayer:
        options: dict[str, Any] = {}
        for key, value in data.items():
            if key in ignore:
                continue
            attr = OPTION_KEYS.get(key)
            if attr is None:
                logger.warning("unknown_option", option=key)
                continue
            options[attr] = value
        return cls(**options)

    def is_set(self, attr: str) -> bool:
        return getattr(self, attr) is not UNSET

    def merge(self, override: ConfigLayer) -> ConfigLayer:
        """Return a layer where every option set in ``override`` wins."""
        changes = {
            f.name: getattr(override, f.name) for f in fields(override) if override.is_set(f.name)
        }
        return replace(self, **changes)


DEFAULTS = ConfigLayer(
    user_id="UserID",
    if_user=None,
    target_id=["saml:RequesterID", "core:SP"],
    target_transform=None,
    if_target=None,
    source_id=["Attributes/schacHomeOrganization", "core:IdP"],
    salt=None,
    hash_function="sha256",
    # salt appears twice on purpose: existing deployments hash this exact layout
    fields=["salt", "userID", "targetID", "sourceID", "salt"],
    field_separator="@@",
    prefix=None,
    structured_output=False,
)


def build_value_configs(
    config: Mapping[str, Any],
    defaults: ConfigLayer = DEFAULTS,
) -> dict[str, ValueConfig]:
    """
    Build the effective configuration of every named output value.

    When ``config`` has no ``values`` mapping a single value named
    "default" is synthesized with no overrides.

    Raises:
        ConfigurationError: On any invalid option, before any request is seen
    """
    values = config.get(VALUES_KEY)
    if values is None:
        values = {DEFAULT_VALUE_NAME: {}}
    if not isinstance(values, Mapping):
        raise ConfigurationError(
            f"'{VALUES_KEY}' must be a mapping of name to options",
            details={"got": type(values).__name__},
        )

    module_layer = ConfigLayer.from_dict(config, ignore=(VALUES_KEY,))
    base = defaults.merge(module_layer)

    result: dict[str, ValueConfig] = {}
    for name, overrides in values.items():
        if overrides is None:
            overrides = {}
        if not isinstance(overrides, Mapping):
            raise ConfigurationError(
                f"options for value '{name}' must be a mapping",
                details={"got": type(overrides).__name__},
            )
        merged = base.merge(ConfigLayer.from_dict(overrides))
        result[str(name)] = to_value_config(str(name), merged)
        logger.debug("value_configured", value_name=str(name))

    return result


def to_value_config(name: str, layer: ConfigLayer) -> ValueConfig:
    """
    Normalize a fully merged layer into a ValueConfig.

    Raises:
        ConfigurationError: If hashFunction is empty or unsupported, or
            nameId is not a boolean
    """
    if _is_empty(layer.hash_function):
        # the unhashed payload carries the salt, it must never become a value
        raise ConfigurationError(
            "hashFunction must not be empty",
            details={"value_name": name},
        )

    return ValueConfig(
        name=name,
        user_paths=_paths(layer.user_id),
        user_filter=_filter(layer.if_user, "ifUser"),
        target_paths=_paths(layer.target_id),
        target_transform=_transform(layer.target_transform),
        target_filter=_filter(layer.if_target, "ifTarget"),
        source_paths=_paths(layer.source_id),
        salt=_text(layer.salt),
        hash_algorithm=HashAlgorithm.from_name(layer.hash_function),
        fields=tuple(Field.from_name(f) for f in _as_list(layer.fields) if not _is_empty(f)),
        field_separator=_text(layer.field_separator),
        prefix=_text(layer.prefix),
        structured_output=_flag(layer.structured_output, "nameId", name),
    )


def _is_empty(value: Any) -> bool:
    return value is None or value is UNSET or value == "" or value == [] or value == {}


def _as_list(value: Any) -> list[Any]:
    if _is_empty(value):
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _text(value: Any) -> str:
    if value is None or value is UNSET:
        return ""
    return str(value)


def _flag(value: Any, option: str, name: str) -> bool:
    if value is None or value is UNSET:
        return False
    if not isinstance(value, bool):
        raise ConfigurationError(
            f"{option} must be true or false",
            details={"value_name": name, "got": repr(value)},
        )
    return value


def _paths(value: Any) -> tuple[PathSpec, ...]:
    return tuple(PathSpec.parse(p) for p in _as_list(value) if not _is_empty(p))


def _filter(value: Any, option: str) -> tuple[re.Pattern[str], ...] | None:
    # null or "" means no filter; an empty list is a filter nothing passes
    if value is None or value is UNSET or value is False or value == "":
        return None
    if isinstance(value, (list, tuple)):
        return tuple(compile_pattern(p, option) for p in value)
    return (compile_pattern(value, option),)


def _transform(value: Any) -> tuple[TransformRule, ...]:
    if _is_empty(value):
        return ()
    if isinstance(value, Mapping):
        return tuple(TransformRule.compile(p, r) for p, r in value.items())
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(
            "targetTransform must be a mapping or a list of pattern/replacement pairs",
            details={"got": type(value).__name__},
        )

    rules = []
    for item in value:
        if isinstance(item, Mapping) and "pattern" in item:
            rules.append(TransformRule.compile(item["pattern"], item.get("replacement", "")))
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            rules.append(TransformRule.compile(item[0], item[1]))
        else:
            raise ConfigurationError(
                "invalid targetTransform entry",
                details={"entry": repr(item)},
            )
    return tuple(rules)


def load_config(path: str | Path) -> dict[str, Any]:
    """
    Load module options from a YAML file.

    Returns:
        The configuration mapping ({} for an empty file)

    Raises:
        ConfigurationError: If the file is missing, unparseable or not a mapping
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(
            f"configuration file not found: {config_path}",
        )

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"invalid YAML in configuration file: {config_path}",
            details={"error": str(e)},
        ) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"configuration file must contain a mapping: {config_path}",
            details={"got": type(data).__name__},
        )

    logger.debug("loaded_config", path=str(config_path))
    return data


def apply_settings(config: Mapping[str, Any], settings: Settings) -> dict[str, Any]:
    """Fill the module-level salt from the environment when the file has none."""
    merged = dict(config)
    if settings.salt and "salt" not in merged:
        merged["salt"] = settings.salt
        logger.debug("salt_from_environment")
    return merged
