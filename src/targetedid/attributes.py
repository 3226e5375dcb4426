"""
Attribute resolution against the request state.

The request state is a mapping whose values are strings, sequences of
strings or (one level down) further mappings, e.g.::

    {
        "Attributes": {"uid": ["alice"], "schacHomeOrganization": ["example.org"]},
        "saml:RequesterID": ["https://sp.example.org/shibboleth"],
        "core:SP": "https://sp.example.org/shibboleth",
    }
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from targetedid.events import DerivationObserver, notify
from targetedid.models import PathSpec


def lookup(state: Mapping[str, Any], path: PathSpec) -> str | None:
    """
    Look up a single path in the request state.

    Multi-valued entries yield their first value.

    Returns:
        The value as a string, or None if it is absent or empty
    """
    if path.key not in state:
        return None

    data = state[path.key]
    if path.subkey is not None:
        if not isinstance(data, Mapping) or path.subkey not in data:
            return None
        data = data[path.subkey]

    if isinstance(data, (list, tuple)):
        if not data:
            return None
        data = data[0]

    if data is None or isinstance(data, Mapping):
        return None

    value = str(data)
    return value or None


def resolve_value(
    state: Mapping[str, Any],
    paths: Sequence[PathSpec],
    missing_message: str | None = None,
    observer: DerivationObserver | None = None,
) -> str:
    """
    Resolve the first candidate path that yields a value.

    Candidates are tried in order and evaluation stops at the first match.

    Args:
        state: Request state
        paths: Candidate paths, in order of preference
        missing_message: Reported to the observer when nothing resolves
        observer: Receives the missing-value report; its failures are logged, not raised

    Returns:
        The resolved value, or "" if no candidate yields one
    """
    for path in paths:
        value = lookup(state, path)
        if value is not None:
            return value

    if missing_message and observer is not None:
        notify(observer, "attribute_missing", missing_message, paths)
    return ""
