"""Merging of explicit build option mappings with ambient property overrides."""

from typing import Dict, Mapping

import structlog

BUILD_ARG_PREFIX: str = "podman.buildArg."
ULIMITS_PREFIX: str = "podman.buildUlimits."

logger = structlog.get_logger(__name__)


def properties_with_prefix(
    properties: Mapping[str, str | None], prefix: str
) -> Dict[str, str]:
    """
    Collect the properties under a reserved prefix.

    The prefix is stripped from every matching key. Entries with an empty or
    missing value are skipped, as are keys that consist of the prefix alone.
    Keys are visited in sorted order so the result doesn't depend on the
    iteration order of the backing store.
    """
    found: Dict[str, str] = {}
    for key in sorted(k for k in properties if k.startswith(prefix)):
        name: str = key[len(prefix) :]
        value: str | None = properties[key]
        if not name or not value:
            continue
        found[name] = value
    return found


def merge_overrides(
    explicit: Mapping[str, str], properties: Mapping[str, str | None], prefix: str
) -> Dict[str, str]:
    """
    Merge explicit entries with the ambient properties under ``prefix``.

    Ambient values are applied last and replace explicit values of the same
    key. Replaced keys keep their position; ambient-only keys follow the
    explicit ones.
    """
    merged: Dict[str, str] = dict(explicit)
    for name, value in properties_with_prefix(properties, prefix).items():
        if name in merged:
            logger.debug("explicit value overridden by property", prefix=prefix, key=name)
        merged[name] = value
    return merged
