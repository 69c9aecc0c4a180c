"""Ambient key/value properties used to override build options.

Properties are a process-wide snapshot: the environment, overlaid with
explicit ``KEY=VALUE`` definitions (typically ``-D`` flags on the command
line). Keys are free-form, so dotted names such as
``podman.buildArg.VERSION`` are allowed.
"""

import os
from typing import Dict, Iterable, Mapping, Tuple

from .exceptions import PodmanBuildConfigError


def parse_define(definition: str) -> Tuple[str, str]:
    """
    Parse a single ``KEY=VALUE`` definition.

    The definition is split on the first ``=``. A definition without ``=``
    defines the key with an empty value.

    Raises:
        PodmanBuildConfigError: If the key is empty.
    """
    key, _, value = definition.partition("=")
    key = key.strip()
    if not key:
        raise PodmanBuildConfigError(
            f"Invalid property definition '{definition}': expected KEY=VALUE"
        )
    return key, value


def parse_defines(definitions: Iterable[str]) -> Dict[str, str]:
    """Parse definitions in order; a later definition of a key wins."""
    properties: Dict[str, str] = {}
    for definition in definitions:
        key, value = parse_define(definition)
        properties[key] = value
    return properties


def system_properties(
    environ: Mapping[str, str] | None = None,
    defines: Iterable[str] = (),
) -> Dict[str, str]:
    """
    Snapshot the process-wide property store.

    Args:
        environ: Environment to read, defaults to ``os.environ``.
        defines: ``KEY=VALUE`` definitions layered over the environment.

    Returns:
        A new dict; mutating it doesn't affect the process.
    """
    properties: Dict[str, str] = dict(os.environ if environ is None else environ)
    properties.update(parse_defines(defines))
    return properties
