import os
from enum import Enum
from typing import List, Mapping

import structlog

from .command import PodmanCommand
from .overrides import BUILD_ARG_PREFIX, ULIMITS_PREFIX, merge_overrides
from .properties import system_properties

SUBCOMMAND: str = "build"

SQUASH_FLAG: str = "--squash"
SQUASH_ALL_FLAG: str = "--squash-all"
LAYERS_FLAG: str = "--layers"
FORMAT_FLAG: str = "--format"
CONTAINERFILE_FLAG: str = "--file"
PULL_POLICY_FLAG: str = "--pull"
NO_CACHE_FLAG: str = "--no-cache"
BUILD_ARG_FLAG: str = "--build-arg"
PLATFORM_FLAG: str = "--platform"
TARGET_STAGE_FLAG: str = "--target"
ULIMIT_FLAG: str = "--ulimit"

logger = structlog.get_logger(__name__)


class PodmanBuildCommandBuilder:
    """
    Accumulates the options of a single ``podman build`` invocation.

    Every setter appends its tokens immediately, so the order of the
    resulting command follows the order of the calls. No value is validated
    here; podman itself rejects malformed input.

    Example:
        >>> command = (
        ...     PodmanBuildCommandBuilder(properties={})
        ...     .set_squash()
        ...     .set_format("docker")
        ...     .set_no_cache(True)
        ...     .add_build_args({"VERSION": "1.0"})
        ...     .set_context_dir("/src")
        ...     .build()
        ... )
        >>> list(command.tokens)
        ['build', '--squash', '--format', 'docker', '--no-cache', 'true', '--build-arg', 'VERSION=1.0', '/src']
    """

    def __init__(self, properties: Mapping[str, str] | None = None):
        """
        Args:
            properties: Ambient properties consulted by ``add_build_args`` and
                ``add_ulimits_args``. When None, the process-wide store is
                read each time overrides are resolved.
        """
        self._properties: Mapping[str, str] | None = properties
        self._options: List[str] = []

    def set_squash(self) -> "PodmanBuildCommandBuilder":
        """Squash all newly built layers into a single layer."""
        return self._add_option(SQUASH_FLAG)

    def set_squash_all(self) -> "PodmanBuildCommandBuilder":
        """Squash all layers, including those of the base image."""
        return self._add_option(SQUASH_ALL_FLAG)

    def set_layers(self, layers: bool) -> "PodmanBuildCommandBuilder":
        return self._add_option(LAYERS_FLAG, _bool_value(layers))

    def set_format(self, format: str) -> "PodmanBuildCommandBuilder":
        """Select the image manifest format, e.g. "oci" or "docker"."""
        return self._add_option(FORMAT_FLAG, _option_value(format))

    def set_context_dir(self, context_dir: str) -> "PodmanBuildCommandBuilder":
        """
        Append the build context directory as a positional argument.

        Should be the last call before ``build()``.
        """
        return self._add_option(os.fspath(context_dir))

    def set_container_file(
        self, container_file: str | os.PathLike
    ) -> "PodmanBuildCommandBuilder":
        return self._add_option(CONTAINERFILE_FLAG, os.fspath(container_file))

    def set_pull_policy(self, pull_policy: str) -> "PodmanBuildCommandBuilder":
        return self._add_option(PULL_POLICY_FLAG, _option_value(pull_policy))

    def set_no_cache(self, no_cache: bool) -> "PodmanBuildCommandBuilder":
        return self._add_option(NO_CACHE_FLAG, _bool_value(no_cache))

    def set_platform(self, platform: str) -> "PodmanBuildCommandBuilder":
        """Target OS/architecture, e.g. "linux/arm64"."""
        return self._add_option(PLATFORM_FLAG, platform)

    def set_target_stage(self, target_stage: str) -> "PodmanBuildCommandBuilder":
        """Name of the stage to build in a multi-stage Containerfile."""
        return self._add_option(TARGET_STAGE_FLAG, target_stage)

    def add_build_args(self, args: Mapping[str, str]) -> "PodmanBuildCommandBuilder":
        """
        Add one ``--build-arg KEY=VALUE`` pair per build argument.

        Properties named ``podman.buildArg.<KEY>`` override entries in ``args``.
        """
        return self._add_key_value_options(BUILD_ARG_FLAG, args, BUILD_ARG_PREFIX)

    def add_ulimits_args(
        self, ulimits: Mapping[str, str]
    ) -> "PodmanBuildCommandBuilder":
        """
        Add one ``--ulimit KEY=VALUE`` pair per resource limit.

        Properties named ``podman.buildUlimits.<KEY>`` override entries in ``ulimits``.
        """
        return self._add_key_value_options(ULIMIT_FLAG, ulimits, ULIMITS_PREFIX)

    def build(self) -> PodmanCommand:
        """Returns the command built so far. Can be called repeatedly."""
        command = PodmanCommand(subcommand=SUBCOMMAND, options=tuple(self._options))
        logger.debug("built podman command", command=str(command))
        return command

    def _add_key_value_options(
        self, flag: str, explicit: Mapping[str, str], prefix: str
    ) -> "PodmanBuildCommandBuilder":
        merged = merge_overrides(explicit, self._resolve_properties(), prefix)
        for key, value in merged.items():
            self._add_option(flag, f"{key}={value}")
        return self

    def _resolve_properties(self) -> Mapping[str, str]:
        if self._properties is None:
            return system_properties()
        return self._properties

    def _add_option(
        self, name: str, value: str | None = None
    ) -> "PodmanBuildCommandBuilder":
        self._options.append(name)
        if value is not None:
            self._options.append(value)
        return self


def _bool_value(value: bool) -> str:
    return "true" if value else "false"


def _option_value(value: str | Enum) -> str:
    return value.value if isinstance(value, Enum) else value
