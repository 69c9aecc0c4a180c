from .build_command import PodmanBuildCommandBuilder
from .command import CommandExecutor, PodmanCommand
from .exceptions import PodmanBuildConfigError, PodmanBuildError
from .overrides import BUILD_ARG_PREFIX, ULIMITS_PREFIX, merge_overrides
from .properties import system_properties
from .settings import (
    BuildSettings,
    ImageFormat,
    PullPolicy,
    apply_settings,
    create_build_command,
    load_settings,
)

__all__ = [
    "BUILD_ARG_PREFIX",
    "ULIMITS_PREFIX",
    "BuildSettings",
    "CommandExecutor",
    "ImageFormat",
    "PodmanBuildCommandBuilder",
    "PodmanBuildConfigError",
    "PodmanBuildError",
    "PodmanCommand",
    "PullPolicy",
    "apply_settings",
    "create_build_command",
    "load_settings",
    "merge_overrides",
    "system_properties",
]
