"""Structured build settings and their translation into a podman build command."""

from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Dict, Mapping

import structlog
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError
from tomlkit import parse
from tomlkit.exceptions import TOMLKitError

from .build_command import PodmanBuildCommandBuilder
from .command import PodmanCommand
from .exceptions import PodmanBuildConfigError

SETTINGS_FILE_NAME: str = "podman-build.toml"

logger = structlog.get_logger(__name__)


class ImageFormat(str, Enum):
    """Manifest and metadata format of the built image."""

    OCI = "oci"
    DOCKER = "docker"


class PullPolicy(str, Enum):
    """When podman pulls the base image before building."""

    ALWAYS = "always"
    MISSING = "missing"
    NEVER = "never"
    NEWER = "newer"


def _stringify_values(v: Any) -> Any:
    """Convert TOML scalars such as ``nofile = 1024`` into strings."""
    if not isinstance(v, Mapping):
        return v
    return {
        key: _bool_str(value) if isinstance(value, bool) else str(value)
        for key, value in v.items()
    }


def _bool_str(value: bool) -> str:
    return "true" if value else "false"


StringMap = Annotated[Dict[str, str], BeforeValidator(_stringify_values)]


class BuildSettings(BaseModel):
    """
    Settings of a single ``podman build`` invocation.

    Optional settings left as None produce no tokens. ``build_args`` and
    ``ulimits`` are always merged with ambient property overrides, so they
    can produce tokens even when empty.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    squash: bool = False
    squash_all: bool = Field(default=False, alias="squash-all")
    layers: bool | None = None
    format: ImageFormat | None = None
    container_file: Path | None = Field(default=None, alias="container-file")
    pull_policy: PullPolicy | None = Field(default=None, alias="pull-policy")
    no_cache: bool | None = Field(default=None, alias="no-cache")
    platform: str | None = None
    target_stage: str | None = Field(default=None, alias="target-stage")
    build_args: StringMap = Field(default_factory=dict, alias="build-args")
    ulimits: StringMap = Field(default_factory=dict)
    context_dir: str = Field(default=".", alias="context-dir")

    def merged_with(self, overrides: Mapping[str, Any]) -> "BuildSettings":
        """
        Returns a copy with ``overrides`` applied on top of these settings.

        Keys are field names. ``build_args`` and ``ulimits`` are merged key by
        key rather than replaced.
        """
        data: Dict[str, Any] = self.model_dump()
        for key, value in overrides.items():
            if key in ("build_args", "ulimits"):
                data[key] = {**data[key], **value}
            else:
                data[key] = value
        try:
            return BuildSettings.model_validate(data)
        except ValidationError as e:
            raise PodmanBuildConfigError(_format_validation_error(e)) from e


def apply_settings(
    builder: PodmanBuildCommandBuilder, settings: BuildSettings
) -> PodmanBuildCommandBuilder:
    """Apply settings to the builder in canonical order, context directory last."""
    if settings.squash:
        builder.set_squash()
    if settings.squash_all:
        builder.set_squash_all()
    if settings.layers is not None:
        builder.set_layers(settings.layers)
    if settings.format is not None:
        builder.set_format(settings.format)
    if settings.container_file is not None:
        builder.set_container_file(settings.container_file)
    if settings.pull_policy is not None:
        builder.set_pull_policy(settings.pull_policy)
    if settings.no_cache is not None:
        builder.set_no_cache(settings.no_cache)
    if settings.platform is not None:
        builder.set_platform(settings.platform)
    if settings.target_stage is not None:
        builder.set_target_stage(settings.target_stage)
    builder.add_build_args(settings.build_args)
    builder.add_ulimits_args(settings.ulimits)
    return builder.set_context_dir(settings.context_dir)


def create_build_command(
    settings: BuildSettings, properties: Mapping[str, str] | None = None
) -> PodmanCommand:
    return apply_settings(PodmanBuildCommandBuilder(properties), settings).build()


def load_settings(path: str | Path) -> BuildSettings:
    """
    Load build settings from the ``[build]`` table of a TOML file.

    Example file:

        [build]
        squash = true
        format = "docker"
        context-dir = "/src"

        [build.build-args]
        VERSION = "1.0"

    Raises:
        PodmanBuildConfigError: If the file can't be read, isn't valid TOML
            or contains invalid settings.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = parse(f.read()).unwrap()
    except OSError as e:
        raise PodmanBuildConfigError(
            f"Cannot read settings file: {e.strerror}", source=str(path)
        ) from e
    except UnicodeDecodeError as e:
        raise PodmanBuildConfigError(
            f"Settings file is not valid UTF-8: {e.reason}", source=str(path)
        ) from e
    except TOMLKitError as e:
        raise PodmanBuildConfigError(
            f"Invalid TOML: {e}", source=str(path)
        ) from e

    build_table: Any = document.get("build", {})
    if not isinstance(build_table, dict):
        raise PodmanBuildConfigError(
            "'build' must be a table", source=str(path)
        )

    try:
        settings = BuildSettings.model_validate(build_table)
    except ValidationError as e:
        raise PodmanBuildConfigError(
            _format_validation_error(e), source=str(path)
        ) from e

    logger.debug("loaded build settings", path=str(path))
    return settings


def find_settings_file(start: str | Path | None = None) -> Path | None:
    """Search ``podman-build.toml`` in ``start`` (default: cwd) and its parents."""
    current = Path.cwd() if start is None else Path(start).resolve()

    for parent in [current] + list(current.parents):
        candidate = parent / SETTINGS_FILE_NAME
        if candidate.is_file():
            return candidate

    return None


def _format_validation_error(e: ValidationError) -> str:
    problems = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in e.errors()
    ]
    return "Invalid build settings: " + "; ".join(problems)
