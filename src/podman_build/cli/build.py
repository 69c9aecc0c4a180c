import json
import shlex
from pathlib import Path
from typing import Any, Dict, Tuple

import click
from click.core import ParameterSource

from podman_build.command import PODMAN_BINARY
from podman_build.exceptions import PodmanBuildError
from podman_build.properties import parse_defines, system_properties
from podman_build.settings import (
    BuildSettings,
    ImageFormat,
    PullPolicy,
    create_build_command,
    find_settings_file,
    load_settings,
)

from ._common import Context, pass_context
from ._errors import handle_build_error

# CLI parameter name -> settings field name, for single-valued settings.
_SETTINGS_PARAMS: Dict[str, str] = {
    "squash": "squash",
    "squash_all": "squash_all",
    "layers": "layers",
    "image_format": "format",
    "container_file": "container_file",
    "pull_policy": "pull_policy",
    "no_cache": "no_cache",
    "platform": "platform",
    "target_stage": "target_stage",
    "context_dir": "context_dir",
}


@click.command(
    epilog="""
\b
Settings are read from the [build] table of podman-build.toml, searched in
the current directory and its parents, unless --config is given. Options on
the command line override the file.
\b
Properties named podman.buildArg.<NAME> and podman.buildUlimits.<NAME>,
from the environment or -D, override build arguments and ulimits.
"""
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="PODMAN_BUILD_CONFIG",
    help="Settings file to read instead of podman-build.toml",
)
@click.option("--squash", is_flag=True, help="Squash newly built layers into one")
@click.option("--squash-all", is_flag=True, help="Squash all layers into one")
@click.option("--layers/--no-layers", help="Cache intermediate layers")
@click.option(
    "--format",
    "image_format",
    type=click.Choice([f.value for f in ImageFormat]),
    help="Manifest format of the built image",
)
@click.option(
    "--file",
    "-f",
    "container_file",
    type=click.Path(path_type=Path),
    help="Containerfile to build",
)
@click.option(
    "--pull",
    "pull_policy",
    type=click.Choice([p.value for p in PullPolicy]),
    help="When to pull the base image",
)
@click.option(
    "--no-cache/--cache", help="Don't reuse cached intermediate layers"
)
@click.option("--platform", help="Target platform, e.g. linux/arm64")
@click.option("--target", "target_stage", help="Stage of a multi-stage build to build")
@click.option(
    "--build-arg",
    "build_args",
    multiple=True,
    metavar="KEY=VALUE",
    help="Build argument, can be repeated",
)
@click.option(
    "--ulimit",
    "ulimits",
    multiple=True,
    metavar="KEY=VALUE",
    help="Resource limit for build containers, can be repeated",
)
@click.option(
    "--define",
    "-D",
    "defines",
    multiple=True,
    metavar="KEY=VALUE",
    help="Property overriding the environment, can be repeated",
)
@click.option(
    "--json",
    "use_json",
    "-j",
    is_flag=True,
    help="Print the argument vector as JSON-encoded data",
)
@click.option(
    "--binary", default=PODMAN_BINARY, show_default=True, help="Name of the podman binary"
)
@click.argument("context_dir", required=False)
@pass_context
def args(
    ctx: Context,
    config_path: Path | None,
    build_args: Tuple[str, ...],
    ulimits: Tuple[str, ...],
    defines: Tuple[str, ...],
    use_json: bool,
    binary: str,
    **options: Any,
):
    """
    Print the podman build invocation for the resolved settings.
    """
    click_ctx = click.get_current_context()
    try:
        settings = _resolve_settings(config_path)
        overrides: Dict[str, Any] = {
            field: options[param]
            for param, field in _SETTINGS_PARAMS.items()
            if _given(click_ctx, param)
        }
        if build_args:
            overrides["build_args"] = parse_defines(build_args)
        if ulimits:
            overrides["ulimits"] = parse_defines(ulimits)
        settings = settings.merged_with(overrides)

        command = create_build_command(settings, system_properties(defines=defines))
    except PodmanBuildError as e:
        handle_build_error(e, ctx)
        return

    if use_json:
        click.echo(json.dumps({"argv": command.argv(binary)}))
    else:
        click.echo(shlex.join(command.argv(binary)))


def _resolve_settings(config_path: Path | None) -> BuildSettings:
    path = config_path if config_path is not None else find_settings_file()
    if path is None:
        return BuildSettings()
    return load_settings(path)


def _given(click_ctx: click.Context, param: str) -> bool:
    return click_ctx.get_parameter_source(param) == ParameterSource.COMMANDLINE
