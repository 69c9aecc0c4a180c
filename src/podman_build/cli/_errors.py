"""Error handling utilities for the CLI."""

from __future__ import annotations

import sys
import traceback

import click

from podman_build.exceptions import PodmanBuildConfigError, PodmanBuildError

from ._common import Context


def handle_build_error(e: PodmanBuildError, ctx: Context) -> None:
    """
    Report a podman-build error and abort the command.

    Args:
        e: The error raised while resolving settings
        ctx: The CLI context
    """
    if ctx.debug:
        click.echo("Stack trace:", err=True)
        traceback.print_exception(type(e), e, e.__traceback__, file=sys.stderr)
    else:
        click.echo(
            "For a stack trace, run with --debug or set PODMAN_BUILD_DEBUG=1",
            err=True,
        )

    if isinstance(e, PodmanBuildConfigError):
        raise click.ClickException(f"Configuration error: {e}")
    raise click.ClickException(str(e))
