import click

from podman_build.utils.logging import (
    configure_development_mode_logging,
    configure_logging_early,
)

from . import _common, build


@click.group()
@click.version_option(
    version=_common.VERSION, package_name="podman-build", prog_name="podman-build"
)
@click.option(
    "--debug",
    is_flag=True,
    envvar="PODMAN_BUILD_DEBUG",
    help="Show debug logs and stack traces",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool):
    """
    Construct podman build invocations.
    """
    configure_logging_early()
    configure_development_mode_logging(debug=debug)
    ctx.obj = _common.Context.default(debug=debug)


cli.add_command(build.args)
