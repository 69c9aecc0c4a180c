import importlib.metadata
from dataclasses import dataclass

import click

try:
    VERSION = importlib.metadata.version("podman-build")
except importlib.metadata.PackageNotFoundError:
    VERSION = "unknown"


@dataclass
class Context:
    """Class for CLI context."""

    debug: bool = False

    @classmethod
    def default(cls, debug: bool = False) -> "Context":
        return cls(debug=debug)


"""Pass the Context object to the click command"""
pass_context = click.make_pass_decorator(Context, ensure=True)
