"""Finalized podman command values."""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import List, Protocol, Tuple

PODMAN_BINARY: str = "podman"


@dataclass(frozen=True)
class PodmanCommand:
    """
    Immutable podman invocation produced by a command builder.

    Attributes:
        subcommand: The podman subcommand, e.g. "build".
        options: Flags, flag values and positional arguments in the order
            they must appear after the subcommand.

    Example:
        >>> command = PodmanCommand(subcommand="build", options=("--squash", "/src"))
        >>> command.tokens
        ('build', '--squash', '/src')
        >>> command.argv()
        ['podman', 'build', '--squash', '/src']
    """

    subcommand: str
    options: Tuple[str, ...] = ()

    @property
    def tokens(self) -> Tuple[str, ...]:
        """The subcommand followed by all of its options."""
        return (self.subcommand, *self.options)

    def argv(self, binary: str = PODMAN_BINARY) -> List[str]:
        """Full argument vector including the binary name."""
        return [binary, *self.tokens]

    def __str__(self) -> str:
        return shlex.join(self.argv())


class CommandExecutor(Protocol):
    """
    Protocol for collaborators that run a finalized podman command.

    Nothing in this package implements it; it describes what callers hand
    a built command to.
    """

    def execute(self, command: PodmanCommand) -> List[str]:
        """
        Run the command and return its raw output lines.

        Process spawning, output capture and exit status interpretation are
        entirely the executor's responsibility.
        """
        ...
