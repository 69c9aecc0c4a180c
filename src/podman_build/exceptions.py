"""Exception hierarchy for podman build command construction."""

from __future__ import annotations


class PodmanBuildError(Exception):
    """Base exception for all podman-build errors with optional source tracking."""

    def __init__(self, message: str, source: str | None = None) -> None:
        """
        Initialize PodmanBuildError.

        Args:
            message: Human-readable error message
            source: Optional origin of the error, e.g. a settings file path
        """
        self.message = message
        self.source = source
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        if self.source:
            parts.append(f"(source: {self.source})")
        return " ".join(parts)


class PodmanBuildConfigError(PodmanBuildError):
    """Invalid or unreadable build configuration."""

    pass
