"""Exception hierarchy for nativeforge.

Every failure the tool can report derives from :class:`ForgeError` and carries
the process exit status that ``main`` should return for it.
"""

from __future__ import annotations


class ForgeError(Exception):
    """Base class for all errors reported to the user."""

    exit_code: int = 1


class UsageError(ForgeError):
    """Raised when the command line cannot be turned into a project request."""

    exit_code = 2


class InputValidationError(ForgeError):
    """Raised when a project name, language, or output directory is rejected."""


class MissingToolError(ForgeError):
    """Raised when an executable required by the chosen language is absent."""

    def __init__(self, tool: str, language: str = "") -> None:
        self.tool = tool
        self.language = language
        detail = f" (required for {language} projects)" if language else ""
        super().__init__(
            f"Required tool '{tool}' was not found on PATH{detail}. "
            "Install it and try again."
        )


class ScaffoldError(ForgeError):
    """Raised when a directory or file of the project cannot be created."""


class VCSError(ForgeError):
    """Raised when a git command exits with a non-zero status."""

    def __init__(self, message: str, command: str = "", stderr: str = "") -> None:
        self.command = command
        self.stderr = stderr
        super().__init__(message)


class BuildError(ForgeError):
    """Raised when the initial build exits with a non-zero status."""

    def __init__(self, returncode: int, output: str = "") -> None:
        self.returncode = returncode
        self.output = output
        super().__init__(f"Build failed with exit code {returncode}")


class AbortRequested(ForgeError):
    """Raised when the user chooses to stop before anything is created."""

    exit_code = 0
