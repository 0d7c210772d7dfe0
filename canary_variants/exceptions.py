"""Exceptions related to canary-variants."""

__all__ = [
    "CanaryException",
    "InputException",
    "ManifestNotFoundError",
    "FetchParseError",
    "CommandException",
    "KubectlException",
]


class CanaryException(Exception):
    """Generic base exception used for this library."""


class InputException(CanaryException):
    """Raised when the input files or objects are not formatted as expected."""


class ManifestNotFoundError(InputException):
    """Raised when no manifest files could be resolved from the input paths."""

    def __init__(self, paths: list[str]) -> None:
        super().__init__(f"No manifest files found in paths: {paths}")
        self.paths = paths


class FetchParseError(InputException):
    """Raised when a resource returned by the cluster can't be parsed."""

    def __init__(self, kind: str, name: str, message: str) -> None:
        super().__init__(f"Unable to parse {kind}/{name}: {message}")
        self.kind = kind
        self.name = name


class CommandException(CanaryException):
    """Raised when there is a failure running a subcommand."""


class KubectlException(CommandException):
    """Raised when there is a failure running a kubectl command."""
