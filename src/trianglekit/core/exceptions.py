"""
Custom exceptions for trianglekit.

All trianglekit exceptions inherit from TriangleKitError for easy catching.
Each error carries the stage or artifact it originated from.
"""

from typing import Any


class TriangleKitError(Exception):
    """Base exception for all trianglekit errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(TriangleKitError):
    """Raised when configuration is invalid or missing."""

    pass


class WorkspaceError(TriangleKitError):
    """Raised when the scratch workspace cannot be allocated."""

    pass


class EncodeError(TriangleKitError):
    """Raised when a model cannot be encoded or the input file cannot be written."""

    def __init__(
        self,
        message: str,
        artifact: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.artifact = artifact


class EngineError(TriangleKitError):
    """Raised when the triangle engine cannot be launched or exits non-zero."""

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.exit_code = exit_code


class EngineTimeoutError(EngineError):
    """Raised when the engine exceeds the configured timeout."""

    pass


class DecodeError(TriangleKitError):
    """Raised when an output file is malformed."""

    def __init__(
        self,
        message: str,
        artifact: str | None = None,
        line: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.artifact = artifact
        self.line = line

    def __str__(self) -> str:
        where = ""
        if self.artifact is not None:
            where = f"{self.artifact}"
            if self.line is not None:
                where += f":{self.line}"
            where = f" ({where})"
        text = f"{self.message}{where}"
        if self.details:
            return f"{text} - Details: {self.details}"
        return text


class DecodeIndexError(DecodeError):
    """Raised when a declared 1-based index falls outside the declared size."""

    pass
