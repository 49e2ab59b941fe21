#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the md2view library.

This module defines the exception classes raised while turning markdown
event streams into view trees.

Exception Hierarchy
-------------------
- Md2ViewError (base exception)

  - ValidationError (option validation)

  - RenderingError (view construction failures)
    - StructuralMismatchError (malformed event stream, fatal)

  - DependencyError (missing/incompatible packages)

Unregistered custom components and missing link overrides are not errors:
the renderer falls back to an empty node or default rendering.

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from md2view.events import SourceRange


class Md2ViewError(Exception):
    """Base exception class for all md2view-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(Md2ViewError):
    """Exception raised for invalid options or parameters.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class RenderingError(Md2ViewError):
    """Exception raised when building the view tree fails.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    rendering_stage : str, optional
        The stage of rendering where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the rendering failure

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage


class StructuralMismatchError(RenderingError):
    """Exception raised when the event stream is not well nested.

    Raised for an ``End`` event with no open ``Start``, an ``End`` whose kind
    differs from the innermost open ``Start``, or open constructs left over
    when the stream is exhausted. The whole render is aborted; no partial
    tree is returned.

    Parameters
    ----------
    expected : str or None
        Kind of the innermost open construct, ``None`` when nothing was open
    found : str or None
        Kind carried by the offending event, ``None`` at end of stream
    position : SourceRange, optional
        Range of the offending event
    message : str, optional
        Custom error message. If not provided, one is generated

    """

    def __init__(
        self,
        expected: str | None,
        found: str | None,
        position: SourceRange | None = None,
        message: str | None = None,
    ):
        """Initialize the mismatch error."""
        if message is None:
            if expected is None:
                message = f"End({found}) has no matching Start"
            elif found is None:
                message = f"Start({expected}) was never closed"
            else:
                message = f"End({found}) does not match open Start({expected})"
            if position is not None:
                message += f" at {position.start}..{position.end}"
        super().__init__(message, rendering_stage="traversal")
        self.expected = expected
        self.found = found
        self.position = position


class DependencyError(Md2ViewError):
    """Exception raised when required dependencies are not available.

    Parameters
    ----------
    feature_name : str
        Name of the feature requiring dependencies
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    version_mismatches : list[tuple[str, str, str]], optional
        List of (package_name, required_version, installed_version) tuples
    install_command : str, optional
        Suggested pip install command to resolve the issue
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    original_import_error : ImportError, optional
        The import failure that triggered this error

    """

    def __init__(
        self,
        feature_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        install_command: str = "",
        message: str | None = None,
        original_import_error: ImportError | None = None,
    ):
        """Initialize the dependency error with package details."""
        version_mismatches = version_mismatches or []
        self.original_import_error = original_import_error
        if message is None:
            message_parts = []

            if missing_packages:
                pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
                message_parts.append(f"{feature_name} requires the following packages: {pkg_list}")

            if version_mismatches:
                mismatch_str = ", ".join(
                    f"'{name}' (requires {required}, but {installed} is installed)"
                    for name, required, installed in version_mismatches
                )
                message_parts.append(f"{feature_name} has version mismatches: {mismatch_str}")

            message = "\n".join(message_parts)

            if install_command:
                message += f"\nInstall with: {install_command}"
            else:
                all_packages = missing_packages + [(name, req) for name, req, _ in version_mismatches]
                if all_packages:
                    packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in all_packages)
                    message += f"\nInstall with: pip install --upgrade {packages_str}"

        super().__init__(message)
        self.feature_name = feature_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches
        self.install_command = install_command


__all__ = [
    "Md2ViewError",
    "ValidationError",
    "RenderingError",
    "StructuralMismatchError",
    "DependencyError",
]
