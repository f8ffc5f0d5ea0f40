"""Error handling utilities for iconctl."""

from __future__ import annotations

from typing import Any


def format_error_message(operation: str, error: Exception, context: dict[str, Any] | None = None) -> str:
    """Format a user-friendly error message based on the exception type and context."""
    error_str = str(error)
    context = context or {}
    path = context.get("path", "path")

    # Permission problems reading a manifest or scanning a directory
    if isinstance(error, PermissionError) or "permission denied" in error_str.lower():
        return (
            f"Permission denied while trying to {operation} at '{path}'. "
            f"Check that the directory and its Contents.json are readable. "
            f"Original error: {error_str}"
        )

    if isinstance(error, (FileNotFoundError, NotADirectoryError)) or "no such file" in error_str.lower():
        return (
            f"Path '{path}' not found or not a directory. "
            f"Original error: {error_str}"
        )

    if isinstance(error, OSError):
        return (
            f"File system error while trying to {operation}. "
            f"Original error: {error_str}"
        )

    # Generic error with helpful context
    return f"Failed to {operation}: {error_str}"


def suggest_troubleshooting_steps(operation: str, error: Exception) -> list[str]:
    """Suggest troubleshooting steps based on the operation and error."""
    error_str = str(error).lower()
    suggestions = []

    if isinstance(error, PermissionError) or "permission denied" in error_str:
        suggestions.extend([
            "Check file permissions: ls -l <icon set>/Contents.json",
            "Make sure the asset catalog is not locked by another process",
        ])

    elif isinstance(error, (FileNotFoundError, NotADirectoryError)) or "no such file" in error_str:
        if "discover" in operation.lower():
            suggestions.extend([
                "Pass the project root with --path",
                "Set search_path in your config file",
            ])
        else:
            suggestions.extend([
                "Check the icon set path spelling",
                "Icon sets are directories ending in .appiconset",
            ])

    if not suggestions:
        suggestions.extend([
            "Check the logs with -v/--verbose flag for more details",
            "Verify your configuration file is correct",
        ])

    return suggestions


def format_config_error(error: Exception) -> str:
    """Format configuration-related error messages."""
    error_str = str(error)

    if "iconctl_config path not found" in error_str.lower():
        return (
            f"{error_str}\n"
            "Either fix ICONCTL_CONFIG or unset it to fall back to\n"
            "~/.config/iconctl/config.yaml (optional)."
        )

    if "invalid" in error_str.lower():
        return (
            f"Configuration error: {error_str}\n"
            "Check your config file; see the README for the expected keys."
        )

    return f"Configuration error: {error_str}"
