"""
Error handling for CLI commands.

Maps library errors to exit codes and renders them with suggestions.
"""

import traceback
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..exceptions import (
    FormatError,
    InvalidSequence,
    ModelError,
    ObservationError,
    EmptyObservationSet,
    UnknownState,
    UnknownSymbol,
)
from ..logger import get_logger

console = Console(stderr=True)
logger = get_logger(__name__)


# Exit codes for different error types
EXIT_CODES = {
    "success": 0,
    "general_error": 1,
    "invalid_usage": 2,
    "input_error": 10,
    "model_error": 11,
    "observation_error": 12,
    "format_error": 13,
    "config_error": 14
}


class HMMKitCLIError(Exception):
    """Base exception for CLI-specific errors."""

    def __init__(self, message: str, exit_code: int = 1, suggestions: Optional[list] = None):
        self.message = message
        self.exit_code = exit_code
        self.suggestions = suggestions or []
        super().__init__(message)


class InputFileError(HMMKitCLIError):
    """Missing or unusable input files."""

    def __init__(self, message: str, suggestions: Optional[list] = None):
        super().__init__(message, EXIT_CODES["input_error"], suggestions)


class ConfigurationError(HMMKitCLIError):
    """Configuration errors."""

    def __init__(self, message: str, suggestions: Optional[list] = None):
        super().__init__(message, EXIT_CODES["config_error"], suggestions)


def exit_code_for(error: Exception) -> int:
    """Exit code for an exception raised while running a command."""
    if isinstance(error, HMMKitCLIError):
        return error.exit_code
    if isinstance(error, FormatError):
        return EXIT_CODES["format_error"]
    if isinstance(error, ModelError):
        return EXIT_CODES["model_error"]
    if isinstance(error, ObservationError):
        return EXIT_CODES["observation_error"]
    return EXIT_CODES["general_error"]


def suggestions_for(error: Exception) -> list:
    """Hints shown under an error message."""
    if isinstance(error, HMMKitCLIError):
        return error.suggestions
    if isinstance(error, UnknownSymbol):
        return ["Every symbol in the .obs file must be listed on line 3 of the model file"]
    if isinstance(error, UnknownState):
        return ["State names are listed on line 2 of the model file"]
    if isinstance(error, EmptyObservationSet):
        return ["The first line of the .obs file gives the number of sequences; it must be at least 1"]
    if isinstance(error, InvalidSequence):
        return ["Each observation sequence needs at least one symbol"]
    if isinstance(error, FormatError) and error.line is not None:
        return [f"Check line {error.line} of {error.source}"]
    return []


def format_error_message(error: Exception, operation: str, debug: bool = False) -> str:
    """Format error message with context and suggestions."""
    error_type = type(error).__name__

    message_parts = [
        f"[red]Error during {escape(operation)}:[/red]",
        f"[red]{error_type}: {escape(str(error))}[/red]"
    ]

    suggestions = suggestions_for(error)
    if suggestions:
        message_parts.append("")
        message_parts.append("[yellow]Suggestions:[/yellow]")
        for suggestion in suggestions:
            message_parts.append(f"  • {escape(suggestion)}")

    if debug:
        message_parts.append("")
        message_parts.append("[dim]Debug information:[/dim]")
        message_parts.append(f"[dim]{escape(traceback.format_exc())}[/dim]")

    return "\n".join(message_parts)


def handle_cli_error(error: Exception, operation: str, debug: bool = False) -> None:
    """Display an error and exit with the matching exit code."""
    console.print(format_error_message(error, operation, debug))
    console.print(f"\n[dim]For more help, run: hmmkit {operation.split()[0]} --help[/dim]")

    logger.error(f"CLI error in {operation}: {error}", exc_info=debug)

    raise typer.Exit(exit_code_for(error))


def validate_file_exists(path: Path, file_type: str = "file") -> Path:
    """Validate that a file exists with helpful error messages."""
    if not path.exists():
        suggestions = []

        if path.parent.exists():
            similar_files = [
                item.name for item in path.parent.iterdir()
                if item.suffix == path.suffix and item.name != path.name
            ]
            if similar_files:
                suggestions.append(f"Did you mean one of: {', '.join(sorted(similar_files)[:3])}")
        else:
            suggestions.append(f"Directory does not exist: {path.parent}")

        raise InputFileError(f"{file_type.capitalize()} not found: {path}", suggestions=suggestions)

    if path.is_dir():
        raise InputFileError(f"Expected a {file_type}, got a directory: {path}")

    return path
