"""
Argument routing for the frumle command line.

``frumle [directory]`` analyzes a directory without naming a command, so
the raw arguments are rewritten to name ``analyze`` explicitly before they
reach the typer application.
"""

from typing import Sequence

DEFAULT_COMMAND = "analyze"

COMMANDS: frozenset[str] = frozenset({"analyze", "add-key", "login", "status"})

# Options handled by the application itself rather than a command
GLOBAL_OPTIONS: frozenset[str] = frozenset({"--help", "-h", "--version", "-v"})


def resolve_command_args(args: Sequence[str]) -> list[str]:
    """
    Rewrite raw CLI arguments so a command is always named.

    Examples:
        >>> resolve_command_args([])
        ['analyze']
        >>> resolve_command_args(["./src", "--ignore", "tests"])
        ['analyze', './src', '--ignore', 'tests']
        >>> resolve_command_args(["help"])
        ['--help']
    """
    args = list(args)
    if not args:
        return [DEFAULT_COMMAND]

    first = args[0]
    if first == "help":
        return ["--help", *args[1:]]
    if first in COMMANDS or first in GLOBAL_OPTIONS:
        return args
    return [DEFAULT_COMMAND, *args]
