"""Classification and one-line rendering of commands run by an agent."""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Optional

from pilotcore.textutil import (
    escape_inline_code,
    format_duration,
    format_exit_code,
    truncate,
)

EXPLORED = "explored"
RAN = "ran"

_SHELL_WRAPPERS = ("/bin/bash -lc ", "bash -lc ", "sh -lc ", "/bin/sh -lc ")
_SEGMENT_SEPARATORS = re.compile(r"&&|\|\||\||\n|;")
_EXPLORE_PROGRAMS = frozenset(
    {
        "ls",
        "find",
        "rg",
        "fd",
        "tree",
        "pwd",
        "cat",
        "head",
        "tail",
        "du",
        "wc",
        "stat",
        "which",
        "sed",
    }
)
_UNKNOWN_COMMAND = "(unknown command)"


def normalize_shell_wrapped_command(command: str) -> str:
    """Strip a login-shell wrapper such as ``bash -lc '...'`` and its quotes."""
    trimmed = command.strip()
    for wrapper in _SHELL_WRAPPERS:
        if trimmed.startswith(wrapper):
            inner = trimmed[len(wrapper):].strip()
            if len(inner) >= 2 and inner[0] == inner[-1] and inner[0] in "'\"":
                return inner[1:-1]
            return inner
    return trimmed


def split_command_segments(command: str) -> list[str]:
    """Split a shell command line on pipes, separators and newlines."""
    parts = (part.strip() for part in _SEGMENT_SEPARATORS.split(command))
    return [part for part in parts if part]


def _is_explore_segment(segment: str) -> bool:
    fields = segment.split()
    return not fields or fields[0] in _EXPLORE_PROGRAMS


def classify_command(command: str) -> str:
    """Return "explored" when every segment only inspects files, else "ran"."""
    segments = split_command_segments(normalize_shell_wrapped_command(command).lower())
    if not segments:
        return RAN
    if all(_is_explore_segment(segment) for segment in segments):
        return EXPLORED
    return RAN


def shorten_command(command: str, max_chars: int) -> str:
    """Unwrap, collapse whitespace in and truncate a command for display."""
    normalized = " ".join(normalize_shell_wrapped_command(command).split())
    if not normalized:
        return _UNKNOWN_COMMAND
    return truncate(normalized, max_chars)


def render_command_running(command: str) -> str:
    """Render the line shown while a command is in progress."""
    return f"Running `{escape_inline_code(command)}` ..."


def render_command_summary(
    command: str,
    duration: str,
    explored: bool,
    failed: bool,
    exit_code: Optional[int],
) -> str:
    """Render the line shown once a command has finished."""
    if explored:
        line = f"Explored for {duration}"
    else:
        line = f"Ran `{escape_inline_code(command)}` for {duration}"
    if failed:
        line += f" (failed, exit={format_exit_code(exit_code)})"
    return line


def render_command_failed(summary: str, teaser: str) -> str:
    """Append an error teaser line to a failed command's summary."""
    if not teaser.strip():
        return summary
    return summary + "\nError: " + teaser


def render_explore_sequence_running(commands: int) -> str:
    """Render the line shown while a run of exploring commands is in progress."""
    if commands <= 1:
        return "Exploring ..."
    return f"Exploring ({commands} commands) ..."


def render_explore_sequence_summary(commands: int, duration: timedelta) -> str:
    """Render the summary of a finished run of exploring commands."""
    elapsed = format_duration(duration)
    if commands <= 1:
        return f"Explored for {elapsed}"
    return f"Explored {commands} commands for {elapsed}"