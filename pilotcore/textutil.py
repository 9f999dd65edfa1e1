"""Small text helpers used when rendering chat activity."""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Optional

_ELLIPSIS = "…"
_REASONING_MARKUP = str.maketrans("", "", "*_`")
_DEV_WORK_COMPLETE = re.compile(
    r"\[(?:<)?DEVELOPMENT_WORK_COMPLETE(?:>)?\]|<DEVELOPMENT_WORK_COMPLETE>"
)

_MICROS_PER_MS = 1_000
_MICROS_PER_SECOND = 1_000_000
_MICROS_PER_MINUTE = 60 * _MICROS_PER_SECOND


def truncate(text: str, limit: int) -> str:
    """Shorten text to at most limit characters, ending with an ellipsis if cut."""
    if limit <= 0:
        return ""
    if len(text) <= limit:
        return text
    if limit == 1:
        return _ELLIPSIS
    return text[: limit - 1] + _ELLIPSIS


def _collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def format_duration(delta: Optional[timedelta]) -> str:
    """Format an elapsed time as milliseconds, tenths of seconds or h/m/s.

    A missing or negative duration is shown as "0s".
    """
    if delta is None:
        return "0s"
    micros = delta // timedelta(microseconds=1)
    if micros < 0:
        return "0s"
    if micros < _MICROS_PER_SECOND:
        return f"{micros // _MICROS_PER_MS}ms"
    if micros < _MICROS_PER_MINUTE:
        millis = micros // _MICROS_PER_MS
        return f"{millis / 1000.0:.1f}s"

    remainder = micros % _MICROS_PER_SECOND
    if remainder + remainder < _MICROS_PER_SECOND:
        micros -= remainder
    else:
        micros += _MICROS_PER_SECOND - remainder
    total_seconds = micros // _MICROS_PER_SECOND
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{seconds}s"
    return f"{minutes}m{seconds}s"


def concise_reasoning_text(text: str) -> str:
    """Strip emphasis markup and extra whitespace from a reasoning note."""
    text = text.strip()
    if not text:
        return ""
    plain = _collapse_whitespace(text.translate(_REASONING_MARKUP))
    return truncate(plain, 140)


def extract_error_teaser(output: str) -> str:
    """Return the first non-blank line of command output, shortened."""
    for line in output.strip().split("\n"):
        line = line.strip()
        if line:
            return truncate(_collapse_whitespace(line), 180)
    return ""


def count_development_work_complete_tags(content: str) -> int:
    """Count the development-work-complete tags in a message."""
    if not content.strip():
        return 0
    return len(_DEV_WORK_COMPLETE.findall(content))


def escape_inline_code(text: str) -> str:
    """Replace backticks so the text can sit inside an inline code span."""
    return text.replace("`", "'")


def format_exit_code(code: Optional[int]) -> str:
    """Format a process exit code, or "?" when it is unknown."""
    if code is None:
        return "?"
    return str(code)