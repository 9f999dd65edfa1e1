"""Rendering of chat messages into prefixed, styled transcript lines."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from pilotcore.markdown import BlockKind, InlineStyles, parse_markdown_blocks, render_inline

StyleFn = Optional[Callable[[str], str]]


class Role(str, Enum):
    """Who a transcript message comes from."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass
class Message:
    """One transcript message."""

    role: str
    content: str = ""
    streaming: bool = False


@dataclass(frozen=True)
class RenderedMessage:
    """A message's styled prefix and rendered body."""

    prefix: str
    body: str


@dataclass(frozen=True)
class Styles:
    """Styling callbacks; any callback left as None renders text plainly."""

    user_prefix: StyleFn = None
    agent_prefix: StyleFn = None
    agent_meta: StyleFn = None
    system_prefix: StyleFn = None
    heading: StyleFn = None
    list_item: StyleFn = None
    quote: StyleFn = None
    link: Optional[Callable[[str, str], str]] = None
    inline_code: StyleFn = None
    bold: StyleFn = None
    italic: StyleFn = None
    strike: StyleFn = None
    code_block: Optional[Callable[[str, str], str]] = None
    streaming_placeholder: Optional[Callable[[], str]] = None
    streaming_suffix: Optional[Callable[[], str]] = None

    def inline(self) -> InlineStyles:
        return InlineStyles(
            code=self.inline_code,
            link=self.link,
            bold=self.bold,
            italic=self.italic,
            strike=self.strike,
        )


_SGR_ANSI = re.compile(r"\x1b\[[0-9;]*m")
_RUNNING_SUMMARY = re.compile(r"Running .+ \.\.\.\Z")
_COMPLETED_SUMMARY = re.compile(r"Ran .+ for .+")
_EXPLORED_SUMMARY = re.compile(r"Explored(?: [0-9]+ commands)? for .+")
_SECTION_START = re.compile(r"<([A-Z0-9_]+)_START>\Z")
_SECTION_END = re.compile(r"<([A-Z0-9_]+)_END>\Z")
_DEV_WORK_COMPLETE = re.compile(r"\[(?:<)?DEVELOPMENT_WORK_COMPLETE(?:>)?\]\Z")
_DEV_WORK_COMPLETE_ANGLE = re.compile(r"<DEVELOPMENT_WORK_COMPLETE>\Z")

_META_PREFIXES = (
    "[agent-thought]",
    "Running command:",
    "Command completed",
    "Command failed",
    "Command output:",
)


def _apply(fn: StyleFn, text: str) -> str:
    return fn(text) if fn is not None else text


def format_message(message: Message, styles: Styles) -> RenderedMessage:
    """Render one message's prefix and markdown body."""
    if message.role == Role.USER:
        prefix = _apply(styles.user_prefix, "[you]")
    elif message.role == Role.ASSISTANT:
        prefix = _apply(styles.agent_prefix, "[agent]")
    else:
        prefix = _apply(styles.system_prefix, "[pilot]")

    inline = styles.inline()
    lines: list[str] = []
    for block in parse_markdown_blocks(message.content, message.streaming):
        if block.kind == BlockKind.PARAGRAPH:
            for line in block.text.split("\n"):
                if _is_section_tag(line.strip()):
                    lines.append(line)
                else:
                    lines.append(render_inline(line, inline))
        elif block.kind == BlockKind.HEADING:
            lines.append(_apply(styles.heading, render_inline(block.text, inline)))
        elif block.kind == BlockKind.LIST:
            lines.append(_apply(styles.list_item, render_inline(block.text, inline)))
        elif block.kind == BlockKind.QUOTE:
            lines.append(_apply(styles.quote, render_inline(block.text, inline)))
        elif block.kind == BlockKind.CODE:
            if styles.code_block is not None:
                lines.append(styles.code_block(block.lang, block.text))
            else:
                lines.append(block.text)
        elif block.kind == BlockKind.BLANK:
            lines.append("")

    body = "\n".join(lines)
    if message.streaming:
        if not body:
            body = styles.streaming_placeholder() if styles.streaming_placeholder else "..."
        else:
            suffix = styles.streaming_suffix() if styles.streaming_suffix else "..."
            body += "\n" + suffix
    return RenderedMessage(prefix=prefix, body=body)


def build_transcript_lines(messages: list[Message], styles: Styles) -> list[str]:
    """Render messages into display lines separated by blank lines."""
    lines: list[str] = []
    for message in messages:
        formatted = format_message(message, styles)
        if not formatted.body:
            lines.append(formatted.prefix)
        else:
            body_lines = [
                normalized
                for normalized in map(_normalize_section_tag, formatted.body.split("\n"))
                if normalized is not None
            ]
            meta_mask = _classify_agent_meta_lines(message, body_lines)
            indent = " " * (visible_text_width(formatted.prefix) + 1)
            prefixed = False
            for line, is_meta in zip(body_lines, meta_mask):
                if _is_pilot_divider(line):
                    lines.append(line)
                    continue
                if is_meta and styles.agent_meta is not None:
                    line = styles.agent_meta(line)
                if prefixed:
                    lines.append(indent + line)
                else:
                    lines.append(formatted.prefix + " " + line)
                    prefixed = True
        lines.append("")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def visible_text_width(text: str) -> int:
    """Return the number of characters shown once SGR escape codes are removed."""
    return len(_SGR_ANSI.sub("", text))


def _is_pilot_divider(line: str) -> bool:
    trimmed = line.strip()
    return trimmed.startswith("[[pilot-divider:") and trimmed.endswith("]]")


def _is_dev_work_complete(line: str) -> bool:
    return bool(_DEV_WORK_COMPLETE.match(line) or _DEV_WORK_COMPLETE_ANGLE.match(line))


def _is_section_tag(line: str) -> bool:
    return bool(
        _SECTION_START.match(line)
        or _SECTION_END.match(line)
        or _is_dev_work_complete(line.strip())
    )


def _normalize_section_tag(line: str) -> str | None:
    """Turn section tags into divider tokens; None means the line is dropped."""
    trimmed = line.strip()
    start = _SECTION_START.match(trimmed)
    if start:
        return "[[pilot-divider:" + _section_title(start.group(1)) + "]]"
    if _SECTION_END.match(trimmed):
        return None
    if _is_dev_work_complete(trimmed):
        return "[[pilot-divider:Development Work Complete]]"
    return line


def _section_title(raw: str) -> str:
    words = [part.lower() for part in raw.split("_")]
    words = [word[:1].upper() + word[1:] for word in words]
    return " ".join(words).strip()


def _classify_agent_meta_lines(message: Message, body_lines: list[str]) -> list[bool]:
    meta = [False] * len(body_lines)
    if message.role != Role.ASSISTANT:
        return meta
    in_command_output = False
    allow_error_line = False
    for i, line in enumerate(body_lines):
        trimmed = line.lstrip(" ")
        if (
            trimmed.startswith(_META_PREFIXES)
            or _RUNNING_SUMMARY.match(trimmed)
            or _COMPLETED_SUMMARY.match(trimmed)
            or _EXPLORED_SUMMARY.match(trimmed)
        ):
            meta[i] = True
            in_command_output = trimmed.startswith("Command output:")
            allow_error_line = trimmed.startswith("Command failed") or "(failed, exit=" in trimmed
        elif allow_error_line and trimmed.startswith("Error:"):
            meta[i] = True
            in_command_output = False
            allow_error_line = False
        elif in_command_output:
            meta[i] = True
            allow_error_line = False
            if not trimmed.strip():
                in_command_output = False
        else:
            in_command_output = False
            allow_error_line = False
    return meta