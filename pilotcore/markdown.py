"""A small markdown subset: block splitting and inline styling."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

StyleFn = Optional[Callable[[str], str]]
LinkFn = Optional[Callable[[str, str], str]]


class BlockKind(str, Enum):
    """The kinds of block a message body is split into."""

    PARAGRAPH = "paragraph"
    LIST = "list"
    HEADING = "heading"
    QUOTE = "quote"
    CODE = "code"
    BLANK = "blank"


@dataclass(frozen=True)
class Block:
    """One block of parsed markdown."""

    kind: BlockKind
    text: str = ""
    lang: str = ""


@dataclass(frozen=True)
class InlineStyles:
    """Callbacks applied to inline spans; a missing callback leaves text plain."""

    code: StyleFn = None
    link: LinkFn = None
    bold: StyleFn = None
    italic: StyleFn = None
    strike: StyleFn = None


_NUMBERED_LIST = re.compile(r"[0-9]+\. ")


def parse_markdown_blocks(text: str, streaming: bool) -> list[Block]:
    """Split text into blocks.

    An unclosed code fence becomes a code block while the message is still
    streaming, and falls back to a literal paragraph once it is final.
    """
    if not text:
        return []

    blocks: list[Block] = []
    paragraph: list[str] = []
    code_lines: list[str] = []
    in_code = False
    lang = ""

    def flush_paragraph() -> None:
        if paragraph:
            blocks.append(Block(BlockKind.PARAGRAPH, "\n".join(paragraph)))
            paragraph.clear()

    for line in text.split("\n"):
        trimmed = line.strip()

        if trimmed.startswith("```"):
            if in_code:
                blocks.append(Block(BlockKind.CODE, "\n".join(code_lines), lang))
                code_lines.clear()
                lang = ""
                in_code = False
                continue
            flush_paragraph()
            in_code = True
            lang = trimmed[3:].strip()
            continue

        if in_code:
            code_lines.append(line)
            continue

        if not trimmed:
            flush_paragraph()
            blocks.append(Block(BlockKind.BLANK))
            continue

        heading = _parse_heading(trimmed)
        if heading is not None:
            flush_paragraph()
            blocks.append(Block(BlockKind.HEADING, heading))
            continue

        if _is_list_line(trimmed):
            flush_paragraph()
            blocks.append(Block(BlockKind.LIST, trimmed))
            continue

        if trimmed.startswith("> "):
            flush_paragraph()
            blocks.append(Block(BlockKind.QUOTE, trimmed[2:].strip()))
            continue

        paragraph.append(line)

    flush_paragraph()
    if in_code:
        if streaming:
            blocks.append(Block(BlockKind.CODE, "\n".join(code_lines), lang))
        else:
            literal = "```" + lang + "\n" + "\n".join(code_lines)
            blocks.append(Block(BlockKind.PARAGRAPH, literal))
    return blocks


def _parse_heading(line: str) -> str | None:
    level = len(line) - len(line.lstrip("#"))
    if level == 0 or level > 3 or level >= len(line) or line[level] != " ":
        return None
    return line[level + 1 :].strip()


def _is_list_line(line: str) -> bool:
    if line.startswith(("- ", "* ")):
        return True
    return _NUMBERED_LIST.match(line) is not None


def render_inline_code(text: str, apply: Callable[[str], str]) -> str:
    """Render only inline code spans with the given callback."""
    return render_inline(text, InlineStyles(code=apply))


def render_inline(text: str, styles: InlineStyles) -> str:
    """Render code spans, links and emphasis; code spans stay literal inside."""
    if "`" not in text:
        return _render_emphasis(text, styles)

    out: list[str] = []
    start = 0
    while start < len(text):
        opening = text.find("`", start)
        closing = text.find("`", opening + 1) if opening >= 0 else -1
        if closing < 0:
            out.append(_render_emphasis(text[start:], styles))
            break
        out.append(_render_emphasis(text[start:opening], styles))
        code = text[opening + 1 : closing]
        out.append(styles.code(code) if styles.code else code)
        start = closing + 1
    return "".join(out)


def _render_emphasis(text: str, styles: InlineStyles) -> str:
    if not text:
        return text
    text = _render_links(text, styles)
    for marker, apply in (
        ("**", styles.bold),
        ("__", styles.bold),
        ("~~", styles.strike),
        ("*", styles.italic),
        ("_", styles.italic),
    ):
        text = _render_delimited(text, marker, apply, styles)
    return text


def _render_links(text: str, styles: InlineStyles) -> str:
    out: list[str] = []
    i = 0
    while i < len(text):
        open_label = text.find("[", i)
        if open_label < 0:
            out.append(text[i:])
            break
        close_label = text.find("]", open_label + 1)
        if close_label < 0:
            out.append(text[i:])
            break
        if close_label + 1 >= len(text) or text[close_label + 1] != "(":
            out.append(text[i : close_label + 1])
            i = close_label + 1
            continue
        close_url = text.find(")", close_label + 2)
        if close_url < 0:
            out.append(text[i:])
            break

        label = text[open_label + 1 : close_label]
        url = text[close_label + 2 : close_url]
        if not label.strip() or not url.strip():
            out.append(text[i : close_url + 1])
        else:
            out.append(text[i:open_label])
            out.append(styles.link(label, url) if styles.link else f"{label} ({url})")
        i = close_url + 1
    return "".join(out)


def _render_delimited(text: str, marker: str, apply: StyleFn, styles: InlineStyles) -> str:
    width = len(marker)
    if apply is None or not marker or len(text) < width * 2:
        return text
    out: list[str] = []
    i = 0
    while i < len(text):
        opening = text.find(marker, i)
        closing = text.find(marker, opening + width) if opening >= 0 else -1
        if closing < 0:
            out.append(text[i:])
            break
        out.append(text[i:opening])
        inner = text[opening + width : closing]
        if inner:
            out.append(apply(_render_emphasis(inner, styles)))
        else:
            out.append(text[opening : closing + width])
        i = closing + width
    return "".join(out)