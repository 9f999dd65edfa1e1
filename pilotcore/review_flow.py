"""Rendering helpers for the automatic review loop and replayed context."""

from __future__ import annotations

from typing import Iterable

from pilotcore.transcript import Message

REVIEW_DIVIDER = "[[pilot-divider:Automatic Review]]"
CLOSING_DIVIDER = "[[pilot-divider:]]"
REPLAY_HEADER = "Prior conversation transcript:"
REPLAY_FOOTER = "Continue from this context."


def render_auto_review_state(cycle: int, max_cycles: int, state: str, detail: str) -> str:
    """Render the transcript block describing one automatic review state."""
    lines = [
        REVIEW_DIVIDER,
        f"Cycle: {cycle}/{max_cycles}",
        "State: " + state,
    ]
    if detail.strip():
        lines.append(detail)
    lines.append(CLOSING_DIVIDER)
    return "\n".join(lines)


def auto_review_progress_item_id(run_id: int, cycle: int) -> str:
    """Return the item id under which a review cycle's progress is upserted."""
    return f"auto-review-progress-{run_id}-{cycle}"


def item_ref_key(session_id: str, request_id: str, item_id: str) -> str:
    """Return the key that identifies an upsertable transcript item."""
    if not request_id.strip():
        return f"{session_id}|{item_id}"
    return f"{session_id}|{request_id}|{item_id}"


def _role_text(role: object) -> str:
    value = getattr(role, "value", role)
    return str(value).strip()


def build_replay_prompt(messages: Iterable[Message]) -> str:
    """Build a prompt that resends finished messages to restore context."""
    lines = [REPLAY_HEADER]
    for message in messages:
        if message.streaming:
            continue
        role = _role_text(message.role)
        content = message.content.strip()
        if not role or not content:
            continue
        lines.append(f"{role}: {content}")
    lines.append(REPLAY_FOOTER)
    return "\n".join(lines)