"""Parsing of slash commands typed into the chat input."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Kind(str, Enum):
    """The kinds of slash command understood by the chat engine."""

    HELP = "help"
    HOOKS_RUN = "hooks.run"
    REVIEW = "review"
    PROVIDER_STATUS = "provider.status"
    PROVIDER_USE = "provider.use"
    SESSION_LIST = "session.list"
    SESSION_NEW = "session.new"
    SESSION_USE = "session.use"
    SESSION_DELETE = "session.delete"
    SESSION_ADD_REPO = "session.add-repo"
    SESSION_REPOS = "session.repos"
    SESSION_REPO_USE = "session.repo.use"


@dataclass(frozen=True)
class Command:
    """A parsed slash command."""

    kind: Kind
    session_id: str = ""
    session: str = ""
    repo_path: str = ""
    repo_label: str = ""
    repo_id: str = ""
    provider_id: str = ""


class CommandError(ValueError):
    """Raised when slash-prefixed input is not a valid command."""


_DELETE_ALIASES = frozenset({"delete", "remove", "destroy"})


def parse(text: str) -> Command | None:
    """Parse slash-prefixed input.

    Returns None when the input is not a command at all and raises
    CommandError when it is a command that cannot be understood.
    """
    trimmed = text.strip()
    if not trimmed.startswith("/"):
        return None
    parts = trimmed.split()
    head, args = parts[0], parts[1:]

    if head == "/help":
        return Command(Kind.HELP)
    if head == "/review":
        if not args:
            return Command(Kind.REVIEW)
        raise CommandError("usage: /review")
    if head == "/hooks":
        if args == ["run"]:
            return Command(Kind.HOOKS_RUN)
        raise CommandError("usage: /hooks run")
    if head == "/provider":
        if args == ["status"]:
            return Command(Kind.PROVIDER_STATUS)
        if len(args) == 2 and args[0] == "use":
            return Command(Kind.PROVIDER_USE, provider_id=args[1].lower())
        raise CommandError("usage: /provider use <codex|cursor> OR /provider status")
    if head == "/session":
        return _parse_session(args)
    raise CommandError("unknown command; run /help")


def _parse_session(args: list[str]) -> Command:
    sub = args[0] if args else ""
    rest = args[1:]
    if args == ["list"]:
        return Command(Kind.SESSION_LIST)
    if sub == "new" and rest:
        return Command(Kind.SESSION_NEW, session=" ".join(rest))
    if sub == "use" and rest:
        return Command(Kind.SESSION_USE, session_id=" ".join(rest))
    if sub in _DELETE_ALIASES and rest:
        return Command(Kind.SESSION_DELETE, session_id=" ".join(rest))
    if sub == "add-repo":
        if not rest:
            return Command(Kind.SESSION_ADD_REPO)
        return Command(
            Kind.SESSION_ADD_REPO,
            repo_path=rest[0],
            repo_label=" ".join(rest[1:]),
        )
    if args == ["repos"]:
        return Command(Kind.SESSION_REPOS)
    if len(args) == 3 and args[0] == "repo" and args[1] == "use":
        return Command(Kind.SESSION_REPO_USE, repo_id=args[2])
    raise CommandError(
        "usage: /session <new|list|use|delete|add-repo <path>|repos|repo use>"
    )


def help_text() -> str:
    """Return the help text listing every command."""
    return "\n".join(
        [
            "Commands:",
            "/session new <name> (auto-sets provider=codex and prompts repo step)",
            "/session list",
            "/session use <name>",
            "/session delete <name> (aliases: remove, destroy)",
            "/session add-repo [path] [label] (empty path => current working directory)",
            "/session repos",
            "/session repo use <repo-id>",
            "/provider use <codex|cursor>",
            "/provider status",
            "/review",
            "/hooks run",
            "/help",
            "Navigation: F1-F12 switch sessions, Up/Down/PgUp/PgDn/Home/End scroll transcript",
        ]
    )


def root_suggestions() -> list[str]:
    """Return the top-level command names offered for completion."""
    return ["/help", "/hooks", "/provider", "/review", "/session"]


def base_suggestions() -> list[str]:
    """Return the full command forms offered for completion."""
    return [
        "/help",
        "/review",
        "/hooks run",
        "/provider status",
        "/provider use codex",
        "/provider use cursor",
        "/session new <name>",
        "/session list",
        "/session use <session-name>",
        "/session delete <session-name>",
        "/session add-repo [path] [label]",
        "/session repos",
        "/session repo use <repo-id>",
    ]


def sort_and_dedupe(values: list[str]) -> list[str]:
    """Return the values sorted with duplicates removed."""
    return sorted(set(values))