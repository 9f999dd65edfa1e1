"""Text logic for a coding-agent console: slash commands, markdown transcripts and activity summaries."""

__version__ = "0.1.0"
__all__ = [
    "activity",
    "command",
    "markdown",
    "review_flow",
    "textutil",
    "transcript",
]