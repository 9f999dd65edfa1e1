# pilotcore

This package holds the text-handling parts of a terminal console that drives a
coding agent. It parses slash commands, renders chat messages into transcript
lines and summarises the shell commands an agent runs. It uses only the
standard library.

## Modules

- `pilotcore.command` turns slash input into `Command` values. Examples are
  `/session new demo`, `/session delete demo` (also `remove` and `destroy`),
  `/session add-repo <path> [label]`, `/session repo use <id>`,
  `/provider use codex`, `/provider status`, `/hooks run`, `/review` and
  `/help`. `parse()` returns `None` when the text is not a slash command. It
  raises `CommandError`, whose message gives the usage, when the command is
  malformed. `help_text()`, `root_suggestions()` and `base_suggestions()` give
  the text for help and completion. `sort_and_dedupe()` sorts a list and drops
  duplicates.
- `pilotcore.markdown` handles a small subset of markdown.
  `parse_markdown_blocks(text, streaming)` splits text into `Block`s of the
  kinds paragraph, list, heading (up to `###`), quote, fenced code and blank.
  A code fence that is never closed becomes a code block while
  `streaming=True`. Otherwise it is kept as a literal paragraph.
  `render_inline()` applies the `InlineStyles` callbacks to code spans, links,
  bold, italic and strike-through. Text inside a code span is left as it is.
  `render_inline_code()` styles code spans only.
- `pilotcore.transcript` renders `Message`s (role `Role.USER`,
  `Role.ASSISTANT` or `Role.SYSTEM`) with the callbacks in `Styles`:
  - `format_message()` returns a `RenderedMessage` holding a prefix
    (`[you]`, `[agent]` or `[pilot]`) and a body.
  - `build_transcript_lines()` prefixes the first line of each message and
    indents the lines after it to line up. `visible_text_width()` measures the
    prefix without its ANSI SGR codes.
  - Tags such as `<BRAINSTORMING_START>` become `[[pilot-divider:Brainstorming]]`.
    `<..._END>` tags are dropped. Development-work-complete tags become a
    "Development Work Complete" divider.
  - Agent meta lines get the `agent_meta` style. These are thoughts,
    "Running …", "Ran … for …", "Explored … for …", command output and error
    teasers.
- `pilotcore.textutil` has small helpers:
  - `truncate()` shortens text and ends it with "…".
  - `format_duration()` gives `400ms`, `1.2s` or `2m5s`.
  - `concise_reasoning_text()`, `extract_error_teaser()`,
    `count_development_work_complete_tags()`, `escape_inline_code()` and
    `format_exit_code()`.
- `pilotcore.activity` handles agent shell commands:
  - `normalize_shell_wrapped_command()` unwraps `bash -lc '...'`.
  - `classify_command()` returns `"explored"` when every segment is a
    read-only tool such as `ls`, `rg` or `cat`, and `"ran"` otherwise.
  - `shorten_command()` shortens a command.
  - `render_command_running()`, `render_command_summary()`,
    `render_command_failed()`, `render_explore_sequence_running()` and
    `render_explore_sequence_summary()` give the one-line messages, for
    example "Ran `go test ./...` for 1.2s" or
    "Explored 2 commands for 500ms".
- `pilotcore.review_flow` has helpers for the automatic review loop and for
  replaying a conversation:
  - `render_auto_review_state()` renders the block with the cycle and state.
  - `auto_review_progress_item_id()` and `item_ref_key()` give item keys.
  - `build_replay_prompt()` resends finished messages as a transcript.

## Example

```python
from pilotcore.command import parse, Kind
from pilotcore.transcript import Message, Role, Styles, build_transcript_lines

cmd = parse("/session new demo")
assert cmd is not None and cmd.kind is Kind.SESSION_NEW and cmd.session == "demo"

lines = build_transcript_lines(
    [Message(role=Role.SYSTEM, content="first\nsecond")], Styles()
)
# ['[pilot] first', '        second']
```

## What it does not do

The package renders and classifies text and stops there. It has no chat
engine that acts on parsed commands. It does not store sessions or
repositories and does not start or talk to agent providers. It does not run
hooks and does not run `git` or any review tool. There is also no terminal
screen and no command-line entry point. Those parts are left to the
application that uses these modules.

## Running the tests

```
pip install -e .[test]
pytest
```