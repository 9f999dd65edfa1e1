import pytest

from pilotcore.transcript import (
    Message,
    RenderedMessage,
    Role,
    Styles,
    build_transcript_lines,
    format_message,
    visible_text_width,
)


def meta_styles() -> Styles:
    return Styles(agent_meta=lambda s: "<m>" + s + "</m>")


def joined(messages, styles=None) -> str:
    return "\n".join(build_transcript_lines(messages, styles or Styles()))


def test_build_transcript_lines_simple():
    lines = build_transcript_lines([Message(Role.ASSISTANT, "hello")], Styles())
    assert lines == ["[agent] hello"]


def test_empty_message_list():
    assert build_transcript_lines([], Styles()) == []


def test_empty_body_renders_prefix_only():
    assert build_transcript_lines([Message(Role.USER, "")], Styles()) == ["[you]"]


def test_messages_separated_by_blank_line():
    lines = build_transcript_lines(
        [Message(Role.USER, "hi"), Message(Role.ASSISTANT, "hello")], Styles()
    )
    assert lines == ["[you] hi", "", "[agent] hello"]


def test_multiline_body_keeps_continuation_indent():
    lines = build_transcript_lines([Message(Role.SYSTEM, "first\nsecond")], Styles())
    assert lines[0] == "[pilot] first"
    assert lines[1] == "        second"


def test_continuation_indent_with_styled_prefix():
    styles = Styles(system_prefix=lambda s: "\x1b[33m" + s + "\x1b[0m")
    lines = build_transcript_lines([Message(Role.SYSTEM, "one\ntwo")], styles)
    assert lines[1].endswith("two")
    assert lines[1] == "        two"


def test_visible_text_width_ignores_ansi():
    assert visible_text_width("\x1b[33m[pilot]\x1b[0m") == 7
    assert visible_text_width("héllo") == 5


def test_streaming_placeholder_callback():
    rendered = format_message(
        Message(Role.ASSISTANT, streaming=True),
        Styles(streaming_placeholder=lambda: ".."),
    )
    assert rendered.body == ".."


def test_streaming_defaults():
    assert format_message(Message(Role.ASSISTANT, streaming=True), Styles()).body == "..."
    assert (
        format_message(Message(Role.ASSISTANT, "hi", streaming=True), Styles()).body
        == "hi\n..."
    )


def test_streaming_suffix_callback():
    rendered = format_message(
        Message(Role.ASSISTANT, "hello", streaming=True),
        Styles(streaming_suffix=lambda: "..."),
    )
    assert "hello\n..." in rendered.body


def test_no_streaming_callbacks_on_finalized_message():
    rendered = format_message(
        Message(Role.ASSISTANT, "done"),
        Styles(streaming_placeholder=lambda: "X", streaming_suffix=lambda: "Y"),
    )
    assert rendered.body == "done"


def test_prefix_styles_per_role():
    styles = Styles(
        user_prefix=lambda s: "U" + s,
        agent_prefix=lambda s: "A" + s,
        system_prefix=lambda s: "S" + s,
    )
    assert format_message(Message(Role.USER, "x"), styles) == RenderedMessage("U[you]", "x")
    assert format_message(Message(Role.ASSISTANT, "x"), styles).prefix == "A[agent]"
    assert format_message(Message(Role.SYSTEM, "x"), styles).prefix == "S[pilot]"


def test_block_styles_applied():
    styles = Styles(
        heading=lambda s: "H:" + s,
        list_item=lambda s: "L:" + s,
        quote=lambda s: "Q:" + s,
        code_block=lambda lang, text: f"<{lang}>{text}",
    )
    content = "# Title\n- item\n> said\n```go\nx := 1\n```"
    rendered = format_message(Message(Role.ASSISTANT, content), styles)
    assert rendered.body == "H:Title\nL:- item\nQ:said\n<go>x := 1"


def test_code_block_without_style_is_plain():
    rendered = format_message(Message(Role.ASSISTANT, "```\nraw *text*\n```"), Styles())
    assert rendered.body == "raw *text*"


def test_agent_meta_markers_use_meta_style():
    content = (
        "[agent-thought] planning\nRunning `ls` ...\n"
        "Ran `ls` for 100ms (failed, exit=1)\nError: permission denied"
    )
    text = joined([Message(Role.ASSISTANT, content)], meta_styles())
    for expected in [
        "<m>[agent-thought] planning</m>",
        "<m>Running ls ...</m>",
        "<m>Ran ls for 100ms (failed, exit=1)</m>",
        "<m>Error: permission denied</m>",
    ]:
        assert expected in text


def test_normal_assistant_output_not_meta():
    text = joined([Message(Role.ASSISTANT, "This is the final answer.")], meta_styles())
    assert "<m>" not in text


def test_narrative_prefixes_not_meta():
    content = "\n".join(
        [
            "Running through the plan for the UI bug:",
            "Ran into two edge cases while reading tests.",
            "Explored alternatives before choosing a fix.",
            "Error: handling here refers to UX copy, not command failure.",
        ]
    )
    assert "<m>" not in joined([Message(Role.ASSISTANT, content)], meta_styles())


def test_system_message_not_meta():
    text = joined([Message(Role.SYSTEM, "Using session demo")], meta_styles())
    assert "<m>" not in text
    assert "[pilot] Using session demo" in text


@pytest.mark.parametrize(
    ("content", "tag", "title", "kept"),
    [
        (
            "<BRAINSTORMING_START>\nWhat should this include?",
            "<BRAINSTORMING_START>",
            "[[pilot-divider:Brainstorming]]",
            "[agent] What should this include?",
        ),
        (
            "<TEST_DRIVEN_DEVELOPMENT_START>\nWrite the first failing test",
            "<TEST_DRIVEN_DEVELOPMENT_START>",
            "[[pilot-divider:Test Driven Development]]",
            "[agent] Write the first failing test",
        ),
    ],
)
def test_start_tags_render_divider(content, tag, title, kept):
    text = joined([Message(Role.ASSISTANT, content)])
    assert tag not in text
    assert title in text
    assert kept in text


@pytest.mark.parametrize(
    ("content", "tag", "kept"),
    [
        ("Design approved\n<BRAINSTORMING_END>", "<BRAINSTORMING_END>", "[agent] Design approved"),
        (
            "All tests green\n<TEST_DRIVEN_DEVELOPMENT_END>",
            "<TEST_DRIVEN_DEVELOPMENT_END>",
            "[agent] All tests green",
        ),
    ],
)
def test_end_tags_are_dropped(content, tag, kept):
    text = joined([Message(Role.ASSISTANT, content)])
    assert tag not in text
    assert "[[pilot-divider:]]" not in text
    assert kept in text


def test_start_tag_divider_line_is_unprefixed():
    lines = build_transcript_lines(
        [Message(Role.ASSISTANT, "<BRAINSTORMING_START>\nhello")], Styles()
    )
    assert lines == ["[[pilot-divider:Brainstorming]]", "[agent] hello"]


@pytest.mark.parametrize(
    "tag",
    ["[DEVELOPMENT_WORK_COMPLETE]", "[<DEVELOPMENT_WORK_COMPLETE>]", "<DEVELOPMENT_WORK_COMPLETE>"],
)
def test_development_work_complete_tags(tag):
    text = joined([Message(Role.ASSISTANT, tag + "\nDone")])
    assert tag not in text
    assert "[[pilot-divider:Development Work Complete]]" in text
    assert "[agent] Done" in text


def test_skill_tag_explanation_lines_not_meta():
    content = "\n".join(
        [
            "Implemented. Tag divider rendering is now generalized for all skill-style session tags.",
            "",
            "What changed",
            "- internal/core/format/transcript.go:182",
            "- Replaced brainstorming-only mapping with generic parsing:",
            "- <SOMETHING_START> -> [[pilot-divider:<Titleized Something>]]",
            "- <SOMETHING_END> -> [[pilot-divider:]]",
        ]
    )
    assert "<m>" not in joined([Message(Role.ASSISTANT, content)], meta_styles())


def test_command_output_meta_stops_after_blank_separator():
    content = "\n".join(
        [
            "Command output:",
            "ok package/a",
            "",
            "What changed",
            "- Replaced brainstorming-only mapping with generic parsing:",
        ]
    )
    text = joined([Message(Role.ASSISTANT, content)], meta_styles())
    assert "<m>Command output:</m>" in text
    assert "<m>ok package/a</m>" in text
    assert "<m>What changed</m>" not in text
    assert "<m>- Replaced brainstorming-only mapping with generic parsing:</m>" not in text


def test_inline_command_output_phrase_in_list_not_meta():
    content = "\n".join(
        [
            "Fixed. The dimming bug was in agent-meta classification, not divider parsing.",
            "",
            "- Updated classifyAgentMetaLines to stop Command output: meta-mode when it hits "
            "a blank separator line, so following narrative/list lines are no longer greyed: "
            "internal/core/format/transcript.go:234.",
            "- Added regression coverage for your example-style summary text: "
            "internal/core/format/format_test.go:411.",
            "- Added a focused regression that reproduces and guards the command output then "
            "summary bleed-through: internal/core/format/format_test.go:433.",
        ]
    )
    assert "<m>" not in joined([Message(Role.ASSISTANT, content)], meta_styles())


def test_inline_styles_applied_in_paragraphs():
    styles = Styles(bold=lambda s: "<b>" + s + "</b>", inline_code=lambda s: "<c>" + s + "</c>")
    rendered = format_message(Message(Role.ASSISTANT, "a **b** `c`"), styles)
    assert rendered.body == "a <b>b</b> <c>c</c>"