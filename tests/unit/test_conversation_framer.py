import pytest

from models.api_models import Attachment, Message
from services.conversation_framer import ConversationFramer
from tests.helpers import make_history, rendered_turn_lines


def test_frame_without_history_returns_raw_input():
    """Given no history and no attachment, the flat prompt should be the raw input."""
    framed = ConversationFramer.frame([], "Write a tagline")

    assert framed.flat_prompt == "Write a tagline"
    assert framed.messages == [{"role": "user", "content": "Write a tagline"}]


def test_frame_with_history_renders_turns_and_continuation():
    """Given history, turns should be rendered with role labels followed by the new input."""
    history = make_history("Hi", "Hello! How can I help?")

    framed = ConversationFramer.frame(history, "Write a tagline", system="SYS")

    assert framed.flat_prompt == "User: Hi\nAssistant: Hello! How can I help?\nUser: Write a tagline\nAssistant:"
    assert framed.messages == [
        {"role": "system", "content": "SYS"},
        {"role": "user", "content": "Hi"},
        {"role": "assistant", "content": "Hello! How can I help?"},
        {"role": "user", "content": "Write a tagline"},
    ]


@pytest.mark.parametrize("turns, limit, expected", [
    (3, None, 3),
    (15, None, 10),
    (15, 4, 4),
    (2, 4, 2),
    (12, 12, 12),
])
def test_flat_prompt_keeps_most_recent_window(turns, limit, expected):
    """Given N turns and a limit, exactly min(limit, N) most recent turns should be rendered in order."""
    history = make_history(*[f"turn {i}" for i in range(turns)])

    framed = ConversationFramer.frame(history, "next", history_limit=limit)

    lines = rendered_turn_lines(framed.flat_prompt)
    assert len(lines) == expected
    assert lines[0].endswith(f"turn {turns - expected}")
    assert lines[-1].endswith(f"turn {turns - 1}")


def test_blank_turns_are_dropped_before_windowing():
    """Given blank turns, they should not count toward the history window."""
    history = make_history("one", "", "two", "   ", "three")

    framed = ConversationFramer.frame(history, "next", history_limit=2)

    assert rendered_turn_lines(framed.flat_prompt) == ["User: two", "User: three"]


def test_zero_history_limit_keeps_no_turns():
    """Given historyMessages=0, no prior turns should be included."""
    history = make_history("one", "two")

    framed = ConversationFramer.frame(history, "next", history_limit=0)

    assert framed.flat_prompt == "next"
    assert framed.messages == [{"role": "user", "content": "next"}]


def test_attachment_block_prefixes_input_without_history():
    """Given an attachment and no history, the block should precede the raw input."""
    attachment = Attachment(name="notes.txt", type="text/plain", size=5, text="notes")

    framed = ConversationFramer.frame([], "Summarize", attachment=attachment, system="SYS")

    assert framed.flat_prompt == "\n[Attached file: notes.txt]\nnotes\nSummarize"
    assert framed.messages == [
        {"role": "system", "content": "SYS"},
        {"role": "user", "content": "[Attached file: notes.txt]\nnotes"},
        {"role": "user", "content": "Summarize"},
    ]


def test_attachment_block_inserted_before_final_user_turn():
    """Given history and an attachment, the block should sit between history and the final user turn."""
    history = make_history("Hi", "Hello")
    attachment = Attachment(name="brief.md", text="# Brief")

    framed = ConversationFramer.frame(history, "Use the brief", attachment=attachment)

    assert framed.flat_prompt == (
        "User: Hi\nAssistant: Hello\n[Attached file: brief.md]\n# Brief\n\nUser: Use the brief\nAssistant:"
    )
    assert [m["content"] for m in framed.messages] == [
        "[Attached file: brief.md]\n# Brief", "Hi", "Hello", "Use the brief"
    ]


def test_attachment_text_is_truncated_to_limit():
    """Given attachment text over 10,000 characters, exactly 10,000 should be embedded."""
    attachment = Attachment(name="big.txt", text="a" * 10000 + "b" * 500)

    framed = ConversationFramer.frame([], "Summarize", attachment=attachment)

    embedded = framed.flat_prompt.split("\n")[2]
    assert embedded == "a" * 10000
    assert "b" * 500 not in framed.flat_prompt


def test_blank_attachment_text_is_ignored():
    """Given an attachment with no extracted text, no block should be added."""
    framed = ConversationFramer.frame([], "Hi", attachment=Attachment(name="empty.pdf", text=""))

    assert framed.flat_prompt == "Hi"
    assert len(framed.messages) == 1


def test_both_encodings_use_the_same_window():
    """The flat prompt and message list should carry the same history turns."""
    history = [Message(role="user", content=f"u{i}") for i in range(6)]

    framed = ConversationFramer.frame(history, "final", history_limit=3)

    flat_contents = [line.split(": ", 1)[1] for line in rendered_turn_lines(framed.flat_prompt)]
    message_contents = [m["content"] for m in framed.messages[:-1]]
    assert flat_contents == message_contents == ["u3", "u4", "u5"]
