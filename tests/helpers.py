from models.api_models import Message


def make_history(*contents, start_role="user"):
    """Build alternating user/assistant turns from plain strings."""
    roles = ["user", "assistant"] if start_role == "user" else ["assistant", "user"]
    return [Message(role=roles[i % 2], content=content) for i, content in enumerate(contents)]


def rendered_turn_lines(flat_prompt):
    """History lines of a flat prompt, excluding the trailing 'User: <input>' / 'Assistant:' continuation."""
    lines = flat_prompt.split("\n")
    assert lines[-1] == "Assistant:", f"Flat prompt does not end with a continuation:\n{flat_prompt}"
    body = lines[:-2]
    return [line for line in body if line.startswith("User: ") or line.startswith("Assistant: ")]


def assert_sentinel(payload):
    """Assert the response carries the apology message instead of generated text."""
    from config import Config
    assert payload == {"optimizedContent": Config.GENERATION_FALLBACK_MESSAGE}
