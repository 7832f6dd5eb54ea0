"""
Plain-text extraction from heterogeneous provider response shapes.
"""
from typing import Any, Callable, Optional

from utils.logger import app_logger


def _non_blank(value: Any) -> Optional[str]:
    """Return value if it is a string with visible characters."""
    if isinstance(value, str) and value.strip():
        return value
    return None


def _field(container: Any, key: str) -> Any:
    """Dict lookup that tolerates non-dict containers."""
    return container.get(key) if isinstance(container, dict) else None


def parse_facade_text(output: Any) -> Optional[str]:
    """Gateway shape: {'text': ...} or {'output': {'text': ...}}."""
    return _non_blank(_field(output, "text")) or _non_blank(_field(_field(output, "output"), "text"))


def parse_chat_completion(output: Any) -> Optional[str]:
    """Chat-completion shape: {'choices': [{'message': {'content': ...}}]}."""
    choices = _field(output, "choices")
    if not isinstance(choices, list) or not choices:
        return None
    return _non_blank(_field(_field(choices[0], "message"), "content"))


def parse_candidates(output: Any) -> Optional[str]:
    """Candidate/parts shape: first candidate whose joined parts text is non-blank."""
    candidates = _field(output, "candidates") or _field(_field(output, "output"), "candidates")
    if not isinstance(candidates, list):
        return None

    for candidate in candidates:
        parts = _field(_field(candidate, "content"), "parts")
        if not isinstance(parts, list):
            continue
        fragments = [_field(part, "text") for part in parts]
        joined = "\n".join(text for text in fragments if isinstance(text, str) and text)
        if joined.strip():
            return joined

    return None


class ResponseNormalizer:
    """Tries a fixed, ordered set of response parsers; first match wins."""

    PARSERS: tuple[tuple[str, Callable[[Any], Optional[str]]], ...] = (
        ("facade", parse_facade_text),
        ("chat_completion", parse_chat_completion),
        ("candidates", parse_candidates),
    )

    @staticmethod
    def extract_text(output: Any) -> Optional[str]:
        """
        Extract plain text from a raw provider output.

        Returns:
            The text, or None when no parser found usable text
        """
        if output is None:
            return None

        for shape, parser in ResponseNormalizer.PARSERS:
            text = parser(output)
            if text is not None:
                app_logger.debug(f"Response text extracted from {shape} shape ({len(text)} chars)")
                return text

        return None
