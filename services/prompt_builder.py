"""
System prompt assembly.
"""
from typing import Optional, Sequence

from models.api_models import Attachment, KnowledgeBaseItem
from utils.constants import ATTACHMENT_INSTRUCTIONS, KNOWLEDGE_BASE_HEADER, KNOWLEDGE_MARKER


class PromptBuilder:
    """Builds the full system instruction for an Optimizer."""

    @staticmethod
    def build_system_prompt(
        base_prompt: Optional[str],
        knowledge_base: Optional[Sequence[KnowledgeBaseItem]],
        has_attachment: bool = False
    ) -> str:
        """
        Concatenate the base prompt, a knowledge-base manifest and attachment instructions.

        Knowledge-base files are referenced by name only; their contents are not fetched.

        Args:
            base_prompt: Optimizer system prompt (None treated as empty)
            knowledge_base: Knowledge-base references in display order
            has_attachment: True when the request carries attachment text

        Returns:
            The full system instruction
        """
        full = base_prompt or ""

        if knowledge_base:
            markers = "\n".join(KNOWLEDGE_MARKER.format(name=item.name) for item in knowledge_base)
            full += f"{KNOWLEDGE_BASE_HEADER}{markers}"

        if has_attachment:
            full += ATTACHMENT_INSTRUCTIONS

        return full

    @staticmethod
    def has_attachment_text(attachment: Optional[Attachment]) -> bool:
        """True when an attachment carries non-empty extracted text."""
        return bool(attachment and attachment.text and attachment.text.strip())
