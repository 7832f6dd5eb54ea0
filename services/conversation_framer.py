"""
Conversation framing for flat-prompt and chat-style backends.
"""
from typing import Optional, Sequence

from config import Config
from models.api_models import Attachment, Message
from models.generation_models import FramedConversation
from services.prompt_builder import PromptBuilder
from utils.constants import ATTACHMENT_BLOCK, Role
from utils.logger import app_logger


class ConversationFramer:
    """Encodes history, the new input and an optional attachment as one conversation."""

    @staticmethod
    def select_history(history: Optional[Sequence[Message]], limit: Optional[int] = None) -> list[Message]:
        """Drop blank turns, then keep the most recent `limit` turns (default 10)."""
        if limit is None:
            limit = Config.DEFAULT_HISTORY_MESSAGES

        turns = [msg for msg in (history or []) if msg.content and msg.content.strip()]
        if limit <= 0:
            return []

        kept = turns[-limit:]
        if len(kept) < len(turns):
            app_logger.debug(f"History window: kept {len(kept)}/{len(turns)} turns")
        return kept

    @staticmethod
    def attachment_block(attachment: Optional[Attachment]) -> str:
        """Delimited attachment block with text capped at MAX_ATTACHMENT_CHARS, or ''."""
        if not PromptBuilder.has_attachment_text(attachment):
            return ""

        text = attachment.text
        if len(text) > Config.MAX_ATTACHMENT_CHARS:
            app_logger.info(
                f"Attachment '{attachment.name}' truncated from {len(text)} "
                f"to {Config.MAX_ATTACHMENT_CHARS} characters"
            )
            text = text[:Config.MAX_ATTACHMENT_CHARS]

        return ATTACHMENT_BLOCK.format(name=attachment.name, text=text)

    @staticmethod
    def render_turn(message: Message) -> str:
        """Render one history turn as 'User: ...' or 'Assistant: ...'."""
        label = Role.LABELS.get(message.role, Role.LABELS[Role.USER])
        return f"{label}: {message.content}"

    @staticmethod
    def frame(
        history: Optional[Sequence[Message]],
        user_input: str,
        history_limit: Optional[int] = None,
        attachment: Optional[Attachment] = None,
        system: str = ""
    ) -> FramedConversation:
        """
        Build both encodings of the conversation from the same inputs.

        Args:
            history: Prior turns, oldest first
            user_input: The new user message
            history_limit: Max number of prior turns (None -> default)
            attachment: Optional attachment whose text is embedded
            system: System instruction for the structured form

        Returns:
            FramedConversation with the flat prompt and the chat message list
        """
        turns = ConversationFramer.select_history(history, history_limit)
        block = ConversationFramer.attachment_block(attachment)

        if turns:
            rendered = "\n".join(ConversationFramer.render_turn(msg) for msg in turns)
            flat_prompt = f"{rendered}{block}\nUser: {user_input}\nAssistant:"
        else:
            flat_prompt = f"{block}{user_input}"

        messages = []
        if system:
            messages.append({"role": Role.SYSTEM, "content": system})
        if block:
            messages.append({"role": Role.USER, "content": block.strip("\n")})
        messages.extend({"role": msg.role, "content": msg.content} for msg in turns)
        messages.append({"role": Role.USER, "content": user_input})

        return FramedConversation(flat_prompt=flat_prompt, messages=messages)
