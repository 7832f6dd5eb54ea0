"""
Data models for generation processing.
Contains request-scoped context, resolved config and state machine types.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from models.api_models import Attachment, Message, Optimizer


@dataclass(frozen=True)
class ProviderQuirk:
    """Known provider-side constraints for a (provider, model) pair."""
    force_temperature: Optional[float] = None
    omit_top_p: bool = False


@dataclass
class GenerationConfig:
    """Sampling configuration after clamping and quirk resolution. top_p=None means omit it."""
    temperature: float
    max_output_tokens: int
    top_p: Optional[float] = None


@dataclass
class FramedConversation:
    """One conversation in both flat-prompt and chat-message encodings."""
    flat_prompt: str
    messages: list[dict]


@dataclass
class GenerationContext:
    """
    Context object containing all generation state for one request.
    Built once per HTTP call and discarded afterwards.
    """
    optimizer: Optimizer
    user_input: str
    history: list[Message] = field(default_factory=list)
    attachment: Optional[Attachment] = None
    caller_id: Optional[str] = None
    system: str = ""
    conversation: Optional[FramedConversation] = None
    model_id: str = ""
    config: Optional[GenerationConfig] = None
    call_count: int = 0
    states: list["InvokeState"] = field(default_factory=list)

    @property
    def provider(self) -> str:
        """Lower-cased provider of the optimizer's model."""
        return (self.optimizer.model.provider or "").lower()

    @property
    def model_name(self) -> str:
        """Model name as configured on the optimizer."""
        return self.optimizer.model.model

    @property
    def history_limit(self) -> Optional[int]:
        """Configured history window, None when unset."""
        return self.optimizer.generation_params.history_messages

    def next_call_number(self) -> int:
        """Increment and return the next provider call number."""
        self.call_count += 1
        return self.call_count


@dataclass
class GenerationResult:
    """Canonical output of the pipeline plus what was sent to produce it."""
    text: str
    source: str
    system: str = ""
    prompt: str = ""

    @property
    def full_prompt(self) -> str:
        """System instruction and framed prompt as one block."""
        if not self.system:
            return self.prompt
        return f"{self.system}\n\n{self.prompt}"


class InvokeState(Enum):
    """States of the generation invoker."""
    RESOLVING_CONFIG = "resolving_config"
    PRIMARY_CALL = "primary_call"
    PRIMARY_FAILED_OR_EMPTY = "primary_failed_or_empty"
    FALLBACK_CALL = "fallback_call"
    SUCCESS = "success"
    EXHAUSTED = "exhausted"
