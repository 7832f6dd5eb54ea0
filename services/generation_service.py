"""
Generation service containing the content-generation request pipeline.
Assembles prompts, calls the gateway and falls back to the native provider API.
"""
from typing import Optional, Sequence

from config import Config
from models.api_models import Attachment, Message, Optimizer
from models.generation_models import GenerationContext, GenerationResult, InvokeState
from services.conversation_framer import ConversationFramer
from services.model_resolver import ModelResolver
from services.prompt_builder import PromptBuilder
from services.providers import ModelGateway, OpenAIChatFallback
from services.response_normalizer import ResponseNormalizer
from utils.constants import ResultSource
from utils.logger import app_logger


class GenerationService:
    """Runs one generation request: primary gateway call, then native fallback, then sentinel."""

    def __init__(self, gateway: ModelGateway, fallback: OpenAIChatFallback):
        self.gateway = gateway
        self.fallback = fallback

    @staticmethod
    def build_context(
        optimizer: Optimizer,
        user_input: str,
        history: Optional[Sequence[Message]] = None,
        attachment: Optional[Attachment] = None,
        caller_id: Optional[str] = None
    ) -> GenerationContext:
        """Create the request-scoped context."""
        return GenerationContext(
            optimizer=optimizer,
            user_input=user_input,
            history=list(history or []),
            attachment=attachment,
            caller_id=caller_id
        )

    @staticmethod
    def _transition(context: GenerationContext, state: InvokeState) -> None:
        context.states.append(state)
        app_logger.debug(f"Generation state -> {state.value}")

    @staticmethod
    def prepare(context: GenerationContext) -> GenerationContext:
        """
        Resolve everything the provider calls need.

        Fills in the system instruction, both conversation encodings,
        the gateway model id and the clamped generation config.
        """
        GenerationService._transition(context, InvokeState.RESOLVING_CONFIG)
        optimizer = context.optimizer

        context.system = PromptBuilder.build_system_prompt(
            optimizer.system_prompt,
            optimizer.knowledge_base,
            has_attachment=PromptBuilder.has_attachment_text(context.attachment)
        )
        context.conversation = ConversationFramer.frame(
            history=context.history,
            user_input=context.user_input,
            history_limit=context.history_limit,
            attachment=context.attachment,
            system=context.system
        )
        context.model_id = ModelResolver.resolve(optimizer.model.provider, optimizer.model.model)
        context.config = ModelResolver.resolve_generation_config(optimizer.model)

        app_logger.info(
            f"Resolved {context.model_id} (temperature={context.config.temperature}, "
            f"max_tokens={context.config.max_output_tokens}, "
            f"top_p={'omitted' if context.config.top_p is None else context.config.top_p})"
        )
        return context

    async def _call_primary(self, context: GenerationContext) -> Optional[str]:
        """Call the gateway. Errors are logged and reported as no text."""
        self._transition(context, InvokeState.PRIMARY_CALL)
        call_num = context.next_call_number()
        app_logger.info(f"LLM Call #{call_num}: Gateway {context.model_id}")

        try:
            output = await self.gateway.generate(
                context.model_id,
                context.conversation.flat_prompt,
                context.system,
                context.config
            )
        except Exception as e:
            app_logger.error(f"LLM Call #{call_num} failed: {type(e).__name__}: {e}")
            return None

        text = ResponseNormalizer.extract_text(output)
        if text:
            app_logger.info(f"LLM Call #{call_num} completed: Generated {len(text)} characters")
        else:
            app_logger.warning(f"LLM Call #{call_num} returned no usable text")
        return text

    async def _call_fallback(self, context: GenerationContext) -> Optional[str]:
        """Call the provider's native chat API with the structured messages."""
        self._transition(context, InvokeState.FALLBACK_CALL)
        call_num = context.next_call_number()
        app_logger.info(f"LLM Call #{call_num}: Native fallback {context.model_name}")

        try:
            output = await self.fallback.create_completion(
                context.model_name,
                context.conversation.messages,
                context.config
            )
        except Exception as e:
            app_logger.error(f"LLM Call #{call_num} (fallback) failed: {type(e).__name__}: {e}")
            return None

        text = ResponseNormalizer.extract_text(output)
        if not text:
            app_logger.warning(f"LLM Call #{call_num} (fallback) returned no usable text")
        return text

    async def generate(self, context: GenerationContext) -> GenerationResult:
        """
        Run the pipeline for a prepared or fresh context.

        Never raises for provider failures: when no backend produces text,
        the result carries the configured apology message.
        """
        if context.conversation is None or context.config is None:
            self.prepare(context)

        result_args = {
            "system": context.system,
            "prompt": context.conversation.flat_prompt,
        }

        text = await self._call_primary(context)
        if text:
            self._transition(context, InvokeState.SUCCESS)
            return GenerationResult(text=text, source=ResultSource.PRIMARY, **result_args)

        self._transition(context, InvokeState.PRIMARY_FAILED_OR_EMPTY)

        if ModelResolver.has_native_fallback(context.provider):
            text = await self._call_fallback(context)
            if text:
                self._transition(context, InvokeState.SUCCESS)
                return GenerationResult(text=text, source=ResultSource.FALLBACK, **result_args)
        else:
            app_logger.info(f"No native fallback for provider '{context.provider}'")

        self._transition(context, InvokeState.EXHAUSTED)
        app_logger.warning(f"Generation exhausted after {context.call_count} call(s), returning apology message")
        return GenerationResult(text=Config.GENERATION_FALLBACK_MESSAGE, source=ResultSource.SENTINEL, **result_args)
