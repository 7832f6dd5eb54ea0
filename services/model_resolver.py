"""
Provider model resolution and generation config clamping.
Maps (provider, model) to gateway model ids and applies provider quirks.
"""
from typing import Optional

from config import Config
from models.api_models import ModelSettings
from models.generation_models import GenerationConfig, ProviderQuirk
from utils.constants import Namespace, Provider
from utils.logger import app_logger


class ModelResolver:
    """Resolves model ids and the effective sampling config for a provider."""

    NAMESPACES = {
        Provider.OPENAI: Namespace.OPENAI,
        Provider.GOOGLE: Namespace.GOOGLE,
    }

    # (provider, model) -> quirk; "*" matches any model of that provider
    QUIRKS: dict[tuple[str, str], ProviderQuirk] = {
        (Provider.OPENAI, "gpt-5-mini"): ProviderQuirk(force_temperature=1.0, omit_top_p=True),
        (Provider.OPENAI, "*"): ProviderQuirk(omit_top_p=True),
    }

    # Providers with a native chat-completion fallback path
    FALLBACK_PROVIDERS = {Provider.OPENAI}

    @staticmethod
    def resolve(provider: str, model_name: str) -> str:
        """Return the gateway model id, e.g. ('OpenAI', 'gpt-5-mini') -> 'openai/gpt-5-mini'."""
        namespace = ModelResolver.NAMESPACES.get((provider or "").lower())
        if namespace is None:
            return model_name
        return f"{namespace}/{model_name}"

    @staticmethod
    def get_quirk(provider: str, model_name: str) -> ProviderQuirk:
        """Look up the quirk for an exact model first, then the provider wildcard."""
        provider = (provider or "").lower()
        quirk = ModelResolver.QUIRKS.get((provider, model_name))
        if quirk is None:
            quirk = ModelResolver.QUIRKS.get((provider, "*"), ProviderQuirk())
        return quirk

    @staticmethod
    def clamp_max_tokens(requested: Optional[int]) -> int:
        """Zero, negative or missing -> default; otherwise capped at the ceiling."""
        if not requested or requested <= 0:
            requested = Config.DEFAULT_MAX_TOKENS
        return max(1, min(requested, Config.MAX_TOKENS_CEILING))

    @staticmethod
    def resolve_generation_config(settings: ModelSettings) -> GenerationConfig:
        """Build the effective config sent to both primary and fallback calls."""
        quirk = ModelResolver.get_quirk(settings.provider, settings.model)

        temperature = settings.temperature
        if quirk.force_temperature is not None:
            if temperature != quirk.force_temperature:
                app_logger.debug(
                    f"Temperature {temperature} overridden to {quirk.force_temperature} "
                    f"for {settings.provider}/{settings.model}"
                )
            temperature = quirk.force_temperature

        return GenerationConfig(
            temperature=temperature,
            max_output_tokens=ModelResolver.clamp_max_tokens(settings.max_tokens),
            top_p=None if quirk.omit_top_p else settings.top_p
        )

    @staticmethod
    def has_native_fallback(provider: str) -> bool:
        """Whether the provider has a native chat-completion fallback."""
        return (provider or "").lower() in ModelResolver.FALLBACK_PROVIDERS
