"""
Provider backends.
ModelGateway is the unified multi-provider facade used for the primary call;
OpenAIChatFallback calls OpenAI's native chat-completion API directly.
"""
from typing import Any, Optional

import ollama
from openai import AsyncOpenAI

from config import Config
from models.generation_models import GenerationConfig
from utils.constants import Namespace, Role
from utils.http_client import HTTPClientManager
from utils.logger import app_logger


class ProviderError(Exception):
    """Raised when a provider cannot be called (missing key, unknown model)."""


def _prompt_messages(prompt: str, system: str) -> list[dict]:
    """System + single user message for backends that take a message list."""
    messages = []
    if system:
        messages.append({"role": Role.SYSTEM, "content": system})
    messages.append({"role": Role.USER, "content": prompt})
    return messages


class ModelGateway:
    """
    Unified generation facade dispatching on the model-id namespace.

    openai/<model>   -> OpenAI-compatible /chat/completions (raw choices JSON)
    googleai/<model> -> Gemini generateContent (raw candidates JSON)
    anything else    -> local Ollama ({"text": ...})
    """

    def __init__(self, ollama_client: Optional[ollama.AsyncClient] = None):
        self._ollama_client = ollama_client

    @staticmethod
    def split_model_id(model_id: str) -> tuple[str, str]:
        """Split 'namespace/model' for known namespaces; others route to Ollama unchanged."""
        namespace, sep, name = model_id.partition("/")
        if sep and namespace in (Namespace.OPENAI, Namespace.GOOGLE, Namespace.OLLAMA):
            return namespace, name
        return Namespace.OLLAMA, model_id

    async def generate(self, model_id: str, prompt: str, system: str, config: GenerationConfig) -> Any:
        """
        Generate a completion for a flat prompt and system instruction.

        Args:
            model_id: Provider-qualified model id
            prompt: Flat conversation prompt
            system: System instruction
            config: Effective sampling config

        Returns:
            Raw provider output, shape depends on the backend
        """
        namespace, name = self.split_model_id(model_id)
        app_logger.debug(f"Gateway dispatch: {namespace} -> {name}")

        if namespace == Namespace.OPENAI:
            return await self._generate_openai(name, prompt, system, config)
        if namespace == Namespace.GOOGLE:
            return await self._generate_gemini(name, prompt, system, config)
        return await self._generate_ollama(name, prompt, system, config)

    async def _generate_openai(self, model: str, prompt: str, system: str, config: GenerationConfig) -> dict:
        """Call an OpenAI-compatible chat completions endpoint."""
        if not Config.OPENAI_API_KEY:
            raise ProviderError("OPENAI_API_KEY is not configured")

        payload = {
            "model": model,
            "messages": _prompt_messages(prompt, system),
            "temperature": config.temperature,
            "max_completion_tokens": config.max_output_tokens,
        }
        if config.top_p is not None:
            payload["top_p"] = config.top_p

        client = HTTPClientManager.get_provider_client()
        response = await client.post(
            f"{Config.OPENAI_BASE_URL.rstrip('/')}/chat/completions",
            headers={"Authorization": f"Bearer {Config.OPENAI_API_KEY}"},
            json=payload
        )
        response.raise_for_status()
        return response.json()

    async def _generate_gemini(self, model: str, prompt: str, system: str, config: GenerationConfig) -> dict:
        """Call the Gemini generateContent REST endpoint."""
        if not Config.GEMINI_API_KEY:
            raise ProviderError("GEMINI_API_KEY is not configured")

        generation_config = {
            "temperature": config.temperature,
            "maxOutputTokens": config.max_output_tokens,
        }
        if config.top_p is not None:
            generation_config["topP"] = config.top_p

        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}

        client = HTTPClientManager.get_provider_client()
        response = await client.post(
            f"{Config.GEMINI_BASE_URL.rstrip('/')}/models/{model}:generateContent",
            headers={"x-goog-api-key": Config.GEMINI_API_KEY},
            json=payload
        )
        response.raise_for_status()
        return response.json()

    async def _generate_ollama(self, model: str, prompt: str, system: str, config: GenerationConfig) -> dict:
        """Call a local Ollama model."""
        if self._ollama_client is None:
            self._ollama_client = ollama.AsyncClient(host=Config.OLLAMA_HOST, timeout=Config.PROVIDER_TIMEOUT)

        options = {
            "temperature": config.temperature,
            "num_predict": config.max_output_tokens,
        }
        if config.top_p is not None:
            options["top_p"] = config.top_p

        response = await self._ollama_client.chat(
            model=model,
            messages=_prompt_messages(prompt, system),
            options=options
        )
        return {"text": response['message']['content'], "model": model}


class OpenAIChatFallback:
    """Direct OpenAI chat-completion client used when the gateway yields no text."""

    def __init__(self, client: Optional[AsyncOpenAI] = None):
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not Config.OPENAI_API_KEY:
                raise ProviderError("OPENAI_API_KEY is not configured")
            self._client = AsyncOpenAI(
                api_key=Config.OPENAI_API_KEY,
                timeout=Config.PROVIDER_TIMEOUT,
                max_retries=0
            )
        return self._client

    async def create_completion(self, model: str, messages: list[dict], config: GenerationConfig) -> dict:
        """
        Create a chat completion with the structured message list.

        top_p is never sent; this API path does not accept it for the models we target.

        Returns:
            The completion as a plain dict (choices shape)
        """
        client = self._get_client()
        completion = await client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=config.temperature,
            max_completion_tokens=config.max_output_tokens
        )
        return completion.model_dump()
