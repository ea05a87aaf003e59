"""Concrete implementations for LLM providers."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .config import OPENROUTER_BASE_URL, Settings
from .errors import ProviderError

logger = logging.getLogger(__name__)

JSON_OBJECT = {"type": "json_object"}


class LLM(ABC):
    """Abstract Base Class for all LLM providers."""

    @abstractmethod
    def generate_response(
        self, messages: List[Dict[str, Any]], model: str, **kwargs: Any
    ) -> Any:
        """Sends one chat request to the provider.

        Parameters
        ----------
        messages : List[Dict[str, Any]]
            ``{"role", "content"}`` dictionaries, system message first.
        model : str
            The specific model to use for the generation.
        **kwargs : Any
            Provider-specific parameters passed directly to the SDK.

        Returns
        -------
        Any
            The provider's native response object.

        Raises
        ------
        ProviderError
            On any transport failure, timeout or non-success status.
        """
        pass

    @abstractmethod
    def extract_content(self, response: Any) -> Optional[str]:
        """Extracts the text content from the provider's native response."""
        pass

    def complete(
        self, system_message: str, user_message: str, model: Optional[str] = None
    ) -> str:
        """Runs a single system+user exchange and returns the raw reply text.

        No retries are attempted. Each call costs one provider request.
        """
        messages = [
            {"role": "system", "content": system_message},
            {"role": "user", "content": user_message},
        ]
        response = self.generate_response(messages, model)
        content = self.extract_content(response)
        if not content:
            raise ProviderError("Provider returned an empty completion")
        return content


class OpenAI(LLM):
    """Chat completions through the ``openai`` SDK.

    The client is built with ``max_retries=0`` and a fixed timeout, so a hung
    provider surfaces as a :class:`ProviderError` after ``settings.timeout``
    seconds.
    """

    def __init__(self, settings: Settings, base_url: Optional[str] = None):
        from openai import OpenAI

        self.settings = settings
        self.model = settings.model
        self.client = OpenAI(
            base_url=base_url,
            api_key=settings.api_key,
            timeout=settings.timeout,
            max_retries=0,
            default_headers=self.default_headers(),
        )

    def default_headers(self) -> Dict[str, str]:
        return {}

    def generate_response(
        self, messages: List[Dict[str, Any]], model: Optional[str] = None, **kwargs
    ) -> Any:
        import openai

        kwargs.setdefault("response_format", JSON_OBJECT)
        kwargs.setdefault("temperature", self.settings.temperature)
        kwargs.setdefault("max_tokens", self.settings.max_tokens)
        try:
            return self.client.chat.completions.create(
                model=model or self.model, messages=messages, **kwargs
            )
        except openai.APITimeoutError as e:
            raise ProviderError(
                f"Provider did not answer within {self.settings.timeout}s"
            ) from e
        except openai.APIStatusError as e:
            raise ProviderError(
                f"Provider returned status {e.status_code}",
                status_code=e.status_code,
                body=e.body,
            ) from e
        except openai.APIError as e:
            raise ProviderError(f"Provider request failed: {e.message}") from e

    def extract_content(self, response: Any) -> Optional[str]:
        if not response.choices:
            return None
        return response.choices[0].message.content


class OpenRouter(OpenAI):
    """OpenAI-compatible access to the models hosted on OpenRouter."""

    def __init__(self, settings: Settings):
        super().__init__(settings, base_url=settings.base_url or OPENROUTER_BASE_URL)

    def default_headers(self) -> Dict[str, str]:
        return {
            "HTTP-Referer": self.settings.app_url,
            "X-Title": self.settings.app_title,
        }


class Offline(LLM):
    """Provider used when no API key is configured. Every call fails."""

    def __init__(self, reason: str = "No API key configured"):
        self.reason = reason
        self.model = "offline"

    def generate_response(self, messages, model=None, **kwargs):
        raise ProviderError(self.reason)

    def extract_content(self, response: Any) -> Optional[str]:
        return None


def from_settings(settings: Settings) -> LLM:
    """Picks OpenRouter when credentials exist, otherwise :class:`Offline`."""
    if not settings.api_key:
        logger.warning("No API key configured, generation will use the fallback")
        return Offline()
    return OpenRouter(settings)
