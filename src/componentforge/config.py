"""Explicit runtime configuration for Componentforge."""

import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from .models import FallbackPolicy

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "meta-llama/llama-3-70b-instruct"
PRODUCTION = "production"


class Settings(BaseModel):
    """Configuration passed into the LLM client and the generator.

    Nothing in the package reads the process environment except
    :meth:`Settings.from_env`.
    """

    api_key: Optional[str] = None
    base_url: str = OPENROUTER_BASE_URL
    model: str = DEFAULT_MODEL
    temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(3000, gt=0)
    timeout: float = Field(60.0, gt=0)
    environment: str = "development"
    app_url: str = "http://localhost:8050"
    app_title: str = "Componentforge"
    fallback: Optional[FallbackPolicy] = None

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == PRODUCTION

    @property
    def fallback_policy(self) -> FallbackPolicy:
        """The explicit policy if set, otherwise NEVER in production."""
        if self.fallback is not None:
            return self.fallback
        if self.is_production:
            return FallbackPolicy.NEVER
        return FallbackPolicy.ALWAYS

    @classmethod
    def from_env(cls, dotenv: bool = True, **overrides) -> "Settings":
        """Builds settings from environment variables (and a ``.env`` file).

        Parameters
        ----------
        dotenv : bool, default=True
            Load a ``.env`` file from the working directory first.
        **overrides
            Field values that win over the environment.
        """
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))

        values = {}
        env_map = {
            "api_key": "OPENROUTER_API_KEY",
            "base_url": "COMPONENTFORGE_BASE_URL",
            "model": "COMPONENTFORGE_MODEL",
            "temperature": "COMPONENTFORGE_TEMPERATURE",
            "max_tokens": "COMPONENTFORGE_MAX_TOKENS",
            "timeout": "COMPONENTFORGE_TIMEOUT",
            "environment": "COMPONENTFORGE_ENV",
            "app_url": "COMPONENTFORGE_APP_URL",
            "fallback": "COMPONENTFORGE_FALLBACK",
        }
        for field, var in env_map.items():
            value = os.environ.get(var)
            if value:
                values[field] = value.upper() if field == "fallback" else value
        values.update(overrides)
        return cls(**values)
