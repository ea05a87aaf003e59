"""
The generation orchestrator.

A :class:`Generator` turns a :class:`~componentforge.models.GenerationRequest`
into a :class:`~componentforge.models.GenerationResult`. Each call is an
independent run: the generator keeps no per-request state, holds no locks and
never persists anything, so one instance can serve concurrent requests.
"""

import logging
from typing import Dict, List, Optional

from . import fallback, parser, presets
from .config import Settings
from .errors import GenerationError, ProviderError
from .llm import LLM
from .models import FallbackPolicy, GenerationRequest, GenerationResult, Preset

logger = logging.getLogger(__name__)


def build_user_message(request: GenerationRequest, config: presets.PresetConfig) -> str:
    if request.is_refinement:
        existing = request.existing_code
        return (
            f'Refine this component based on: "{request.prompt}"\n\n'
            f"Current JSX:\n{existing.jsx_code}\n\n"
            f"Current CSS:\n{existing.css_code}"
        )
    return f'Create a new {config.label} component based on: "{request.prompt}"'


def build_messages(request: GenerationRequest) -> List[Dict[str, str]]:
    """The system and user messages sent to the provider for ``request``."""
    config = presets.resolve(request.preset)
    return [
        {"role": "system", "content": config.instructions()},
        {"role": "user", "content": build_user_message(request, config)},
    ]


class Generator:
    """Runs one request through the provider, parser and fallback.

    Parameters
    ----------
    llm : LLM
        Provider used for the real generation.
    model : str, optional
        Model id passed to the provider. Defaults to the provider's own.
    fallback_policy : FallbackPolicy, default=FallbackPolicy.ALWAYS
        ``NEVER`` re-raises provider and parse failures instead of serving a
        mock bundle.
    """

    def __init__(
        self,
        llm: LLM,
        model: Optional[str] = None,
        fallback_policy: FallbackPolicy = FallbackPolicy.ALWAYS,
    ) -> None:
        self.llm = llm
        self.model = model
        self.fallback_policy = FallbackPolicy(fallback_policy)

    @classmethod
    def from_settings(cls, settings: Settings, llm: LLM) -> "Generator":
        return cls(llm, model=settings.model, fallback_policy=settings.fallback_policy)

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """Produces a bundle for ``request``.

        Returns
        -------
        GenerationResult
            Always fully populated. ``used_fallback`` tells whether the
            offline generator produced the bundle.

        Raises
        ------
        ProviderError, MalformedResponseError, IncompleteResponseError
            Only when the fallback policy is ``NEVER``.
        """
        preset = request.preset
        refinement = request.is_refinement
        messages = build_messages(request)

        try:
            raw = self.llm.complete(
                messages[0]["content"], messages[1]["content"], self.model
            )
        except ProviderError as e:
            logger.warning(
                "Provider call failed (status=%s): %s; body=%r",
                e.status_code,
                e,
                e.body,
            )
            return self._recover(request, e, preset)

        outcome = parser.decode(raw)
        if not outcome.ok:
            logger.warning("Invalid model reply: %s", outcome.error)
            logger.debug("Rejected reply body: %r", raw)
            return self._recover(request, outcome.error, preset)

        response = outcome.response
        logger.info(
            "Generated %s component %s",
            "refined" if refinement else "new",
            response.bundle.component_name,
        )
        return GenerationResult(
            bundle=response.bundle,
            explanation=response.explanation,
            used_fallback=False,
            is_refinement=refinement,
            preset=preset,
        )

    def _recover(
        self, request: GenerationRequest, error: GenerationError, preset: Preset
    ) -> GenerationResult:
        if self.fallback_policy is FallbackPolicy.NEVER:
            logger.error("Fallback disabled, propagating %s", type(error).__name__)
            raise error

        logger.warning("Using mock generator as fallback")
        bundle = fallback.generate_mock(request.prompt, request.existing_code)
        return GenerationResult(
            bundle=bundle,
            explanation=fallback.describe_mock(bundle, request.is_refinement),
            used_fallback=True,
            is_refinement=request.is_refinement,
            preset=preset,
        )
