"""
Turns raw model output into a validated code bundle.

Decoding is strict: the reply must be a JSON object whose fields are strings.
Code payloads are treated as opaque text and passed through unchanged.
"""

import json
from typing import Optional

from pydantic import BaseModel, ConfigDict, StrictStr
from pydantic import ValidationError as SchemaError

from .errors import GenerationInvalid, IncompleteResponseError, MalformedResponseError
from .models import CodeBundle

DEFAULT_COMPONENT_NAME = "MyComponent"
DEFAULT_TESTS = "// Test file would be generated here"
DEFAULT_STORYBOOK = "// Storybook story would be generated here"
DEFAULT_EXPLANATION = "Component generated successfully"


class ModelReply(BaseModel):
    """The JSON object the presets ask the model to answer with."""

    model_config = ConfigDict(extra="ignore")

    componentName: Optional[StrictStr] = None
    jsx: Optional[StrictStr] = None
    css: Optional[StrictStr] = None
    tests: Optional[StrictStr] = None
    storybook: Optional[StrictStr] = None
    explanation: Optional[StrictStr] = None


class ParsedResponse(BaseModel):
    bundle: CodeBundle
    explanation: str


class ParseOutcome(BaseModel):
    """Tagged result of :func:`decode`: exactly one of the fields is set."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    response: Optional[ParsedResponse] = None
    error: Optional[GenerationInvalid] = None

    @property
    def ok(self) -> bool:
        return self.response is not None


def _load(raw_text: str) -> ModelReply:
    try:
        data = json.loads(raw_text)
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"Reply is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"Reply must be a JSON object, got {type(data).__name__}"
        )
    try:
        return ModelReply.model_validate(data)
    except SchemaError as e:
        raise MalformedResponseError(
            f"Reply does not match the expected shape: {e.error_count()} error(s)"
        ) from e


def parse_response(raw_text: str) -> ParsedResponse:
    """Validates ``raw_text`` and fills defaults for the optional fields.

    Raises
    ------
    MalformedResponseError
        If the text is not a JSON object of string fields.
    IncompleteResponseError
        If ``jsx`` or ``css`` is missing or empty.
    """
    reply = _load(raw_text)
    missing = [field for field in ("jsx", "css") if not getattr(reply, field)]
    if missing:
        raise IncompleteResponseError(
            f"Reply is missing required code sections: {', '.join(missing)}"
        )

    bundle = CodeBundle(
        component_name=reply.componentName or DEFAULT_COMPONENT_NAME,
        jsx_code=reply.jsx,
        css_code=reply.css,
        test_code=reply.tests or DEFAULT_TESTS,
        storybook_code=reply.storybook or DEFAULT_STORYBOOK,
    )
    return ParsedResponse(
        bundle=bundle, explanation=reply.explanation or DEFAULT_EXPLANATION
    )


def parse(raw_text: str) -> CodeBundle:
    """Returns the fully populated bundle contained in ``raw_text``."""
    return parse_response(raw_text).bundle


def decode(raw_text: str) -> ParseOutcome:
    """Like :func:`parse_response`, but reports invalid replies as a value."""
    try:
        return ParseOutcome(response=parse_response(raw_text))
    except GenerationInvalid as e:
        return ParseOutcome(error=e)
