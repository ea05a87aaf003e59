"""Exception hierarchy shared by every Componentforge pillar."""

from typing import Optional


class ComponentForgeError(Exception):
    """Base class for all errors raised by Componentforge."""


class ValidationError(ComponentForgeError):
    """Raised at the boundary when a request has a bad shape or length."""


class ComponentLimitReached(ValidationError):
    """Raised when a user already owns the maximum number of components."""


class GenerationError(ComponentForgeError):
    """Base class for failures while producing a code bundle."""


class ProviderError(GenerationError):
    """The model provider could not be reached or answered with an error.

    Parameters
    ----------
    message : str
        Short description of the failure.
    status_code : int, optional
        HTTP status returned by the provider, if any.
    body : Any, optional
        Raw upstream error body. Logged, never shown to end users.
    """

    def __init__(
        self, message: str, status_code: Optional[int] = None, body=None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class GenerationInvalid(GenerationError):
    """The provider answered, but the content is not a usable bundle."""


class MalformedResponseError(GenerationInvalid):
    """The raw reply could not be decoded into the expected JSON object."""


class IncompleteResponseError(GenerationInvalid):
    """The reply decoded, but ``jsx`` or ``css`` is missing or empty."""


class FallbackDisabled(GenerationError):
    """Generation failed and the fallback generator was not allowed to run."""


class ComponentNotFound(ComponentForgeError):
    """No component with the given id exists for the user."""


class VersionNotFound(ComponentForgeError):
    """The component has no stored version with the given id."""


class StaleWrite(ComponentForgeError):
    """A component was saved from an outdated copy of the stored record."""
