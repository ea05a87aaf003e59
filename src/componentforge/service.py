"""
Component operations exposed to the UI boundary.

The service validates input, runs the generator, keeps the version history
and persists through the injected :class:`~componentforge.store.Store`.
Payloads are plain dictionaries with camelCase keys.
"""

import logging
import math
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as SchemaError

from . import versions
from .errors import (
    ComponentLimitReached,
    ComponentNotFound,
    FallbackDisabled,
    GenerationError,
    StaleWrite,
    ValidationError,
)
from .generator import Generator
from .models import (
    COMPONENT_TYPES,
    CodeBundle,
    Component,
    GenerationRequest,
    GenerationResult,
    Preset,
)
from .store import Store

logger = logging.getLogger(__name__)

MAX_COMPONENTS_PER_USER = 100
MIN_PROMPT_LENGTH = 2
MIN_UPDATE_PROMPT_LENGTH = 5
MAX_PROMPT_LENGTH = 1000
MAX_NAME_LENGTH = 50
ALLOWED_PRESETS = tuple(p.value for p in Preset)
# Attempts at finding a free id when concurrent creates race for the same one.
MAX_ID_ATTEMPTS = 3


class ComponentRequest(BaseModel):
    """Fields shared by create and update requests. Text is trimmed first."""

    preset: Preset = Preset.REACT

    @field_validator("prompt", "name", mode="before", check_fields=False)
    @classmethod
    def _strip(cls, value):
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value


class CreateComponentRequest(ComponentRequest):
    prompt: str = Field(min_length=MIN_PROMPT_LENGTH, max_length=MAX_PROMPT_LENGTH)
    name: str = Field("", max_length=MAX_NAME_LENGTH)


class UpdateComponentRequest(ComponentRequest):
    prompt: str = Field(
        min_length=MIN_UPDATE_PROMPT_LENGTH, max_length=MAX_PROMPT_LENGTH
    )


def _describe(error: Dict[str, Any]) -> str:
    field = error["loc"][0] if error["loc"] else "input"
    ctx = error.get("ctx") or {}
    if field == "preset":
        return "Invalid preset. Must be " + " or ".join(ALLOWED_PRESETS)
    if error["type"].endswith("too_short"):
        return f"{field.capitalize()} must be at least {ctx['min_length']} characters"
    if error["type"].endswith("too_long"):
        return f"{field.capitalize()} must be at most {ctx['max_length']} characters"
    return f"Invalid {field}"


def validate(schema, **data):
    """Builds ``schema`` from ``data``, reporting the first problem as a
    :class:`~componentforge.errors.ValidationError`."""
    try:
        return schema(**data)
    except SchemaError as e:
        raise ValidationError(_describe(e.errors()[0])) from e


def format_component(component: Component) -> Dict[str, Any]:
    """Detail/list payload: the live bundle plus a count of stored versions."""
    return {
        "id": component.id,
        "name": component.name,
        "type": component.type,
        "presetType": component.preset.value,
        **component.bundle.model_dump(by_alias=True),
        "createdAt": component.created_at.isoformat(),
        "updatedAt": component.updated_at.isoformat(),
        "versions": len(component.versions),
    }


def format_version(version) -> Dict[str, Any]:
    payload = version.model_dump(by_alias=True, exclude={"created_at"})
    payload["createdAt"] = version.created_at.isoformat()
    return payload


class ComponentService:
    """Create, refine, browse and restore components for a user.

    Parameters
    ----------
    generator : Generator
        Produces the code bundles.
    store : Store
        Persists components. Concurrent refinements of one component are
        rejected by the store with :class:`~componentforge.errors.StaleWrite`.
    """

    def __init__(self, generator: Generator, store: Store) -> None:
        self.generator = generator
        self.store = store

    def _generate(self, request: GenerationRequest) -> GenerationResult:
        try:
            result = self.generator.generate(request)
        except GenerationError as e:
            logger.error(
                "Generation failed: %s (body=%r)", e, getattr(e, "body", None)
            )
            raise FallbackDisabled("Component generation failed") from e
        if result.used_fallback:
            logger.info("Served a mock bundle for %r", request.prompt)
        return result

    def _load(self, user_id: str, component_id: str) -> Component:
        component = self.store.load_component(user_id, component_id)
        if component is None:
            raise ComponentNotFound("Component not found")
        return component

    def _save_new(self, user_id: str, component: Component) -> Component:
        """Saves a freshly created component, moving to the next free id if a
        concurrent create took this one while the bundle was generated."""
        for _ in range(MAX_ID_ATTEMPTS - 1):
            try:
                return self.store.save_component(user_id, component)
            except StaleWrite:
                logger.warning(
                    "Component id %s was taken, allocating another", component.id
                )
                component.id = self.store.get_next_component_id(user_id)
        return self.store.save_component(user_id, component)

    def create_component(
        self,
        user_id: str,
        prompt: str,
        name: Optional[str] = None,
        preset: str = "REACT",
    ) -> Dict[str, Any]:
        request = validate(
            CreateComponentRequest, prompt=prompt, name=name, preset=preset
        )
        if self.store.count_components(user_id) >= MAX_COMPONENTS_PER_USER:
            raise ComponentLimitReached(
                f"Component limit reached (max {MAX_COMPONENTS_PER_USER})"
            )

        result = self._generate(
            GenerationRequest(prompt=request.prompt, preset=request.preset)
        )
        component = Component(
            id=self.store.get_next_component_id(user_id),
            user_id=user_id,
            name=request.name or result.bundle.component_name,
            preset=request.preset,
            bundle=result.bundle,
        )
        component.record_exchange(request.prompt, result.explanation)
        saved = self._save_new(user_id, component)
        logger.info("Created component %s for user %s", saved.id, user_id)
        return {**format_component(saved), "message": "Component created successfully"}

    def update_component(
        self, user_id: str, component_id: str, prompt: str, preset: str = "REACT"
    ) -> Dict[str, Any]:
        request = validate(UpdateComponentRequest, prompt=prompt, preset=preset)
        component = self._load(user_id, component_id)

        result = self._generate(
            GenerationRequest(
                prompt=request.prompt,
                existing_code=component.bundle,
                preset=request.preset,
            )
        )
        versions.apply(component, result.bundle)
        component.preset = request.preset
        component.record_exchange(request.prompt, result.explanation)
        saved = self.store.save_component(user_id, component)
        return {**format_component(saved), "message": "Component updated successfully"}

    def list_components(
        self,
        user_id: str,
        page: int = 1,
        limit: int = 10,
        search: str = "",
        type: Optional[str] = None,
    ) -> Dict[str, Any]:
        if page < 1 or limit < 1:
            raise ValidationError("Page and limit must be positive")
        if type is not None and type not in COMPONENT_TYPES:
            raise ValidationError(f"Unknown component type {type!r}")

        needle = search.strip().lower()
        matches = []
        for component_id in self.store.list_components(user_id):
            component = self.store.load_component(user_id, component_id)
            if component is None:
                continue
            if type and component.type != type:
                continue
            if needle and not _matches(component, needle):
                continue
            matches.append(component)

        start = (page - 1) * limit
        return {
            "total": len(matches),
            "page": page,
            "pages": math.ceil(len(matches) / limit),
            "components": [format_component(c) for c in matches[start : start + limit]],
        }

    def get_component(self, user_id: str, component_id: str) -> Dict[str, Any]:
        return format_component(self._load(user_id, component_id))

    def get_versions(self, user_id: str, component_id: str) -> Dict[str, Any]:
        component = self._load(user_id, component_id)
        return {"versions": [format_version(v) for v in component.versions]}

    def get_chat_history(self, user_id: str, component_id: str):
        return self._load(user_id, component_id).chat_history

    def delete_component(self, user_id: str, component_id: str) -> Dict[str, Any]:
        if not self.store.delete_component(user_id, component_id):
            raise ComponentNotFound("Component not found")
        return {"message": "Component deleted successfully", "deletedId": component_id}

    def restore_version(
        self, user_id: str, component_id: str, version_id: str
    ) -> Dict[str, Any]:
        component = self._load(user_id, component_id)
        bundle: CodeBundle = versions.restore(component, version_id)
        versions.apply(component, bundle)
        saved = self.store.save_component(user_id, component)
        logger.info("Restored version %s of component %s", version_id, component_id)
        return {**format_component(saved), "message": "Version restored successfully"}


def _matches(component: Component, needle: str) -> bool:
    if needle in component.name.lower():
        return True
    return any(needle in entry.content.lower() for entry in component.chat_history)
