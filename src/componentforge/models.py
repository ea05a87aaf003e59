"""
Defines the core Pydantic data models for the application.

These models are the data contract between the generator, the version store,
the persistence layer and the UI. Field names are snake_case in Python; the
camelCase aliases are what the boundary payloads use.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- Constants ---
USER_ROLE = "user"
AI_ROLE = "ai"
Role = Literal[USER_ROLE, AI_ROLE]

COMPONENT_TYPES = ("button", "card", "modal", "form", "layout", "custom")
ComponentType = Literal["button", "card", "modal", "form", "layout", "custom"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Preset(str, Enum):
    """Named generation contracts."""

    REACT = "REACT"
    MUI = "MUI"


def to_preset(value) -> Preset:
    """Normalizes a preset name, mapping anything unknown to REACT."""
    if isinstance(value, Preset):
        return value
    if isinstance(value, str):
        try:
            return Preset(value.strip().upper())
        except ValueError:
            pass
    return Preset.REACT


class FallbackPolicy(str, Enum):
    """Whether generation failures may be masked by the offline generator."""

    ALWAYS = "ALWAYS"
    NEVER = "NEVER"


# --- Models ---
class CodeBundle(BaseModel):
    """The generated code artifacts for one component revision."""

    model_config = ConfigDict(populate_by_name=True)

    component_name: str = Field("MyComponent", alias="componentName")
    jsx_code: str = Field("", alias="jsxCode")
    css_code: str = Field("", alias="cssCode")
    test_code: str = Field("", alias="testCode")
    storybook_code: str = Field("", alias="storybookCode")

    @property
    def is_complete(self) -> bool:
        """True when both markup and styles are present."""
        return bool(self.jsx_code) and bool(self.css_code)


class GenerationRequest(BaseModel):
    """A single prompt to turn into a bundle. The prompt is stored trimmed."""

    prompt: str = Field(min_length=1)
    existing_code: Optional[CodeBundle] = None
    preset: Preset = Preset.REACT

    @field_validator("prompt", mode="before")
    @classmethod
    def _strip_prompt(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("preset", mode="before")
    @classmethod
    def _unknown_preset_is_react(cls, value):
        return to_preset(value)

    @property
    def is_refinement(self) -> bool:
        # A partially present bundle is treated as a fresh creation.
        return self.existing_code is not None and self.existing_code.is_complete


class GenerationResult(BaseModel):
    """The outcome of one generator run. Always carries a full bundle."""

    bundle: CodeBundle
    explanation: str
    used_fallback: bool = False
    is_refinement: bool = False
    preset: Preset = Preset.REACT
    generated_at: datetime = Field(default_factory=utcnow)


class VersionSnapshot(BaseModel):
    """An immutable copy of a bundle taken right before it was overwritten."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    component_name: str = Field("MyComponent", alias="componentName")
    jsx_code: str = Field("", alias="jsxCode")
    css_code: str = Field("", alias="cssCode")
    test_code: str = Field("", alias="testCode")
    storybook_code: str = Field("", alias="storybookCode")
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")

    def to_bundle(self) -> CodeBundle:
        return CodeBundle(
            component_name=self.component_name,
            jsx_code=self.jsx_code,
            css_code=self.css_code,
            test_code=self.test_code,
            storybook_code=self.storybook_code,
        )


class ChatEntry(BaseModel):
    """One line of the prompt/explanation log kept on a component."""

    role: Role
    content: str
    timestamp: datetime = Field(default_factory=utcnow)


class Component(BaseModel):
    """A persisted component: the live bundle plus its history."""

    id: str
    user_id: str
    name: str = Field(min_length=1)
    type: ComponentType = "custom"
    preset: Preset = Preset.REACT
    bundle: CodeBundle
    chat_history: List[ChatEntry] = Field(default_factory=list)
    versions: List[VersionSnapshot] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    revision: int = 0

    def record_exchange(self, prompt: str, explanation: str) -> None:
        """Appends the prompt and the generator's answer to the chat log."""
        self.chat_history.append(ChatEntry(role=USER_ROLE, content=prompt))
        self.chat_history.append(ChatEntry(role=AI_ROLE, content=explanation))
