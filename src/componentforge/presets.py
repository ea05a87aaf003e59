"""
Preset registry: maps a preset name to its generation contract.

The registry is static configuration. Unknown names resolve to the REACT
preset so a stray preset string never fails a generation on its own.
"""

import json
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict

from .models import Preset, to_preset


class PresetConfig(BaseModel):
    """System instructions plus the JSON shape the model must answer with."""

    model_config = ConfigDict(frozen=True)

    preset: Preset
    label: str
    system_message: str
    response_shape: Dict[str, str]

    def instructions(self) -> str:
        """The full system message sent to the model."""
        return (
            self.system_message
            + "\n\nResponse MUST be valid JSON matching this structure:\n"
            + json.dumps(self.response_shape, indent=2)
        )


PRESETS: Dict[Preset, PresetConfig] = {
    Preset.REACT: PresetConfig(
        preset=Preset.REACT,
        label="React",
        system_message="""You are an expert React/Next.js component generator. Follow these rules:
1. Generate clean, production-ready functional components
2. Use React 18+ best practices
3. Include TypeScript types for all props
4. Use CSS Modules for styling
5. Make components accessible (a11y compliant)
6. Add JSDoc comments for props
7. Support responsive design
8. Include unit test boilerplate and a Storybook story
9. For refinements, preserve existing functionality while making requested changes""",
        response_shape={
            "componentName": "PascalCaseName",
            "jsx": "component code",
            "css": "css module code",
            "tests": "test code",
            "storybook": "Storybook story",
            "explanation": "brief description",
        },
    ),
    Preset.MUI: PresetConfig(
        preset=Preset.MUI,
        label="Material-UI",
        system_message="""You are an expert Material-UI component generator. Follow these rules:
1. Use latest MUI (v5+) components
2. Follow MUI design guidelines and the theme's design tokens
3. Include TypeScript types for all props
4. Support theme customization with CSS-in-JS styling
5. Make components accessible
6. Add prop comments
7. Include responsive behavior
8. Include unit test boilerplate and a Storybook story
9. For refinements, preserve existing functionality while making requested changes""",
        response_shape={
            "componentName": "PascalCaseName",
            "jsx": "component code using MUI",
            "css": "CSS-in-JS styles",
            "tests": "test code",
            "storybook": "Storybook story",
            "explanation": "brief description",
        },
    ),
}


def resolve(preset_name: Optional[Union[str, Preset]]) -> PresetConfig:
    """Returns the generation contract for ``preset_name``.

    Parameters
    ----------
    preset_name : str or Preset, optional
        Preset to look up. Matching is case-insensitive.

    Returns
    -------
    PresetConfig
        The matching config, or the REACT config for anything unknown.
    """
    return PRESETS[to_preset(preset_name)]
