"""
Offline, rule-based component generator.

Produces bundles with the same shape as a real provider result. In refinement
mode the existing code is kept byte for byte and only annotated.
"""

import re
from typing import Optional

from .models import CodeBundle

DEFAULT_NAME = "MyComponent"

_NAME_PATTERNS = (
    re.compile(r"(?:create|generate|make)\s+(?:a|an)\s+([^\s]+)", re.IGNORECASE),
    re.compile(r"component\s+named?\s+([^\s]+)", re.IGNORECASE),
)

JSX_TEMPLATE = """import React from 'react';
import styles from './{name}.module.css';

interface {name}Props {{
  /**
   * Component children
   */
  children?: React.ReactNode;

  /**
   * Visual variant
   * @default 'primary'
   */
  variant?: 'primary' | 'secondary';

  /**
   * Click handler
   */
  onClick?: () => void;
}}

/**
 * {name} component
 */
const {name} = ({{
  children,
  variant = 'primary',
  onClick
}}: {name}Props) => {{
  return (
    <div className={{styles.container}} data-testid="{test_id}">
      <button
        className={{`${{styles.button}} ${{styles[variant]}}`}}
        onClick={{onClick}}
        aria-label="{name} button"
      >
        {{children || 'Click Me'}}
      </button>
    </div>
  );
}};

export default {name};"""

CSS_TEMPLATE = """.container {
  padding: 1rem;
  display: flex;
  justify-content: center;
}

.button {
  padding: 0.75rem 1.5rem;
  border: none;
  border-radius: 0.5rem;
  font-size: 1rem;
  cursor: pointer;
  transition: all 0.2s ease;
}

.primary {
  background-color: #3b82f6;
  color: white;
}

.secondary {
  background-color: #e2e8f0;
  color: #1e293b;
}

@media (max-width: 768px) {
  .button {
    padding: 0.5rem 1rem;
    font-size: 0.875rem;
  }
}"""

TEST_TEMPLATE = """import React from 'react';
import {{ render, screen }} from '@testing-library/react';
import {name} from './{name}';

describe('{name}', () => {{
  it('renders correctly', () => {{
    render(<{name} />);
    expect(screen.getByTestId('{test_id}')).toBeInTheDocument();
  }});
}});"""

STORY_TEMPLATE = """import React from 'react';
import {name} from './{name}';

export default {{
  title: 'Components/{name}',
  component: {name},
}};

const Template = (args) => <{name} {{...args}} />;

export const Primary = Template.bind({{}});
Primary.args = {{
  variant: 'primary',
  children: 'Primary Button'
}};

export const Secondary = Template.bind({{}});
Secondary.args = {{
  variant: 'secondary',
  children: 'Secondary Button'
}};"""


def extract_component_name(prompt: str) -> str:
    """Derives a PascalCase component name from the prompt.

    >>> extract_component_name("create a Button with an icon")
    'Button'
    >>> extract_component_name("a component named nav-bar")
    'Navbar'
    >>> extract_component_name("something red")
    'MyComponent'
    """
    for pattern in _NAME_PATTERNS:
        match = pattern.search(prompt)
        if match:
            name = re.sub(r"[^a-zA-Z0-9]", "", match.group(1))
            if name:
                return name[0].upper() + name[1:]
    return DEFAULT_NAME


def annotate(code: str, prompt: str) -> str:
    return f"{code}\n\n/* Modified: {prompt} */"


def build_bundle(name: str) -> CodeBundle:
    """The fixed template bundle for ``name``."""
    params = {"name": name, "test_id": name.lower()}
    return CodeBundle(
        component_name=name,
        jsx_code=JSX_TEMPLATE.format(**params),
        css_code=CSS_TEMPLATE,
        test_code=TEST_TEMPLATE.format(**params),
        storybook_code=STORY_TEMPLATE.format(**params),
    )


def generate_mock(prompt: str, existing_code: Optional[CodeBundle] = None) -> CodeBundle:
    """Generates a bundle without any network access.

    Parameters
    ----------
    prompt : str
        The user's request.
    existing_code : CodeBundle, optional
        The current bundle. When both its markup and styles are present the
        call is a refinement: the code is annotated with the prompt instead
        of being replaced.

    Returns
    -------
    CodeBundle
        A fully populated bundle.
    """
    if existing_code is None or not existing_code.is_complete:
        return build_bundle(extract_component_name(prompt))

    name = existing_code.component_name or DEFAULT_NAME
    template = build_bundle(name)
    return CodeBundle(
        component_name=name,
        jsx_code=annotate(existing_code.jsx_code, prompt),
        css_code=annotate(existing_code.css_code, prompt),
        test_code=existing_code.test_code or template.test_code,
        storybook_code=existing_code.storybook_code or template.storybook_code,
    )


def describe_mock(bundle: CodeBundle, refinement: bool) -> str:
    verb = "refined" if refinement else "created"
    return f"Mock {verb} {bundle.component_name} component"
