"""
Core pytest configuration and fixtures for Componentforge testing.

This module provides shared test fixtures, configuration, and utilities
that support the pillar-based testing architecture.
"""

import json
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from componentforge.errors import ProviderError
from componentforge.llm import LLM
from componentforge.models import CodeBundle, Component

# ===== TEST DATA FIXTURES =====


@pytest.fixture
def sample_bundle() -> CodeBundle:
    """A complete bundle, as a provider would return it."""
    return CodeBundle(
        component_name="Card",
        jsx_code="const Card = () => <div className={styles.card} />;",
        css_code=".card { padding: 1rem; }",
        test_code="it('renders', () => {});",
        storybook_code="export default { title: 'Card' };",
    )


@pytest.fixture
def sample_component(sample_bundle) -> Component:
    """A stored component with no history yet."""
    return Component(id="001", user_id="test_user", name="Card", bundle=sample_bundle)


@pytest.fixture
def reply_payload() -> Dict[str, str]:
    """A well-formed provider reply before JSON encoding."""
    return {
        "componentName": "Button",
        "jsx": "export const Button = () => <button>`Hi` ✨</button>;",
        "css": ".button {\n  color: red;\n}",
        "tests": "test('Button', () => {});",
        "storybook": "export default { title: 'Button' };",
        "explanation": "A red button",
    }


@pytest.fixture
def valid_reply(reply_payload) -> str:
    return json.dumps(reply_payload)


# ===== DIRECTORY FIXTURES =====


@pytest.fixture
def temp_dir():
    """Temporary directory for file-based tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ===== MOCK FIXTURES =====


@pytest.fixture
def mock_llm(valid_reply):
    """Mock LLM provider answering with a valid reply."""
    mock = MagicMock(spec=LLM)
    mock.complete.return_value = valid_reply
    return mock


@pytest.fixture
def failing_llm():
    """Mock LLM provider that cannot be reached."""
    mock = MagicMock(spec=LLM)
    mock.complete.side_effect = ProviderError(
        "Provider returned status 503",
        status_code=503,
        body={"error": "secret upstream details"},
    )
    return mock


class ScriptedLLM(LLM):
    """A concrete provider that replays canned replies, one per call."""

    def __init__(self, replies: List[Any]):
        self.replies = list(replies)
        self.calls: List[List[Dict[str, Any]]] = []
        self.model = "scripted"

    def generate_response(self, messages, model=None, **kwargs):
        self.calls.append(messages)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return {"content": reply}

    def extract_content(self, response) -> Optional[str]:
        return response["content"]


@pytest.fixture
def scripted_llm():
    """Factory for :class:`ScriptedLLM` instances."""
    return ScriptedLLM


# ===== APP FIXTURES =====


@pytest.fixture
def test_app():
    """
    Provides a ComponentForge app instance with simple, predictable pillars.

    The offline provider makes every generation go through the fallback, so
    no network access is needed.
    """
    from componentforge import ComponentForge
    from componentforge.auth import SingleUser
    from componentforge.config import Settings
    from componentforge.llm import Offline
    from componentforge.store import InMemory

    return ComponentForge(
        settings=Settings(),
        llm=Offline(),
        store=InMemory(),
        auth=SingleUser(user_id="test_user"),
    )


# ===== CONFIGURATION =====


def pytest_configure(config):
    """Pytest configuration."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on location."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
