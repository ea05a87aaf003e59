"""Unit tests for ComponentForge initialization and configuration."""

from unittest.mock import Mock

import pytest
from componentforge import ComponentForge
from componentforge.auth import SingleUser
from componentforge.config import Settings
from componentforge.generator import Generator
from componentforge.layout import Bootstrap
from componentforge.llm import Offline, OpenRouter
from componentforge.models import FallbackPolicy
from componentforge.service import ComponentService
from componentforge.store import File, InMemory


class TestComponentForgeInit:
    def test_default_pillars(self):
        app = ComponentForge(settings=Settings())

        assert isinstance(app.layout_builder, Bootstrap)
        assert isinstance(app.llm, Offline)
        assert isinstance(app.store, InMemory)
        assert isinstance(app.auth, SingleUser)
        assert isinstance(app.generator, Generator)
        assert isinstance(app.service, ComponentService)

    def test_settings_from_environment(self, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-env")
        app = ComponentForge()

        assert app.settings.api_key == "sk-env"
        assert isinstance(app.llm, OpenRouter)

    def test_api_key_selects_openrouter(self):
        app = ComponentForge(settings=Settings(api_key="sk-test"))
        assert isinstance(app.llm, OpenRouter)

    def test_production_generator_never_falls_back(self):
        app = ComponentForge(settings=Settings(environment="production"))
        assert app.generator.fallback_policy is FallbackPolicy.NEVER

    def test_custom_pillars(self, mock_llm, temp_dir):
        store = File(str(temp_dir))
        auth = SingleUser("someone")

        app = ComponentForge(settings=Settings(), llm=mock_llm, store=store, auth=auth)

        assert app.llm is mock_llm
        assert app.generator.llm is mock_llm
        assert app.store is store
        assert app.service.store is store
        assert app.auth is auth

    def test_custom_generator(self):
        generator = Generator(Offline(), fallback_policy=FallbackPolicy.NEVER)
        app = ComponentForge(settings=Settings(), generator=generator)

        assert app.generator is generator
        assert app.service.generator is generator

    def test_stylesheets_are_merged(self):
        app = ComponentForge(
            settings=Settings(), external_stylesheets=["https://example.com/x.css"]
        )
        stylesheets = app.config.external_stylesheets
        assert "https://example.com/x.css" in stylesheets
        assert len(stylesheets) == 2

    def test_callbacks_registered(self, test_app):
        assert len(test_app.callback_map) == 5


class TestLayoutValidation:
    def test_layout_missing_ids(self):
        from dash import html

        broken = Mock()
        broken.build_layout.return_value = html.Div(id="only-this")
        broken.get_external_stylesheets.return_value = []

        with pytest.raises(ValueError, match="prompt_textarea"):
            ComponentForge(settings=Settings(), layout=broken)

    def test_custom_layout_is_used(self):
        class Tweaked(Bootstrap):
            def build_header(self):
                from dash import html

                return html.Header("Custom header")

        app = ComponentForge(settings=Settings(), layout=Tweaked())
        assert isinstance(app.layout_builder, Tweaked)
