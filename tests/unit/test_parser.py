"""
Tests for the response parser.

The parser is the boundary between untrusted model output and the rest of the
system: it must accept every well-formed reply verbatim and reject everything
else with a typed error.
"""

import json

import pytest
from componentforge.errors import (
    GenerationInvalid,
    IncompleteResponseError,
    MalformedResponseError,
)
from componentforge.models import CodeBundle
from componentforge.parser import (
    DEFAULT_COMPONENT_NAME,
    DEFAULT_EXPLANATION,
    DEFAULT_STORYBOOK,
    DEFAULT_TESTS,
    decode,
    parse,
    parse_response,
)


class TestParseSuccess:
    """Well-formed replies become fully populated bundles."""

    def test_full_reply(self, valid_reply, reply_payload):
        bundle = parse(valid_reply)

        assert isinstance(bundle, CodeBundle)
        assert bundle.component_name == "Button"
        assert bundle.jsx_code == reply_payload["jsx"]
        assert bundle.css_code == reply_payload["css"]
        assert bundle.test_code == reply_payload["tests"]
        assert bundle.storybook_code == reply_payload["storybook"]

    def test_explanation_is_returned(self, valid_reply):
        response = parse_response(valid_reply)
        assert response.explanation == "A red button"

    @pytest.mark.parametrize(
        "jsx, css",
        [
            ("<div/>", "div{}"),
            ("line1\nline2\r\n\tindented", "/* comment */\n.a { b: c; }"),
            ("const s = `${x}` + \"quoted\" + '\\\\';", ".x::after { content: '\\201C'; }"),
            ("<p>héllo — 日本語 🎉</p>", ".p { font-family: 'Noto Sans'; }"),
            ("   leading and trailing spaces   ", "\n\n"),
        ],
    )
    def test_code_passes_through_verbatim(self, jsx, css):
        """Required code fields are never altered."""
        bundle = parse(json.dumps({"jsx": jsx, "css": css}))

        assert bundle.jsx_code == jsx
        assert bundle.css_code == css
        assert json.loads(json.dumps({"jsx": bundle.jsx_code, "css": bundle.css_code})) == {
            "jsx": jsx,
            "css": css,
        }

    def test_defaults_for_optional_fields(self):
        response = parse_response(json.dumps({"jsx": "<a/>", "css": "a{}"}))

        assert response.bundle.component_name == DEFAULT_COMPONENT_NAME
        assert response.bundle.test_code == DEFAULT_TESTS
        assert response.bundle.storybook_code == DEFAULT_STORYBOOK
        assert response.explanation == DEFAULT_EXPLANATION

    def test_empty_optional_fields_get_defaults(self):
        reply = {"jsx": "<a/>", "css": "a{}", "tests": "", "explanation": ""}
        response = parse_response(json.dumps(reply))

        assert response.bundle.test_code == DEFAULT_TESTS
        assert response.explanation == DEFAULT_EXPLANATION

    def test_unknown_keys_are_ignored(self):
        reply = {"jsx": "<a/>", "css": "a{}", "dependencies": ["react"], "extra": 1}
        assert parse(json.dumps(reply)).jsx_code == "<a/>"


class TestParseRejects:
    """Unusable replies raise, and never produce a half-filled bundle."""

    @pytest.mark.parametrize(
        "raw",
        ["", "   ", "not json", "{'jsx': 'single quotes'}", '{"jsx": "<a/>"', "null"],
    )
    def test_malformed_text(self, raw):
        with pytest.raises(MalformedResponseError):
            parse(raw)

    @pytest.mark.parametrize("raw", ["[]", '["<a/>", "a{}"]', '"just a string"', "42"])
    def test_non_object_json(self, raw):
        with pytest.raises(MalformedResponseError):
            parse(raw)

    def test_missing_jsx(self):
        with pytest.raises(IncompleteResponseError, match="jsx"):
            parse(json.dumps({"css": "a{}"}))

    def test_missing_css(self):
        with pytest.raises(IncompleteResponseError, match="css"):
            parse(json.dumps({"jsx": "<a/>"}))

    def test_empty_required_fields(self):
        with pytest.raises(IncompleteResponseError):
            parse(json.dumps({"jsx": "", "css": ""}))

    def test_null_required_field(self):
        with pytest.raises(IncompleteResponseError):
            parse(json.dumps({"jsx": None, "css": "a{}"}))

    @pytest.mark.parametrize(
        "reply",
        [
            {"jsx": 123, "css": "a{}"},
            {"jsx": "<a/>", "css": {"color": "red"}},
            {"jsx": ["<a/>"], "css": "a{}"},
            {"jsx": "<a/>", "css": "a{}", "componentName": 7},
        ],
    )
    def test_wrong_field_types(self, reply):
        with pytest.raises(MalformedResponseError):
            parse(json.dumps(reply))

    def test_both_errors_are_generation_invalid(self):
        assert issubclass(MalformedResponseError, GenerationInvalid)
        assert issubclass(IncompleteResponseError, GenerationInvalid)


class TestDecode:
    """decode() reports the same outcomes as a value instead of raising."""

    def test_success_outcome(self, valid_reply):
        outcome = decode(valid_reply)

        assert outcome.ok
        assert outcome.error is None
        assert outcome.response.bundle.component_name == "Button"

    @pytest.mark.parametrize(
        "raw, error_type",
        [
            ("", MalformedResponseError),
            ("{}", IncompleteResponseError),
            ('{"jsx": "<a/>"}', IncompleteResponseError),
            ('{"css": "a{}"}', IncompleteResponseError),
        ],
    )
    def test_failure_outcome(self, raw, error_type):
        outcome = decode(raw)

        assert not outcome.ok
        assert outcome.response is None
        assert isinstance(outcome.error, error_type)
