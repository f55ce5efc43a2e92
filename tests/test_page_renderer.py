"""
Tests for the Page Renderer.

This module tests:
- Generated documents vs. fragments
- Title extraction
- Flavor-styled error pages and escaping
- The home page form and settings section
"""

import pytest

from urlverse.ai.providers.base import INVALID_API_KEY
from urlverse.services.page_renderer import (
    CREDENTIAL_REJECTED_TEXT,
    PageRenderer,
    describe_error,
)


class TestRenderGenerated:
    """Tests for render_generated."""

    def test_full_document_is_returned_unchanged(self):
        document = "<!DOCTYPE html>\n<html><head><title>T</title></head><body>x</body></html>\n"

        assert PageRenderer().render_generated(document) == document

    def test_fragment_is_wrapped(self):
        result = PageRenderer().render_generated("<h1>Hello</h1><p>World</p>")

        assert result.startswith("<!DOCTYPE html>")
        assert "<title>Hello</title>" in result
        assert "<h1>Hello</h1><p>World</p>" in result

    def test_wrapped_title_is_escaped(self):
        result = PageRenderer().render_generated("<h1>&lt;script&gt;x</h1>")

        assert "<title>&lt;script&gt;x</title>" in result


class TestExtractTitle:
    """Tests for extract_title."""

    def test_title_wins(self):
        assert PageRenderer().extract_title("<title>Page</title><h1>Heading</h1>") == "Page"

    def test_h1_fallback(self):
        assert PageRenderer().extract_title("<h1>Heading</h1>") == "Heading"

    def test_app_name_fallback(self):
        assert PageRenderer(app_name="Test App").extract_title("<p>no title</p>") == "Test App"


class TestRenderError:
    """Tests for render_error."""

    def test_message_is_escaped(self):
        result = PageRenderer().render_error('<script>alert("x")</script>')

        assert "<script>alert" not in result
        assert "&lt;script&gt;alert(&quot;x&quot;)&lt;/script&gt;" in result

    def test_sentinel_is_described(self):
        result = PageRenderer().render_error(INVALID_API_KEY, credential_problem=True)

        assert CREDENTIAL_REJECTED_TEXT in result
        assert 'href="/#settings"' in result

    def test_no_hint_by_default(self):
        assert "/#settings" not in PageRenderer().render_error("HTTP error 500")

    @pytest.mark.parametrize("flavor_id, marker", [
        ("cyberpunk", "SYSTEM ERROR"),
        ("retro", "ERROR - SITE NOT FOUND!"),
        ("minimalist", "The page could not be loaded"),
        ("parallelverse", "The page could not be loaded"),
    ])
    def test_flavor_styles(self, flavor_id, marker):
        result = PageRenderer(flavor_id).render_error("boom")

        assert marker in result
        assert result.startswith("<!DOCTYPE html>")

    def test_describe_error(self):
        assert describe_error(INVALID_API_KEY) == CREDENTIAL_REJECTED_TEXT
        assert describe_error("HTTP error 502") == "HTTP error 502"


class TestRenderHomepage:
    """Tests for render_homepage."""

    def test_form_and_options(self, registry):
        options = registry.get_options()

        result = PageRenderer(registry=registry).render_homepage(options, "retro", has_api_key=False)

        assert '<form action="/go" method="get">' in result
        assert 'name="path"' in result
        assert '<select name="flavor">' in result
        assert result.count("<option ") == len(options)
        assert '<option value="retro" selected' in result
        assert '<option value="cyberpunk" selected' not in result
        assert "No API key set yet." in result

    def test_key_status(self, registry):
        result = PageRenderer(registry=registry).render_homepage([], "parallelverse", has_api_key=True)

        assert "An API key is configured." in result
        assert "/api/settings/api-key" in result

    def test_option_text_is_escaped(self):
        options = [{"id": "x", "name": "<b>Bold</b>", "description": 'say "hi"'}]

        result = PageRenderer().render_homepage(options, "x", has_api_key=False)

        assert "&lt;b&gt;Bold&lt;/b&gt;" in result
        assert 'title="say &quot;hi&quot;"' in result
