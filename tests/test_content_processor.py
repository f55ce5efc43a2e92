"""
Tests for the content post-processor.

This module tests:
- Fence stripping (idempotence, identity on fence-free text)
- Image substitution scope
- Link parameter propagation and its exclusions
- In-place rewriting (untouched bytes stay untouched)
"""

import random
import re

import pytest

from urlverse.services.content_processor import (
    add_parameters_to_links,
    append_query,
    process_content,
    replace_broken_images,
    strip_code_fences,
)

PLACEHOLDER = re.compile(r"^https://picsum\.photos/(\d{3})/(\d{3})\?random=(\d{1,3})$")


def src_values(html: str):
    return re.findall(r'src="([^"]*)"', html)


class TestStripCodeFences:
    """Tests for strip_code_fences."""

    @pytest.mark.parametrize("raw", [
        "```html\n<html></html>\n```",
        "```HTML\n<html></html>\n```",
        "```\n<html></html>\n```",
        "  ```html<html></html>```  ",
        "```html\n```html\n<html></html>\n```\n```",
    ])
    def test_removes_fences(self, raw):
        assert strip_code_fences(raw) == "<html></html>"

    def test_only_leading_fence(self):
        assert strip_code_fences("```html\n<p>x</p>") == "<p>x</p>"

    def test_only_trailing_fence(self):
        assert strip_code_fences("<p>x</p>\n```") == "<p>x</p>"

    @pytest.mark.parametrize("text", [
        "<html>\n<body>ok</body>\n</html>\n",
        "  <p>surrounding whitespace is kept</p>  ",
        "<pre>```inline fence```</pre>",
        "",
    ])
    def test_identity_without_fences(self, text):
        assert strip_code_fences(text) == text

    @pytest.mark.parametrize("text", [
        "```html\n<p>a</p>\n```",
        "``````",
        "````",
        "```htmlx```",
        "  plain  ",
        "```\n\n```\n",
    ])
    def test_idempotent(self, text):
        once = strip_code_fences(text)

        assert strip_code_fences(once) == once


class TestReplaceBrokenImages:
    """Tests for replace_broken_images."""

    @pytest.mark.parametrize("src", [
        "/assets/images/logo.png",
        "images/team.JPG",
        "../photo.jpeg",
        "hero.webp",
        "/icons/a.svg",
        "/anim.gif",
    ])
    def test_local_images_are_replaced(self, src):
        html = f'<img src="{src}" alt="x">'

        result = replace_broken_images(html, rng=random.Random(1))

        (value,) = src_values(result)
        match = PLACEHOLDER.match(value)
        assert match is not None
        width, height, seed = (int(group) for group in match.groups())
        assert 300 <= width <= 499
        assert 300 <= height <= 499
        assert 0 <= seed <= 999
        assert result.endswith(' alt="x">')

    @pytest.mark.parametrize("src", [
        "https://example.com/a.png",
        "http://cdn.example.com/b.jpg",
        "//cdn.example.com/c.png",
        "data:image/png;base64,AAAA.png",
        "/assets/video.mp4",
        "/image.png?v=2",
    ])
    def test_other_sources_are_untouched(self, src):
        html = f'<img src="{src}">'

        assert replace_broken_images(html) == html

    def test_quote_style_is_preserved(self):
        result = replace_broken_images("<img src='/a.png'>", rng=random.Random(3))

        assert result.startswith("<img src='https://picsum.photos/")
        assert result.endswith("'>")

    def test_attribute_directly_after_quoted_value(self):
        result = replace_broken_images('<img alt="x"src="/assets/a.png">', rng=random.Random(3))

        assert result.startswith('<img alt="x"src="https://picsum.photos/')
        assert PLACEHOLDER.match(src_values(result)[0])

    def test_unquoted_value_gets_quotes(self):
        result = replace_broken_images("<img src=/a.png>", rng=random.Random(3))

        assert PLACEHOLDER.match(src_values(result)[0])

    def test_self_closing_and_other_tags(self):
        html = '<img src="/a.png" /><source src="/b.webp"><script src="/app.js"></script>'

        result = replace_broken_images(html, rng=random.Random(5))

        values = src_values(result)
        assert PLACEHOLDER.match(values[0])
        assert PLACEHOLDER.match(values[1])
        assert values[2] == "/app.js"
        assert "<img src=" in result and " />" in result

    def test_text_and_scripts_are_untouched(self):
        html = (
            '<p>Use src="/a.png" in your markup</p>'
            '<script>const img = \'<img src="/b.png">\';</script>'
            '<!-- <img src="/c.png"> -->'
        )

        assert replace_broken_images(html) == html

    def test_deterministic_with_seeded_rng(self):
        html = '<img src="/a.png"><img src="/b.png">'

        first = replace_broken_images(html, rng=random.Random(42))
        second = replace_broken_images(html, rng=random.Random(42))

        assert first == second

    def test_multiline_document_positions(self):
        html = '<html>\n<body>\n  <h1>T</h1>\n  <img\n    src="/a.png"\n    alt="multi">\n</body>\n</html>'

        result = replace_broken_images(html, rng=random.Random(7))

        assert "/a.png" not in result
        assert result.startswith("<html>\n<body>\n  <h1>T</h1>\n  <img\n    src=\"https://picsum.photos/")
        assert result.endswith('"\n    alt="multi">\n</body>\n</html>')


class TestAddParametersToLinks:
    """Tests for add_parameters_to_links."""

    PARAMS = {"flavor": "retro"}

    def test_root_relative_link(self):
        html = '<a href="/blog/post">Post</a>'

        assert add_parameters_to_links(html, self.PARAMS) == '<a href="/blog/post?flavor=retro">Post</a>'

    def test_existing_query(self):
        html = '<a href="/blog/post?x=1">Post</a>'

        assert add_parameters_to_links(html, self.PARAMS) == '<a href="/blog/post?x=1&flavor=retro">Post</a>'

    def test_relative_link(self):
        html = '<a href="contact">C</a>'

        assert add_parameters_to_links(html, self.PARAMS) == '<a href="contact?flavor=retro">C</a>'

    def test_fragment_stays_last(self):
        html = '<a href="/docs#install">Docs</a>'

        assert add_parameters_to_links(html, self.PARAMS) == '<a href="/docs?flavor=retro#install">Docs</a>'

    @pytest.mark.parametrize("href", [
        "https://other.site/x",
        "#section",
        "//cdn.example.com/x",
        "mailto:team@example.com",
        "javascript:void(0)",
        "",
    ])
    def test_exclusions(self, href):
        html = f'<a href="{href}">x</a>'

        assert add_parameters_to_links(html, self.PARAMS) == html

    def test_no_params_is_identity(self):
        html = '<a href="/x">x</a>'

        assert add_parameters_to_links(html, {}) == html

    def test_values_are_url_encoded(self):
        html = '<a href="/search">s</a>'

        result = add_parameters_to_links(html, {"q": "a b&c"})

        assert result == '<a href="/search?q=a+b%26c">s</a>'

    def test_attribute_directly_after_quoted_value(self):
        html = "<a class='n'href=\"/blog\">B</a>"

        result = add_parameters_to_links(html, self.PARAMS)

        assert result == "<a class='n'href=\"/blog?flavor=retro\">B</a>"

    def test_link_tags_are_decorated_too(self):
        html = '<link rel="stylesheet" href="/style.css">'

        assert 'href="/style.css?flavor=retro"' in add_parameters_to_links(html, self.PARAMS)

    @pytest.mark.parametrize("url, expected", [
        ("/a", "/a?p=1"),
        ("/a?", "/a?p=1"),
        ("/a?b=2&", "/a?b=2&p=1"),
        ("/a?b=2", "/a?b=2&p=1"),
        ("/a#top", "/a?p=1#top"),
    ])
    def test_append_query(self, url, expected):
        assert append_query(url, "p=1") == expected


class TestProcessContent:
    """Tests for the full pipeline."""

    def test_identity_contract(self):
        html = (
            "<!DOCTYPE html>\n<html lang=\"en\">\n<head><style>a { color: red; }</style></head>\n"
            "<body>\n  <a href='https://example.com'>ext</a>\n  <img src=\"https://example.com/x.png\">\n"
            "  <p>Caf&eacute; &amp; more</p>\n</body>\n</html>\n"
        )

        assert process_content(html, {}) == html

    def test_all_steps(self):
        raw = '```html\n<html><body><img src="/x.png"><a href="/y">Y</a></body></html>\n```'

        result = process_content(raw, {"flavor": "retro"}, rng=random.Random(9))

        assert "```" not in result
        assert PLACEHOLDER.match(src_values(result)[0])
        assert 'href="/y?flavor=retro"' in result

    def test_broken_markup_does_not_raise(self):
        html = '<div><a href="/x"<img src="/y.png" <p>unterminated'

        result = process_content(html, {"a": "1"})

        assert isinstance(result, str)
