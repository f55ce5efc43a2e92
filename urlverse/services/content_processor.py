"""
Content Processor - Post-processing of raw model output.

Three order-sensitive steps turn the model's text into a navigable page:

1. strip_code_fences():       remove ```html ... ``` wrappers
2. replace_broken_images():   invented local image paths -> placeholder images
3. add_parameters_to_links(): carry the request's query parameters to internal links

Attribute rewriting is parser-assisted: html.parser locates real start tags
(so text, comments and <script>/<style> bodies are never touched) and only
the targeted attribute value inside such a tag is replaced in place. Every
other byte of the document is preserved, which makes the processor the
identity for output without fences, local images or parameters.
"""

import logging
import random
import re
from html.parser import HTMLParser
from typing import Callable, List, Mapping, Optional, Tuple
from urllib.parse import urlencode

logger = logging.getLogger("urlverse.services.content_processor")


# ---------------------------------------------------------------------------
# CONSTANTS
# ---------------------------------------------------------------------------

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg")

PLACEHOLDER_IMAGE_URL = "https://picsum.photos/{width}/{height}?random={seed}"
PLACEHOLDER_MIN_SIZE = 300
PLACEHOLDER_MAX_SIZE = 499
PLACEHOLDER_MAX_SEED = 999

_LEADING_FENCE = re.compile(r"^```(?:html\b)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```$")

# RFC 3986 scheme, e.g. "https:", "mailto:", "data:"
_URI_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")

_TAG_NAME = re.compile(r"<[^\s/>]+")
_ATTRIBUTE = re.compile(
    r"""(?P<lead>[\s/]+|(?<=["']))(?P<name>[^\s/>"'=]+)"""
    r"""(?:(?P<eq>\s*=\s*)(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<uq>[^\s"'=<>`]+)))?"""
)


# ---------------------------------------------------------------------------
# FENCES
# ---------------------------------------------------------------------------

def strip_code_fences(text: str) -> str:
    """
    Remove markdown code fences around generated HTML.

    Only text whose trimmed form starts or ends with ``` is touched; it loses
    every leading ```html / ``` marker and trailing ``` marker and is trimmed.
    Any other text is returned unchanged (not even trimmed).
    """
    if not text:
        return text

    content = text.strip()
    if not (content.startswith("```") or content.endswith("```")):
        return text

    previous = None
    while content != previous:
        previous = content
        content = _LEADING_FENCE.sub("", content, count=1)
        content = _TRAILING_FENCE.sub("", content, count=1).strip()

    return content


# ---------------------------------------------------------------------------
# ATTRIBUTE REWRITING
# ---------------------------------------------------------------------------

class _StartTagLocator(HTMLParser):
    """Collects (line, column, raw text) of start tags carrying an attribute."""

    def __init__(self, attribute: str):
        super().__init__(convert_charrefs=True)
        self._attribute = attribute
        self.tags: List[Tuple[int, int, str]] = []

    def handle_starttag(self, tag, attrs):
        # handle_startendtag() delegates here for <img ... />
        if any(name == self._attribute for name, _ in attrs):
            line, column = self.getpos()
            self.tags.append((line, column, self.get_starttag_text()))


def _line_offsets(html: str) -> List[int]:
    offsets = [0]
    for line in html.split("\n")[:-1]:
        offsets.append(offsets[-1] + len(line) + 1)
    return offsets


def _rewrite_tag(raw_tag: str, attribute: str, rewrite: Callable[[str], Optional[str]]) -> str:
    """Rewrite the values of one attribute inside a raw start tag."""
    name_match = _TAG_NAME.match(raw_tag)
    if name_match is None:
        return raw_tag

    pieces = [name_match.group(0)]
    position = name_match.end()

    while True:
        match = _ATTRIBUTE.match(raw_tag, position)
        if match is None:
            break
        position = match.end()

        if match.group("name").lower() != attribute or match.group("eq") is None:
            pieces.append(match.group(0))
            continue

        if match.group("dq") is not None:
            value, quote = match.group("dq"), '"'
        elif match.group("sq") is not None:
            value, quote = match.group("sq"), "'"
        else:
            value, quote = match.group("uq"), '"'

        new_value = rewrite(value)
        if new_value is None:
            pieces.append(match.group(0))
        else:
            pieces.append(
                f"{match.group('lead')}{match.group('name')}{match.group('eq')}"
                f"{quote}{new_value}{quote}"
            )

    pieces.append(raw_tag[position:])
    return "".join(pieces)


def rewrite_attribute(html: str, attribute: str, rewrite: Callable[[str], Optional[str]]) -> str:
    """
    Rewrite every value of an attribute on real start tags.

    Args:
        html: The document
        attribute: Lower-case attribute name, e.g. "src"
        rewrite: Returns the new raw value, or None to keep the old one

    Returns:
        The document with only the rewritten values changed. On parser
        failure the input is returned as-is.
    """
    if attribute not in html.lower():
        return html  # Fast path: attribute appears nowhere

    locator = _StartTagLocator(attribute)
    try:
        locator.feed(html)
        locator.close()
    except Exception:
        logger.warning(f"HTMLParser failed while rewriting '{attribute}', returning as-is")
        return html

    offsets = _line_offsets(html)
    pieces = []
    cursor = 0

    for line, column, raw_tag in locator.tags:
        if raw_tag is None or line - 1 >= len(offsets):
            continue
        start = offsets[line - 1] + column
        if start < cursor or not html.startswith(raw_tag, start):
            logger.debug(f"Start tag position mismatch at line {line}, column {column}, skipping")
            continue

        new_tag = _rewrite_tag(raw_tag, attribute, rewrite)
        if new_tag == raw_tag:
            continue

        pieces.append(html[cursor:start])
        pieces.append(new_tag)
        cursor = start + len(raw_tag)

    if not pieces:
        return html

    pieces.append(html[cursor:])
    return "".join(pieces)


# ---------------------------------------------------------------------------
# IMAGES
# ---------------------------------------------------------------------------

def is_local_image(value: str) -> bool:
    """Relative or root-relative path ending in a known image extension."""
    path = value.strip()
    if not path or path.startswith("//") or _URI_SCHEME.match(path):
        return False
    return path.lower().endswith(IMAGE_EXTENSIONS)


def placeholder_image_url(rng: Optional[random.Random] = None) -> str:
    source = rng or random
    return PLACEHOLDER_IMAGE_URL.format(
        width=source.randint(PLACEHOLDER_MIN_SIZE, PLACEHOLDER_MAX_SIZE),
        height=source.randint(PLACEHOLDER_MIN_SIZE, PLACEHOLDER_MAX_SIZE),
        seed=source.randint(0, PLACEHOLDER_MAX_SEED),
    )


def replace_broken_images(html: str, rng: Optional[random.Random] = None) -> str:
    """
    Replace invented local image paths with placeholder images.

    The model likes to reference "/assets/images/..." files that do not
    exist. Absolute and protocol-relative URLs are left alone.
    """
    def rewrite(value: str) -> Optional[str]:
        if is_local_image(value):
            return placeholder_image_url(rng)
        return None

    return rewrite_attribute(html, "src", rewrite)


# ---------------------------------------------------------------------------
# LINKS
# ---------------------------------------------------------------------------

def is_internal_link(value: str) -> bool:
    """Non-empty href that is neither a fragment nor an absolute URL."""
    href = value.strip()
    if not href or href.startswith("#") or href.startswith("//"):
        return False
    return _URI_SCHEME.match(href) is None


def append_query(url: str, query: str) -> str:
    """Append an encoded query string, keeping any #fragment last."""
    base, hash_mark, fragment = url.partition("#")
    if base.endswith(("?", "&")):
        separator = ""
    elif "?" in base:
        separator = "&"
    else:
        separator = "?"
    return f"{base}{separator}{query}{hash_mark}{fragment}"


def add_parameters_to_links(html: str, params: Mapping[str, str]) -> str:
    """
    Append the request's query parameters to every internal link.

    Example:
        >>> add_parameters_to_links('<a href="/blog">B</a>', {"flavor": "retro"})
        '<a href="/blog?flavor=retro">B</a>'
    """
    if not params:
        return html

    query = urlencode(list(params.items()))

    def rewrite(value: str) -> Optional[str]:
        if is_internal_link(value):
            return append_query(value, query)
        return None

    return rewrite_attribute(html, "href", rewrite)


# ---------------------------------------------------------------------------
# PIPELINE
# ---------------------------------------------------------------------------

def process_content(
    raw: str,
    params: Optional[Mapping[str, str]] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """Run fence stripping, image substitution and link propagation in order."""
    content = strip_code_fences(raw)
    content = replace_broken_images(content, rng=rng)
    content = add_parameters_to_links(content, params or {})
    return content
