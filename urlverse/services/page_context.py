"""
Page Context - Immutable description of one page request.

SlugData is the parsed URL (path segments, joined query, query parameters),
GenerationContext adds the resolved flavor. Both are built once per request
and never modified.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

_DUPLICATE_SLASHES = re.compile(r"/{2,}")


def _freeze(params: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return MappingProxyType({str(key): str(value) for key, value in (params or {}).items()})


@dataclass(frozen=True)
class SlugData:
    """
    Parsed URL of a requested page.

    Attributes:
        path_segments: Non-empty path segments in order
        query: Segments joined by "/", e.g. "blog/article-1"
        params: Read-only query parameters
    """
    path_segments: Tuple[str, ...] = ()
    query: str = ""
    params: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @staticmethod
    def split_path(path: str) -> Tuple[str, ...]:
        return tuple(segment for segment in (path or "").split("/") if segment)

    @classmethod
    def from_segments(
        cls,
        segments: Iterable[str],
        params: Optional[Mapping[str, str]] = None,
    ) -> "SlugData":
        path_segments = tuple(segment for segment in segments if segment)
        return cls(
            path_segments=path_segments,
            query="/".join(path_segments),
            params=_freeze(params),
        )

    @classmethod
    def from_path(cls, path: str, params: Optional[Mapping[str, str]] = None) -> "SlugData":
        """
        Build from a raw path.

        Example:
            >>> SlugData.from_path("//blog/article-1/").query
            'blog/article-1'
        """
        return cls.from_segments(cls.split_path(path), params)


@dataclass(frozen=True)
class GenerationContext(SlugData):
    """SlugData plus the flavor the page is generated in."""
    flavor_id: str = ""

    @classmethod
    def from_slug(cls, slug_data: SlugData, flavor_id: str) -> "GenerationContext":
        return cls(
            path_segments=slug_data.path_segments,
            query=slug_data.query,
            params=slug_data.params,
            flavor_id=flavor_id,
        )


def normalize_url_input(raw: str) -> str:
    """
    Normalize a path typed into the home page form.

    Ensures a leading "/", turns backslashes into slashes and collapses
    repeated slashes, so the result is always a same-site path.

    Example:
        >>> normalize_url_input("blog//article-1")
        '/blog/article-1'
    """
    path = (raw or "").strip().replace("\\", "/")
    if not path.startswith("/"):
        path = f"/{path}"
    return _DUPLICATE_SLASHES.sub("/", path)
