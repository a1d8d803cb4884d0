"""Turns analysis results of any known service version into a flat page list.

The remote schema is outside our control, so normalization is best effort:
an unrecognised document yields no pages instead of an error.
"""

from collections.abc import Callable
from typing import Any

from docint.analysis.models import RawPage

_PAGE_NUMBER_KEYS = ("page", "pageNumber", "pageIndex")
_TEXT_KEYS = ("text", "content")
_LINE_TEXT_KEYS = ("text", "content")

ShapeMatcher = Callable[[dict[str, Any]], list[Any] | None]


def _list_under(key: str) -> ShapeMatcher:
    def match(document: dict[str, Any]) -> list[Any] | None:
        entries = document.get(key)
        return entries if isinstance(entries, list) else None

    match.__name__ = f"match_{key}"
    return match


# Layout v2.x puts text in readResults; pageResults carries only tables there.
DEFAULT_MATCHERS: tuple[ShapeMatcher, ...] = (
    _list_under("readResults"),
    _list_under("pageResults"),
    _list_under("pages"),
)


class ResultNormalizer:
    """Extracts {page number, raw text} entries from an analysis result."""

    def __init__(self, matchers: tuple[ShapeMatcher, ...] = DEFAULT_MATCHERS) -> None:
        self._matchers = matchers

    def normalize(self, document: object) -> list[RawPage]:
        """Return one RawPage per page-like entry, in service order."""
        if not isinstance(document, dict):
            return []
        body = document.get("analyzeResult")
        if not isinstance(body, dict):
            body = document
        for matcher in self._matchers:
            entries = matcher(body)
            if entries is not None:
                return [_build_page(entry) for entry in entries]
        return []


def _build_page(entry: Any) -> RawPage:
    if not isinstance(entry, dict):
        return RawPage(page_number=None, raw_text="")
    return RawPage(page_number=_page_number(entry), raw_text=_page_text(entry))


def _page_number(entry: dict[str, Any]) -> int | None:
    for key in _PAGE_NUMBER_KEYS:
        value = entry.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def _page_text(entry: dict[str, Any]) -> str:
    for key in _TEXT_KEYS:
        value = entry.get(key)
        if isinstance(value, str):
            return value
    lines = entry.get("lines")
    if isinstance(lines, list):
        return " ".join(_line_text(line) for line in lines)
    return ""


def _line_text(line: Any) -> str:
    if not isinstance(line, dict):
        return ""
    for key in _LINE_TEXT_KEYS:
        value = line.get(key)
        if isinstance(value, str) and value:
            return value
    return ""
