"""
===============================================================================
Paragraph Counter – addressable content units in an HTML blob
-------------------------------------------------------------------------------
Purpose:
    Count the paragraphs of a document version; the count is the denominator
    for translation progress.

Strategies:
    - MarkerIndexStrategy: content carries 'data-paragraph-index' markers;
      the count is max(index) + 1, reading the leading integer of each
      value. Markers without one are skipped, so they may count 0.
    - BlockElementStrategy: no markers; count leaf-like block elements that
      hold non-empty text or at least one <img>. A block containing a
      counted block is not counted itself.

    ParagraphCounter scans once and picks the strategy whose 'applies()'
    accepts the scan, so callers never branch on the markup themselves.
===============================================================================
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import List, Optional, Protocol, Sequence, Tuple

PARAGRAPH_INDEX_ATTR = "data-paragraph-index"
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")

BLOCK_TAGS = frozenset({
    "p", "h1", "h2", "h3", "h4", "h5", "h6",
    "div", "li", "blockquote", "article", "section", "figure", "figcaption",
})

# tags whose text is never translatable content
_SKIP_TAGS = frozenset({"script", "style", "template", "noscript"})

# an opening tag of the key closes an open element of the value (HTML implied end tags)
_IMPLIED_CLOSE = {
    "p": frozenset({"p"}),
    "li": frozenset({"li"}),
}


@dataclass(slots=True)
class _OpenBlock:
    tag: str
    has_content: bool = False
    has_counted_child: bool = False


@dataclass(slots=True)
class ContentScan:
    """Result of a single pass over the markup."""
    marker_values: List[str] = field(default_factory=list)
    block_count: int = 0

    @property
    def has_markers(self) -> bool:
        return bool(self.marker_values)


class _ContentScanner(HTMLParser):
    """Collects paragraph markers and leaf block counts in one pass."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.scan = ContentScan()
        self._blocks: List[_OpenBlock] = []
        self._skip_depth = 0

    # ---------------------------- events ------------------------------- #
    def handle_starttag(self, tag: str, attrs: Sequence[Tuple[str, Optional[str]]]) -> None:
        tag = tag.lower()
        self._collect_markers(attrs)
        if tag in _SKIP_TAGS:
            self._skip_depth += 1
            return
        if tag == "img":
            self._mark_content()
            return
        if tag in BLOCK_TAGS:
            closes = _IMPLIED_CLOSE.get(tag)
            if closes and self._blocks and self._blocks[-1].tag in closes:
                self._close_top()
            self._blocks.append(_OpenBlock(tag))

    def handle_startendtag(self, tag: str, attrs: Sequence[Tuple[str, Optional[str]]]) -> None:
        # self-closing blocks (<div/>) carry nothing
        self._collect_markers(attrs)
        if tag.lower() == "img":
            self._mark_content()

    def handle_endtag(self, tag: str) -> None:
        tag = tag.lower()
        if tag in _SKIP_TAGS:
            self._skip_depth = max(0, self._skip_depth - 1)
            return
        if tag not in BLOCK_TAGS:
            return
        if not any(b.tag == tag for b in self._blocks):
            return  # stray end tag
        while self._blocks:
            top = self._blocks[-1].tag
            self._close_top()
            if top == tag:
                break

    def handle_data(self, data: str) -> None:
        if self._skip_depth == 0 and data.strip():
            self._mark_content()

    def close(self) -> None:
        super().close()
        while self._blocks:
            self._close_top()

    # ---------------------------- internals ---------------------------- #
    def _collect_markers(self, attrs: Sequence[Tuple[str, Optional[str]]]) -> None:
        for name, value in attrs:
            if name == PARAGRAPH_INDEX_ATTR:
                self.scan.marker_values.append(value or "")

    def _mark_content(self) -> None:
        if self._skip_depth == 0 and self._blocks:
            self._blocks[-1].has_content = True

    def _close_top(self) -> None:
        block = self._blocks.pop()
        counted = block.has_content and not block.has_counted_child
        if counted:
            self.scan.block_count += 1
        if self._blocks and (counted or block.has_counted_child):
            self._blocks[-1].has_counted_child = True


def scan_content(html: str) -> ContentScan:
    """Parse 'html' once and return the collected markers and block count."""
    scanner = _ContentScanner()
    scanner.feed(html)
    scanner.close()
    return scanner.scan


# --------------------------------------------------------------------------- #
#  Strategies
# --------------------------------------------------------------------------- #
class ParagraphCountStrategy(Protocol):
    """Count total units from a content scan."""

    def applies(self, scan: ContentScan) -> bool: ...

    def count(self, scan: ContentScan) -> int: ...


def _marker_index(raw: str) -> Optional[int]:
    """Leading integer of a marker value ("3a" -> 3); None if there is none or it is negative."""
    match = _LEADING_INT.match(raw)
    if match is None:
        return None
    index = int(match.group(1))
    return index if index >= 0 else None


class MarkerIndexStrategy:
    """
    Explicit sequential markers: total = max(index) + 1.

    Any marker attribute selects this strategy; when no marker value holds
    a usable index the count is 0.
    """

    def applies(self, scan: ContentScan) -> bool:
        return scan.has_markers

    def count(self, scan: ContentScan) -> int:
        indices = [i for i in map(_marker_index, scan.marker_values) if i is not None]
        return max(indices) + 1 if indices else 0


class BlockElementStrategy:
    """Structural scan: leaf-like block elements with text or an image."""

    def applies(self, scan: ContentScan) -> bool:
        return True

    def count(self, scan: ContentScan) -> int:
        return scan.block_count


class ParagraphCounter:
    """
    Count addressable paragraphs of a content blob.

    The first strategy that applies wins; the default order prefers explicit
    markers over the structural scan.
    """

    def __init__(self, strategies: Optional[Sequence[ParagraphCountStrategy]] = None) -> None:
        self._strategies: Tuple[ParagraphCountStrategy, ...] = tuple(
            strategies or (MarkerIndexStrategy(), BlockElementStrategy())
        )

    def count(self, content: Optional[str]) -> int:
        if not content or not content.strip():
            return 0
        scan = scan_content(content)
        for strategy in self._strategies:
            if strategy.applies(scan):
                return max(0, strategy.count(scan))
        return 0


_default_counter = ParagraphCounter()


def count_paragraphs(content: Optional[str]) -> int:
    """Module-level shortcut using the default strategies."""
    return _default_counter.count(content)
