"""In-page text search over rendered blocks.

While the prompt is open the engine is in Search mode and only forwards
Enter and Escape here; every other key goes to the host's prompt field.
Matches survive closing the prompt with Enter so ``n``/``N`` can cycle.
"""

from __future__ import annotations

from dataclasses import dataclass

from .constants import Selectors
from .host import ContentHost, Element, Overlay
from .input.keys import KeyEvent


@dataclass(frozen=True)
class SearchMatch:
    block: Element
    start: int
    end: int


def find_occurrences(text: str, query: str) -> list[int]:
    """Return every case-insensitive start offset of ``query`` in ``text``."""
    if not query:
        return []
    haystack = text.lower()
    needle = query.lower()
    offsets: list[int] = []
    index = haystack.find(needle)
    while index != -1:
        offsets.append(index)
        index = haystack.find(needle, index + 1)
    return offsets


class SearchController:
    def __init__(self, host: ContentHost, overlay: Overlay) -> None:
        self.host = host
        self.overlay = overlay
        self.active = False
        self.query = ""
        self.last_query = ""
        self.matches: list[SearchMatch] = []
        self.current_index = -1

    def enter(self) -> None:
        """Open the prompt with a fresh query; no-op while already open."""
        if self.active:
            return
        self.active = True
        self.query = ""
        self.matches = []
        self.current_index = -1
        self.overlay.open_search_prompt()

    def exit(self, clear_highlights: bool = True) -> None:
        """Close the prompt, optionally dropping matches and highlights."""
        self.active = False
        self.overlay.close_search_prompt()
        if clear_highlights:
            self.overlay.clear_search_matches()
            self.matches = []
            self.current_index = -1

    def handle_key(self, event: KeyEvent) -> bool:
        """Handle a prompt-control key; return ``True`` when it was consumed."""
        if event.is_escape:
            self.exit(clear_highlights=True)
            return True
        if event.is_enter:
            text = self.overlay.search_prompt_text()
            self.last_query = text
            if text:
                self.perform(text)
                if self.matches:
                    self.navigate(0)
            self.exit(clear_highlights=False)
            return True
        return False

    def visible_blocks(self) -> list[Element]:
        """Rendered blocks with a non-empty box."""
        return [block for block in self.host.query_all(Selectors.block) if self.host.bounding_rect(block).has_area()]

    def perform(self, query: str) -> list[SearchMatch]:
        """Find every case-insensitive occurrence of ``query`` and highlight them."""
        self.overlay.clear_search_matches()
        self.query = query
        self.current_index = -1
        self.matches = [
            SearchMatch(block=block, start=offset, end=offset + len(query))
            for block in self.visible_blocks()
            for offset in find_occurrences(self.host.text_of(block), query)
        ]
        if self.matches:
            self.overlay.highlight_search_matches(list(self.matches))
        return self.matches

    def navigate(self, index: int) -> None:
        """Focus match ``index``, wrapping around at both ends."""
        if not self.matches:
            return
        self.current_index = index % len(self.matches)
        self.overlay.focus_search_match(self.matches[self.current_index])

    def _rerun_last_query(self) -> bool:
        if self.matches:
            return False
        if self.last_query:
            self.perform(self.last_query)
        return True

    def next_match(self) -> None:
        """Focus the next match, re-running the last query when none are kept."""
        if self._rerun_last_query():
            self.navigate(0)
            return
        self.navigate(self.current_index + 1)

    def previous_match(self) -> None:
        """Focus the previous match, re-running the last query when none are kept."""
        if self._rerun_last_query():
            self.navigate(len(self.matches) - 1)
            return
        self.navigate(self.current_index - 1)
