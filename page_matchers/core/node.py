from __future__ import annotations

"""Query backends
-----------------
The matchers only need one capability from a node: run a selector and hand
back whatever currently matches. Two implementations live here:

- PlaywrightNode: a live page (or a sub-tree of it via a Locator)
- StaticNode: an in-memory snapshot, never changes, so never worth waiting on
"""

import re
from dataclasses import dataclass
from typing import Mapping, Protocol, Sequence, Union, runtime_checkable

from playwright.sync_api import Locator, Page
from rich.markup import escape

from page_matchers.core.options import FindOptions
from page_matchers.utils.logger import get_logger

log = get_logger(__name__)


@runtime_checkable
class Queryable(Protocol):
    """Anything the matchers can poll."""

    supports_waiting: bool

    def query(self, selector: str, options: FindOptions) -> Sequence[object]:
        ...


class PlaywrightNode:
    """
    Query capability backed by Playwright.

    `root` may be a Page or a Locator; selectors are resolved relative to it.
    Playwright errors (bad selector syntax, closed page) are not caught here.
    Text filters are case-sensitive, the same as on StaticNode.
    """

    supports_waiting = True

    def __init__(self, root: Union[Page, Locator]) -> None:
        self.root = root

    def query(self, selector: str, options: FindOptions) -> list[Locator]:
        loc = self.root.locator(selector)
        if options.text is not None:
            loc = loc.filter(has_text=_case_sensitive(options.text))
        elements = loc.all()
        if options.visible:
            elements = [el for el in elements if el.is_visible()]
        log.debug(f"{escape(repr(selector))} -> {len(elements)} element(s)")
        return elements


def _case_sensitive(text: Union[str, re.Pattern[str]]) -> re.Pattern[str]:
    # playwright matches plain has_text strings case-insensitively
    if isinstance(text, str):
        return re.compile(re.escape(text))
    return text


# ---------- In-memory snapshot ----------

@dataclass(frozen=True)
class StaticElement:
    text: str = ""
    visible: bool = True


class StaticNode:
    """
    Fixed selector -> elements table.

    Unknown selectors match nothing. Since the snapshot cannot change,
    matchers over a StaticNode probe exactly once.
    """

    supports_waiting = False

    def __init__(self, matches: Mapping[str, Sequence[StaticElement]]) -> None:
        self._matches = {k: tuple(v) for k, v in matches.items()}

    def query(self, selector: str, options: FindOptions) -> list[StaticElement]:
        found = self._matches.get(selector, ())
        return [
            el for el in found
            if options.text_matches(el.text) and (not options.visible or el.visible)
        ]
