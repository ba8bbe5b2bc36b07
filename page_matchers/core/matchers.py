from __future__ import annotations

"""Matchers
-----------
Boolean has_*/has_no_* predicates over a node (a page or part of one).

Every predicate builds a selector, then hands it to one of two primitives:
has_match (poll until it matches) or has_no_match (poll until it does not).
has_no_match polls its own negated probe, so a disappearing element is
waited for instead of being reported on the first look.

Common keyword options, accepted by every predicate:

    count    exact number of matches (0 is a valid expectation)
    text     substring or compiled regex the element text must contain
    visible  only consider visible elements when True

Example:

    m = Matchers(PlaywrightNode(page))
    m.has_css("li.todo", count=3)
    m.has_no_content("Loading...")
    with m.using_wait_time(10_000):
        m.has_button("Continue")
"""

from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, Union

from page_matchers.core.evaluator import (
    WaitPolicy,
    absence_probe,
    evaluate,
    presence_probe,
)
from page_matchers.core.node import Queryable
from page_matchers.core.options import FieldFilter, FindOptions, SelectFilter, TableFilter
from page_matchers.selectors import builders
from page_matchers.utils.config import get_settings
from page_matchers.utils.timing import now_ms, sleep_ms


# ---------- Primitives ----------

def has_match(
    node: Queryable,
    selector: str,
    options: FindOptions,
    policy: WaitPolicy,
    *,
    clock: Callable[[], int] = now_ms,
    sleep: Callable[[int], None] = sleep_ms,
) -> bool:
    """True once `selector` matches (exactly `options.count` times if set) within the budget."""
    return evaluate(presence_probe(node.query, selector, options), policy, clock=clock, sleep=sleep)


def has_no_match(
    node: Queryable,
    selector: str,
    options: FindOptions,
    policy: WaitPolicy,
    *,
    clock: Callable[[], int] = now_ms,
    sleep: Callable[[int], None] = sleep_ms,
) -> bool:
    """True once `selector` stops matching (or stops matching exactly `options.count` times)."""
    return evaluate(absence_probe(node.query, selector, options), policy, clock=clock, sleep=sleep)


# ---------- Facade ----------

class Matchers:
    """
    has_* predicates bound to one node and one wait policy.

    `wait` defaults to the configured DEFAULT_WAIT_MS / POLL_INTERVAL_MS.
    Pass NO_WAIT for a single probe. Nodes that report
    supports_waiting=False are always probed once.
    """

    def __init__(
        self,
        node: Queryable,
        wait: Optional[WaitPolicy] = None,
        *,
        clock: Callable[[], int] = now_ms,
        sleep: Callable[[int], None] = sleep_ms,
    ) -> None:
        self.node = node
        self.wait = wait if wait is not None else get_settings().wait_policy()
        self._clock = clock
        self._sleep = sleep

    # ---------- Wait budget ----------

    @property
    def policy(self) -> WaitPolicy:
        """Policy actually used for the next predicate."""
        if not getattr(self.node, "supports_waiting", True):
            return self.wait.with_timeout(None)
        return self.wait

    @contextmanager
    def using_wait_time(self, timeout_ms: Optional[int]) -> Iterator["Matchers"]:
        """Temporarily change the wait budget; None disables waiting inside the block."""
        previous = self.wait
        self.wait = previous.with_timeout(timeout_ms)
        try:
            yield self
        finally:
            self.wait = previous

    # ---------- Primitives ----------

    def has_match(self, selector: str, **find: Any) -> bool:
        return has_match(self.node, selector, FindOptions(**find), self.policy, clock=self._clock, sleep=self._sleep)

    def has_no_match(self, selector: str, **find: Any) -> bool:
        return has_no_match(self.node, selector, FindOptions(**find), self.policy, clock=self._clock, sleep=self._sleep)

    # ---------- XPath / CSS ----------

    def has_xpath(self, path: str, **find: Any) -> bool:
        """
        Checks if the XPath expression occurs on the node.

            m.has_xpath('.//p[@id="foo"]')
            m.has_xpath('.//p[@id="foo"]', count=4)
            m.has_xpath('.//li', text="Horse", visible=True)
        """
        return self.has_match(builders.xpath(path), **find)

    def has_no_xpath(self, path: str, **find: Any) -> bool:
        return self.has_no_match(builders.xpath(path), **find)

    def has_css(self, expr: str, **find: Any) -> bool:
        """Same as has_xpath, for a CSS selector."""
        return self.has_match(builders.css(expr), **find)

    def has_no_css(self, expr: str, **find: Any) -> bool:
        return self.has_no_match(builders.css(expr), **find)

    # ---------- Text content ----------

    def has_content(self, content: str, **find: Any) -> bool:
        """Text content check; ignores markup and normalizes whitespace."""
        return self.has_match(builders.content(content), **find)

    def has_no_content(self, content: str, **find: Any) -> bool:
        return self.has_no_match(builders.content(content), **find)

    # ---------- Links & buttons ----------

    def has_link(self, locator: str, **find: Any) -> bool:
        """Link by text or id."""
        return self.has_match(builders.link(locator), **find)

    def has_no_link(self, locator: str, **find: Any) -> bool:
        return self.has_no_match(builders.link(locator), **find)

    def has_button(self, locator: str, **find: Any) -> bool:
        """Button by text, value or id."""
        return self.has_match(builders.button(locator), **find)

    def has_no_button(self, locator: str, **find: Any) -> bool:
        return self.has_no_match(builders.button(locator), **find)

    # ---------- Form fields ----------

    def has_field(self, locator: str, *, with_: Optional[str] = None, **find: Any) -> bool:
        """
        Form field by label, name or id.

        For textual fields `with_` is the value the field should hold:

            m.has_field("Name", with_="Jonas")
        """
        return self.has_match(builders.field(locator, FieldFilter(with_=with_)), **find)

    def has_no_field(self, locator: str, *, with_: Optional[str] = None, **find: Any) -> bool:
        return self.has_no_match(builders.field(locator, FieldFilter(with_=with_)), **find)

    def has_checked_field(self, locator: str, **find: Any) -> bool:
        """Radio button or checkbox by label, value or id that is currently checked."""
        return self.has_match(builders.field(locator, FieldFilter(checked=True)), **find)

    def has_unchecked_field(self, locator: str, **find: Any) -> bool:
        return self.has_match(builders.field(locator, FieldFilter(unchecked=True)), **find)

    # ---------- Selects ----------

    def has_select(
        self,
        locator: str,
        *,
        selected: Optional[Union[str, list[str]]] = None,
        options: Optional[list[str]] = None,
        **find: Any,
    ) -> bool:
        """
        Select box by label, name or id.

            m.has_select("Language", selected="German")
            m.has_select("Language", selected=["English", "German"])
            m.has_select("Language", options=["English", "German"])
        """
        return self.has_match(builders.select(locator, SelectFilter(selected=selected, options=options)), **find)

    def has_no_select(
        self,
        locator: str,
        *,
        selected: Optional[Union[str, list[str]]] = None,
        options: Optional[list[str]] = None,
        **find: Any,
    ) -> bool:
        return self.has_no_match(builders.select(locator, SelectFilter(selected=selected, options=options)), **find)

    # ---------- Tables ----------

    def has_table(self, locator: str, *, rows: Optional[list[list[str]]] = None, **find: Any) -> bool:
        """
        Table by id or caption.

        `rows` is strict: rows in order, cells in order, exact text.

            m.has_table("People", rows=[["Jonas", "24"], ["Peter", "32"]])
        """
        return self.has_match(builders.table(locator, TableFilter(rows=rows)), **find)

    def has_no_table(self, locator: str, *, rows: Optional[list[list[str]]] = None, **find: Any) -> bool:
        return self.has_no_match(builders.table(locator, TableFilter(rows=rows)), **find)
