from __future__ import annotations

"""Suite runner
---------------
Opens a Playwright browser, loads the suite's URL and evaluates every
expectation against the live page.
"""

from contextlib import nullcontext
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from playwright.sync_api import sync_playwright
from rich.markup import escape

from page_matchers.core.expectations import Suite
from page_matchers.core.matchers import Matchers
from page_matchers.core.node import PlaywrightNode
from page_matchers.utils.config import Settings, get_settings
from page_matchers.utils.logger import get_logger
from page_matchers.utils.timing import Stopwatch, measure

log = get_logger(__name__)


@dataclass
class ExpectationResult:
    index: int
    label: str
    passed: bool
    elapsed_ms: int


def evaluate_expectations(matchers: Matchers, suite: Suite) -> List[ExpectationResult]:
    """Evaluate each expectation in order. Query errors propagate."""
    results: List[ExpectationResult] = []
    scope = matchers.using_wait_time(suite.wait_ms) if suite.wait_ms is not None else nullcontext()
    with scope:
        for idx, exp in enumerate(suite.expectations, start=1):
            with Stopwatch() as sw:
                passed = exp.evaluate(matchers)
            res = ExpectationResult(index=idx, label=exp.label, passed=passed, elapsed_ms=sw.elapsed_ms())
            if passed:
                log.info(f"PASS [{idx}] {escape(res.label)} ({res.elapsed_ms} ms)")
            else:
                log.warning(f"FAIL [{idx}] {escape(res.label)} ({res.elapsed_ms} ms)")
            results.append(res)
    return results


class Runner:
    """Runs suites against a real browser."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()

    @measure("run_suite", level="INFO")
    def run_suite(self, suite: Suite) -> Dict[str, Any]:
        s = self.settings
        with sync_playwright() as p:
            browser = getattr(p, s.BROWSER_TYPE.value).launch(**s.playwright_launch_kwargs())
            try:
                context = browser.new_context(**s.playwright_context_kwargs())
                page = context.new_page()
                log.info(f"Opening {suite.url}")
                page.goto(suite.url, wait_until="domcontentloaded", timeout=s.PAGE_LOAD_TIMEOUT)
                matchers = Matchers(PlaywrightNode(page), s.wait_policy())
                results = evaluate_expectations(matchers, suite)
            finally:
                browser.close()

        return {
            "ok": all(r.passed for r in results),
            "suite": suite.label,
            "results": [asdict(r) for r in results],
        }


def run_suite(suite: Suite, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """Shim: one-off run with a fresh Runner."""
    return Runner(settings=settings).run_suite(suite)
