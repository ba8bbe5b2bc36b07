"""
Core package for page-matchers.
Lightweight package init to avoid import cycles.

Consumers should import submodules directly, e.g.:
  from page_matchers.core.matchers import Matchers
  from page_matchers.core.evaluator import poll, WaitPolicy
  from page_matchers.core.runner import run_suite
"""

__all__: list[str] = []
