"""
page-matchers
-------------
Boolean has_*/has_no_* assertions over live UI trees, tolerant of elements
that appear or disappear while the page settles.
"""

from page_matchers.core.evaluator import NO_WAIT, Exhausted, Success, WaitPolicy, evaluate, poll
from page_matchers.core.matchers import Matchers, has_match, has_no_match
from page_matchers.core.node import PlaywrightNode, Queryable, StaticElement, StaticNode
from page_matchers.core.options import FieldFilter, FindOptions, SelectFilter, TableFilter
from page_matchers.selectors import SelectorError

__all__ = [
    "Matchers",
    "has_match",
    "has_no_match",
    "poll",
    "evaluate",
    "WaitPolicy",
    "NO_WAIT",
    "Success",
    "Exhausted",
    "Queryable",
    "PlaywrightNode",
    "StaticNode",
    "StaticElement",
    "FindOptions",
    "FieldFilter",
    "SelectFilter",
    "TableFilter",
    "SelectorError",
]
