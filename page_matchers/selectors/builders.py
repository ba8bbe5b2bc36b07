from __future__ import annotations

"""Selector builders
--------------------
Translate high-level locators (link text, button label, field label/name/id,
select options, table rows) into engine-prefixed selector strings that the
query capability understands ("xpath=..." or "css=...").

All generated XPath is relative to the node being queried (starts with "./").
"""

from typing import Optional

from page_matchers.core.options import FieldFilter, SelectFilter, TableFilter
from page_matchers.selectors.xpath import (
    any_of,
    attr_contains,
    attr_equals,
    text_contains,
    text_equals,
    union,
)


class SelectorError(ValueError):
    """Raised for locators no selector can be built from."""


# ---------- Engine prefixes ----------

def css(expr: str) -> str:
    """CSS is handed to the backend's own CSS engine untranslated."""
    return "css=" + _required(expr, "css selector")


def xpath(expr: str) -> str:
    return "xpath=" + _required(expr, "xpath expression")


# ---------- Semantic locators ----------

def content(text: str) -> str:
    """Node (or descendant) whose normalized text contains `text`."""
    _required(text, "content")
    return xpath(f"./descendant-or-self::*[{text_contains(text)}]")


def link(locator: str) -> str:
    """<a href> by id, text, title, or the alt text of an image inside it."""
    loc = _required(locator, "link locator")
    by_image = f".//img[{attr_contains('alt', loc)}]"
    matches = any_of(attr_equals("id", loc), text_contains(loc), attr_contains("title", loc), by_image)
    return xpath(f".//a[@href][{matches}]")


def button(locator: str) -> str:
    """Submit/image/plain input buttons and <button> elements by id, value, text or title."""
    loc = _required(locator, "button locator")
    input_buttons = ".//input[@type='submit' or @type='image' or @type='button']"
    return xpath(
        union(
            f"{input_buttons}[{any_of(attr_equals('id', loc), attr_contains('value', loc), attr_contains('title', loc))}]",
            f".//button[{any_of(attr_equals('id', loc), attr_contains('value', loc), text_contains(loc), attr_contains('title', loc))}]",
            f".//input[@type='image'][{attr_contains('alt', loc)}]",
        )
    )


_FIELD_KINDS = "self::input[not(@type='submit' or @type='image' or @type='hidden')] or self::textarea or self::select"


def field(locator: str, filters: Optional[FieldFilter] = None) -> str:
    """Form field by label, name, id or placeholder, optionally filtered by value or checked state."""
    loc = _required(locator, "field locator")
    filters = filters or FieldFilter()
    predicates: list[str] = []
    if filters.checked:
        predicates.append("@checked")
    if filters.unchecked:
        predicates.append("not(@checked)")
    if filters.with_ is not None:
        predicates.append(
            any_of(
                f"self::input and {attr_equals('value', filters.with_)}",
                f"self::textarea and {text_equals(filters.with_)}",
            )
        )
    return xpath(_located(_FIELD_KINDS, loc, predicates))


def select(locator: str, filters: Optional[SelectFilter] = None) -> str:
    """<select> by label, name or id, optionally requiring options and selections."""
    loc = _required(locator, "select locator")
    filters = filters or SelectFilter()
    predicates: list[str] = []
    for option in filters.options or []:
        predicates.append(f".//option[{text_equals(option)}]")
    for option in filters.selected_list():
        predicates.append(f".//option[@selected][{text_equals(option)}]")
    return xpath(_located("self::select", loc, predicates))


def table(locator: str, filters: Optional[TableFilter] = None) -> str:
    """
    <table> by id or caption.

    With `rows`, the rows must appear one after another in the given order,
    each holding the given cells side by side (td or th, from any column);
    cell text is compared exactly after whitespace normalization.
    """
    loc = _required(locator, "table locator")
    filters = filters or TableFilter()
    predicates = [any_of(attr_equals("id", loc), f".//caption[{text_contains(loc)}]")]
    if filters.rows:
        predicates.append(_rows_predicate(filters.rows))
    return xpath(".//table" + "".join(f"[{p}]" for p in predicates))


# ---------- Internals ----------

def _required(value: Optional[str], what: str) -> str:
    if value is None or not str(value).strip():
        raise SelectorError(f"{what} cannot be empty")
    return str(value)


def _located(kinds: str, loc: str, predicates: list[str]) -> str:
    """
    Elements of `kinds` identified by id/name/placeholder, by a <label for>
    pointing at them, or by an enclosing <label>.
    """
    label_text = text_contains(loc)
    by_attr = any_of(
        attr_equals("id", loc),
        attr_equals("name", loc),
        attr_equals("placeholder", loc),
        f"@id=//label[{label_text}]/@for",
    )
    extra = "".join(f"[{p}]" for p in predicates)
    return union(
        f".//*[{kinds}][{by_attr}]{extra}",
        f".//label[{label_text}]//*[{kinds}]{extra}",
    )


_CELL = "*[self::td or self::th]"


def _row(cells: list[str]) -> str:
    """Adjacent td/th cells with the given texts, starting at any column."""
    first, *rest = cells
    path = f"{_CELL}[{text_equals(first)}]"
    for cell in rest:
        path += f"/following-sibling::*[1][self::td or self::th][{text_equals(cell)}]"
    return path


def _rows_predicate(rows: list[list[str]]) -> str:
    first, *rest = rows
    path = f".//tr[{_row(first)}]"
    for cells in rest:
        path += f"/following-sibling::tr[1][{_row(cells)}]"
    return path


__all__ = [
    "SelectorError",
    "css",
    "xpath",
    "content",
    "link",
    "button",
    "field",
    "select",
    "table",
]
