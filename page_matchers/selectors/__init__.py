"""
Selectors package
-----------------
Builders that turn semantic locators (links, buttons, fields, selects,
tables, text content) into engine-prefixed selector strings.
"""

from .builders import SelectorError, button, content, css, field, link, select, table, xpath

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
