from __future__ import annotations

"""Expectation files
--------------------
Pydantic models for YAML suites of matcher checks and the loader for them
(multi-document files, ${ENV} substitution, readable validation errors).

    url: "https://example.com/"
    wait_ms: 3000
    expectations:
      - matcher: css
        locator: "li.item"
        count: 3
      - matcher: no_content
        locator: "Error"
"""

from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union
import os
import re

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from page_matchers.core.matchers import Matchers


# ---------- Enums ----------


class MatcherName(str, Enum):
    match = "match"
    no_match = "no_match"
    xpath = "xpath"
    no_xpath = "no_xpath"
    css = "css"
    no_css = "no_css"
    content = "content"
    no_content = "no_content"
    link = "link"
    no_link = "no_link"
    button = "button"
    no_button = "no_button"
    field = "field"
    no_field = "no_field"
    checked_field = "checked_field"
    unchecked_field = "unchecked_field"
    select = "select"
    no_select = "no_select"
    table = "table"
    no_table = "no_table"


# which matchers understand which family-specific option
_FAMILY_OPTIONS = {
    "with_": {MatcherName.field, MatcherName.no_field},
    "selected": {MatcherName.select, MatcherName.no_select},
    "options": {MatcherName.select, MatcherName.no_select},
    "rows": {MatcherName.table, MatcherName.no_table},
}


# ---------- Models ----------


class Expectation(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    matcher: MatcherName
    locator: str = Field(..., description="Selector, text or locator, depending on the matcher")
    name: Optional[str] = Field(default=None, description="Human-friendly label")

    count: Optional[int] = Field(default=None, ge=0)
    text: Optional[str] = None
    text_regex: bool = Field(default=False, description="Treat `text` as a regular expression")
    visible: Optional[bool] = None
    wait_ms: Optional[int] = Field(default=None, ge=0, description="Wait budget for this check only")

    with_: Optional[str] = Field(default=None, alias="with")
    selected: Optional[Union[str, list[str]]] = None
    options: Optional[list[str]] = None
    rows: Optional[list[list[str]]] = None

    @field_validator("locator")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("locator cannot be empty")
        return v

    @field_validator("text")
    @classmethod
    def _text_non_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v:
            raise ValueError("text cannot be empty")
        return v

    @model_validator(mode="after")
    def _family_options(self):
        for attr, allowed in _FAMILY_OPTIONS.items():
            if getattr(self, attr) is not None and self.matcher not in allowed:
                key = "with" if attr == "with_" else attr
                raise ValueError(f"'{key}' is not supported by matcher '{self.matcher.value}'")
        if self.text_regex and self.text is not None:
            try:
                re.compile(self.text)
            except re.error as e:
                raise ValueError(f"invalid text regex: {e}") from e
        return self

    @property
    def label(self) -> str:
        return self.name or f"{self.matcher.value} {self.locator!r}"

    def find_options(self) -> dict[str, Any]:
        text: Any = re.compile(self.text) if (self.text is not None and self.text_regex) else self.text
        opts = {"count": self.count, "text": text, "visible": self.visible}
        return {k: v for k, v in opts.items() if v is not None}

    def family_options(self) -> dict[str, Any]:
        opts = {"with_": self.with_, "selected": self.selected, "options": self.options, "rows": self.rows}
        return {k: v for k, v in opts.items() if v is not None}

    def evaluate(self, matchers: Matchers) -> bool:
        """Run this check through the matching has_* predicate."""
        predicate = getattr(matchers, f"has_{self.matcher.value}")
        if self.wait_ms is None:
            return predicate(self.locator, **self.family_options(), **self.find_options())
        with matchers.using_wait_time(self.wait_ms):
            return predicate(self.locator, **self.family_options(), **self.find_options())


class Suite(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: str = Field(..., description="Absolute URL to open before checking")
    name: Optional[str] = None
    wait_ms: Optional[int] = Field(default=None, ge=0, description="Overrides DEFAULT_WAIT_MS for this suite")
    expectations: list[Expectation] = Field(..., min_length=1)

    @field_validator("url")
    @classmethod
    def _url_absolute(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("url must be an absolute http(s) URL")
        return v

    @property
    def label(self) -> str:
        return self.name or self.url


# ---------- Loading ----------


_ENV_REF = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def _subst_env(obj):
    if isinstance(obj, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), m.group(0)), obj)
    if isinstance(obj, list):
        return [_subst_env(x) for x in obj]
    if isinstance(obj, dict):
        return {k: _subst_env(v) for k, v in obj.items()}
    return obj


def _format_errors(header: str, ve: ValidationError) -> str:
    lines = [header]
    for e in ve.errors():
        loc = ".".join(str(p) for p in e.get("loc", []))
        msg = e.get("msg", "invalid value")
        lines.append(f"  - {loc}: {msg}")
    return "\n".join(lines)


def load_suites_file(path: Path | str) -> list[Suite]:
    """Load one or more suites from a YAML file (supports multi-document)."""
    suite_path = Path(path)
    if not suite_path.exists():
        raise FileNotFoundError(f"Expectation file not found: {suite_path}")
    try:
        docs = list(yaml.safe_load_all(suite_path.read_text(encoding="utf-8")))
    except yaml.YAMLError as ye:
        raise ValueError(f"YAML parse error in {suite_path}: {ye}") from ye

    out: list[Suite] = []
    for idx, data in enumerate(docs, start=1):
        if data is None:
            continue
        if not isinstance(data, dict):
            raise ValueError(f"Document {idx} in {suite_path} must be a mapping/object.")
        try:
            out.append(Suite.model_validate(_subst_env(data)))
        except ValidationError as ve:
            raise ValueError(_format_errors(f"Invalid suite '{suite_path}' (document {idx}):", ve)) from ve
    if not out:
        raise ValueError(f"No suite documents found in {suite_path}")
    return out


def find_suite_files(root: Path, recursive: bool = True) -> list[Path]:
    if recursive:
        return sorted(list(root.rglob("*.yaml")) + list(root.rglob("*.yml")))
    return sorted(list(root.glob("*.yaml")) + list(root.glob("*.yml")))


__all__ = [
    "MatcherName",
    "Expectation",
    "Suite",
    "load_suites_file",
    "find_suite_files",
]
