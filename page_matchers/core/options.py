from __future__ import annotations

"""Option models
----------------
Typed replacements for the loose options hash: one model for the query
filters every matcher accepts, and one per selector family for the filters
that only make sense there.
"""

import re
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class FindOptions(BaseModel):
    """Filters applied by the query capability, plus the expected count."""

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    count: Optional[int] = Field(default=None, ge=0, description="Exact number of matches expected")
    text: Optional[Union[str, re.Pattern[str]]] = Field(default=None, description="Substring or regex the element text must contain")
    visible: Optional[bool] = Field(default=None, description="Only count visible elements when True")

    @field_validator("text")
    @classmethod
    def _text_non_empty(cls, v):
        if isinstance(v, str) and not v:
            raise ValueError("text filter cannot be empty")
        return v

    def text_matches(self, value: str) -> bool:
        """Apply the text filter to an already-extracted element text."""
        if self.text is None:
            return True
        if isinstance(self.text, re.Pattern):
            return self.text.search(value) is not None
        return self.text in value


class FieldFilter(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    with_: Optional[str] = Field(default=None, alias="with")
    checked: bool = False
    unchecked: bool = False

    @model_validator(mode="after")
    def _exclusive_check_state(self):
        if self.checked and self.unchecked:
            raise ValueError("checked and unchecked are mutually exclusive")
        return self


class SelectFilter(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    selected: Optional[Union[str, list[str]]] = None
    options: Optional[list[str]] = None

    def selected_list(self) -> list[str]:
        if self.selected is None:
            return []
        if isinstance(self.selected, str):
            return [self.selected]
        return list(self.selected)


class TableFilter(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    rows: Optional[list[list[str]]] = Field(default=None, description="Rows in order, cells in order")

    @field_validator("rows")
    @classmethod
    def _rows_have_cells(cls, v):
        if v is not None and any(len(row) == 0 for row in v):
            raise ValueError("table rows must contain at least one cell")
        return v
