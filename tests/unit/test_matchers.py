import re

import pytest
from pydantic import ValidationError

from conftest import BrokenNode, ScriptedNode
from page_matchers.core.evaluator import NO_WAIT, WaitPolicy
from page_matchers.core.matchers import Matchers, has_match, has_no_match
from page_matchers.core.node import StaticElement, StaticNode
from page_matchers.core.options import FieldFilter, FindOptions, SelectFilter, TableFilter
from page_matchers.selectors import builders


POLICY = WaitPolicy(timeout_ms=1000, interval_ms=50)


def make(node, clock, policy=POLICY):
    return Matchers(node, policy, clock=clock, sleep=clock.sleep)


# ---------- Stable trees ----------


def test_three_matching_elements(clock):
    m = make(ScriptedNode([3]), clock)
    assert m.has_match("css=li") is True
    assert m.has_match("css=li", count=3) is True
    assert m.has_match("css=li", count=2) is False
    assert m.has_no_match("css=li") is False
    assert m.has_no_match("css=li", count=4) is True


def test_no_matching_elements(clock):
    m = make(ScriptedNode([0]), clock)
    assert m.has_match("css=li") is False
    assert m.has_no_match("css=li") is True
    assert m.has_match("css=li", count=0) is True


@pytest.mark.parametrize("k", [0, 1, 4])
@pytest.mark.parametrize("count", [None, 0, 1, 4])
def test_negation_duality_on_stable_tree(clock, k, count):
    m = make(ScriptedNode([k]), clock)
    find = {} if count is None else {"count": count}
    assert m.has_no_match("css=li", **find) is (not m.has_match("css=li", **find))


# ---------- Changing trees ----------


def test_waits_for_element_to_appear(clock):
    node = ScriptedNode([0, 0, 1])
    assert make(node, clock).has_css("#flash") is True
    assert len(node.calls) == 3


def test_waits_for_element_to_disappear(clock):
    node = ScriptedNode([2, 2, 0])
    assert make(node, clock).has_no_css("#spinner") is True
    assert len(node.calls) == 3


def test_gives_up_when_element_never_disappears(clock):
    node = ScriptedNode([1])
    assert make(node, clock, WaitPolicy(timeout_ms=100, interval_ms=50)).has_no_content("Loading") is False
    assert len(node.calls) == 3
    assert clock.now - 1_000 == 100


def test_count_reached_after_rerender(clock):
    node = ScriptedNode([1, 2, 3])
    assert make(node, clock).has_css("li", count=3) is True


# ---------- Options & selectors ----------


def test_options_forwarded_to_query(clock):
    node = ScriptedNode([1])
    pattern = re.compile("Ho.se")
    make(node, clock).has_xpath(".//li", text=pattern, visible=True, count=1)
    selector, options = node.calls[0]
    assert selector == "xpath=.//li"
    assert options == FindOptions(count=1, text=pattern, visible=True)


@pytest.mark.parametrize(
    "call, expected",
    [
        (lambda m: m.has_css("p#foo"), builders.css("p#foo")),
        (lambda m: m.has_content("Hello"), builders.content("Hello")),
        (lambda m: m.has_link("Home"), builders.link("Home")),
        (lambda m: m.has_button("Save"), builders.button("Save")),
        (lambda m: m.has_field("Name", with_="Jonas"), builders.field("Name", FieldFilter(with_="Jonas"))),
        (lambda m: m.has_checked_field("Agree"), builders.field("Agree", FieldFilter(checked=True))),
        (lambda m: m.has_unchecked_field("Agree"), builders.field("Agree", FieldFilter(unchecked=True))),
        (
            lambda m: m.has_select("Language", selected="German"),
            builders.select("Language", SelectFilter(selected="German")),
        ),
        (
            lambda m: m.has_table("People", rows=[["Jonas", "24"]]),
            builders.table("People", TableFilter(rows=[["Jonas", "24"]])),
        ),
    ],
)
def test_facade_builds_selector(clock, call, expected):
    node = ScriptedNode([1])
    assert call(make(node, clock)) is True
    assert node.calls[0][0] == expected


def test_negative_count_rejected_before_querying(clock):
    node = ScriptedNode([1])
    with pytest.raises(ValidationError):
        make(node, clock).has_css("li", count=-1)
    assert node.calls == []


def test_unknown_option_rejected(clock):
    with pytest.raises(ValidationError):
        make(ScriptedNode([1]), clock).has_css("li", colour="red")


# ---------- Errors ----------


def test_query_errors_are_not_masked(clock):
    node = BrokenNode(ValueError("Unexpected token"))
    m = make(node, clock)
    with pytest.raises(ValueError, match="Unexpected token"):
        m.has_css("li[")
    with pytest.raises(ValueError, match="Unexpected token"):
        m.has_no_css("li[")
    assert node.calls == 2


def test_empty_locator_raises_selector_error(clock):
    with pytest.raises(builders.SelectorError):
        make(ScriptedNode([1]), clock).has_link("  ")


# ---------- Wait budget ----------


def test_using_wait_time_overrides_and_restores(clock):
    node = ScriptedNode([0])
    m = make(node, clock)
    with m.using_wait_time(0):
        assert m.wait.timeout_ms == 0
        assert m.has_css("li") is False
        assert len(node.calls) == 1
    assert m.wait == POLICY


def test_using_wait_time_restores_after_error(clock):
    m = make(ScriptedNode([0]), clock)
    with pytest.raises(RuntimeError):
        with m.using_wait_time(None):
            raise RuntimeError("boom")
    assert m.wait == POLICY


def test_static_node_is_probed_once(clock):
    m = make(StaticNode({"css=li": [StaticElement("one"), StaticElement("two", visible=False)]}), clock)
    assert m.policy.timeout_ms is None
    assert m.has_css("li", count=2) is True
    assert m.has_css("li", visible=True, count=1) is True
    assert m.has_css("li", text="two") is True
    assert m.has_no_css("ul") is True
    assert clock.sleeps == []


def test_module_level_primitives(clock):
    node = StaticNode({"css=li": [StaticElement()] * 3})
    assert has_match(node, "css=li", FindOptions(count=3), NO_WAIT) is True
    assert has_no_match(node, "css=li", FindOptions(count=3), NO_WAIT) is False
