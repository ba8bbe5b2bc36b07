import re

from page_matchers.core.node import PlaywrightNode, Queryable, StaticElement, StaticNode
from page_matchers.core.options import FindOptions


class FakeLocator:
    """Just enough of playwright's Locator for PlaywrightNode."""

    def __init__(self, items, log):
        self.items = items
        self.log = log

    def locator(self, selector):
        self.log.append(("locator", selector))
        return FakeLocator(self.items, self.log)

    def filter(self, has_text=None):
        self.log.append(("filter", has_text))
        if isinstance(has_text, re.Pattern):
            kept = [i for i in self.items if has_text.search(i.text)]
        else:
            # plain strings match case-insensitively in playwright
            kept = [i for i in self.items if has_text.lower() in i.text.lower()]
        return FakeLocator(kept, self.log)

    def all(self):
        return [FakeElement(i) for i in self.items]


class FakeElement:
    def __init__(self, item):
        self.item = item

    def is_visible(self):
        return self.item.visible


def test_playwright_node_applies_filters():
    log = []
    items = [StaticElement("Horse"), StaticElement("Horsefly", visible=False), StaticElement("Cow")]
    node = PlaywrightNode(FakeLocator(items, log))

    assert len(node.query("css=li", FindOptions())) == 3
    assert len(node.query("css=li", FindOptions(text="Horse"))) == 2
    assert len(node.query("css=li", FindOptions(text="Horse", visible=True))) == 1
    assert len(node.query("css=li", FindOptions(text=re.compile("^C")))) == 1
    assert ("locator", "css=li") in log


def test_visible_false_does_not_filter():
    node = PlaywrightNode(FakeLocator([StaticElement(visible=False)], []))
    assert len(node.query("css=li", FindOptions(visible=False))) == 1


def test_backends_satisfy_protocol():
    assert isinstance(StaticNode({}), Queryable)
    assert isinstance(PlaywrightNode(FakeLocator([], [])), Queryable)
    assert PlaywrightNode.supports_waiting is True
    assert StaticNode.supports_waiting is False


def test_static_node_unknown_selector_matches_nothing():
    assert StaticNode({"css=li": [StaticElement()]}).query("css=p", FindOptions()) == []


def test_text_filter_is_case_sensitive_on_both_backends():
    items = [StaticElement("Horse")]
    log = []
    live = PlaywrightNode(FakeLocator(items, log))
    static = StaticNode({"css=li": items})

    for text, expected in (("horse", 0), ("Horse", 1), ("Ho.se", 0)):
        options = FindOptions(text=text)
        assert len(live.query("css=li", options)) == expected
        assert len(static.query("css=li", options)) == expected

    handed = [arg for kind, arg in log if kind == "filter"]
    assert all(isinstance(arg, re.Pattern) for arg in handed)
    assert handed[0].pattern == re.escape("horse")
    assert not handed[0].flags & re.IGNORECASE


def test_regex_text_filter_passed_through():
    log = []
    pattern = re.compile("^h", re.IGNORECASE)
    PlaywrightNode(FakeLocator([StaticElement("Horse")], log)).query("css=li", FindOptions(text=pattern))
    assert ("filter", pattern) in log
