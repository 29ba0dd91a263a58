"""Invariants every sanitized output has to satisfy, checked over a small corpus."""

from __future__ import annotations

import unittest
from dataclasses import replace

from htmlcleaner import DEFAULT_POLICY, parse, preprocess, sanitize, tree_depth
from htmlcleaner.constants import URL_ATTRIBUTES

CORPUS = [
    "",
    "plain text",
    "a < b && c > d",
    "<a",
    "<a href http://golang.org>",
    '<a href="http://golang.org">Go</a></a>',
    '<a href="javascript:malicious()">',
    '<a href="jav&#x09;ascript:alert(1)">x</a>',
    '<a href=" JavaScript:alert(1)">x</a>',
    '<a href="HTTP://Example.com/a b?c=1&amp;d=2">x</a>',
    "<b><i>hello</b></i> <u>there",
    "<b>bold <i>both</b> italic</i>",
    "<img src href alt></img>",
    "<img src=x onerror=alert(1)>",
    '<video src="/v.mp4" poster="javascript:x" controls autoplay></video>',
    "<p><p><p><p>",
    "<script>foo.bar < baz</script>",
    "<svg><script>alert(1)</script></svg>",
    "<math><mi>x</mi></math>",
    '<noscript><p title="</noscript><img src=x onerror=alert(1)>">',
    "<!--><img src=x onerror=alert(1)>-->",
    "<p>a<!-- note -->b</p>",
    "<pre>\n\nkeep</pre>",
    "<blockquote><p>q</p></blockquote>",
    "<table><tr><td>x</td></tr></table>",
    "<details><summary>s</summary>body</details>",
    "<invalidtag>&#34;</invalidtag>",
    "x\r\ny",
    "<li>one<li>two",
    "<b>one<div>two</div>three</b>",
    "a<b>b</b><div>c</div>d",
    "<em>hello <p>world</p></em>",
    "<b><li>x",
    "<b><li>one<li>two</b>",
    "<i>a<ul><li>b</ul>c</i>",
    "<em>x<table><tr><td>y</td></tr></table></em>",
    "c<custom-element>d</custom-element>e",
    "<div>" * 150 + "deep",
]

POLICIES = {
    "default": DEFAULT_POLICY,
    "wrapping": replace(DEFAULT_POLICY.allow_elements("div", "ul", "li").wrap_inside("blockquote"), wrap_text=True),
    "tables": replace(DEFAULT_POLICY.allow_elements("div", "ul", "li", "table", "tbody", "tr", "td"), wrap_text=True),
    "shallow": replace(DEFAULT_POLICY.allow_elements("div"), max_depth=8),
}


def iter_elements(nodes):
    stack = list(nodes)
    while stack:
        node = stack.pop()
        if node.is_element:
            yield node
        stack.extend(node.children)


class TestInvariants(unittest.TestCase):
    def assert_sound(self, policy, output) -> None:
        nodes = parse(output)
        if policy.max_depth:
            assert tree_depth(nodes) <= policy.max_depth
        for node in iter_elements(nodes):
            assert not node.namespace, node
            assert policy.allows_element(node.name), node
            for attr in node.attrs:
                assert policy.allows_attribute(node.name, attr.name), (node, attr)
                if attr.name in URL_ATTRIBUTES:
                    assert "javascript" not in attr.value.lower(), attr

    def test_idempotent(self) -> None:
        for label, policy in POLICIES.items():
            for source in CORPUS:
                with self.subTest(policy=label, source=source[:40]):
                    once = sanitize(policy, source)
                    assert sanitize(policy, once) == once

    def test_output_is_allowed(self) -> None:
        for label, policy in POLICIES.items():
            for source in CORPUS:
                with self.subTest(policy=label, source=source[:40]):
                    self.assert_sound(policy, sanitize(policy, source))

    def test_preprocessed_output_is_allowed(self) -> None:
        for label, policy in POLICIES.items():
            for source in CORPUS:
                with self.subTest(policy=label, source=source[:40]):
                    self.assert_sound(policy, sanitize(policy, preprocess(policy, source)))

    def test_no_script_survives(self) -> None:
        for source in CORPUS:
            output = sanitize(None, source)
            assert "<script" not in output
            assert "onerror=" not in output or "&lt;" in output


if __name__ == "__main__":
    unittest.main()
