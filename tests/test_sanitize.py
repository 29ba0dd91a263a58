from __future__ import annotations

import unittest

from htmlcleaner import DEFAULT_POLICY, Policy, clean, parse, render, sanitize, sanitize_node, sanitize_nodes
from htmlcleaner.node import Attribute, Node, element, text_node


class TestCleanerTable(unittest.TestCase):
    """Default-policy behaviour on small, mostly malformed fragments."""

    CASES = [
        ("", ""),
        ("a", "a"),
        ("<a", ""),
        ("a<", "a&lt;"),
        ("<a href http://golang.org>", '<a href=""></a>'),
        ('<a href="http://golang.org">Go', '<a href="http://golang.org">Go</a>'),
        ('<a href="http://golang.org">Go</a></a>', '<a href="http://golang.org">Go</a>'),
        ('<a href="javascript:malicious()">', "<a></a>"),
        ("<b><i>hello</b></i>", "<b><i>hello</i></b>"),
        ("<b><i>hello</b></i> <u>there", "<b><i>hello</i></b> <u>there</u>"),
        ("<img src href alt></img>", '<img src="" alt="">'),
        ("<img href alt></img>", ""),
        ("<p><p><p><p>", "<p></p><p></p><p></p><p></p>"),
        ("<script>foo.bar < baz</script>", "&lt;script&gt;foo.bar &lt; baz&lt;/script&gt;"),
        ("&", "&amp;"),
        ("&amp;", "&amp;"),
        ("foo>bar", "foo&gt;bar"),
        ("<invalidtag>&#34;</invalidtag>", '&lt;invalidtag&gt;"&lt;/invalidtag&gt;'),
    ]

    def test_cases(self) -> None:
        for source, expected in self.CASES:
            with self.subTest(source=source):
                assert sanitize(None, source) == expected

    def test_example(self) -> None:
        source = (
            '<a href="http://golang.org/" onclick="malicious()" title="Go">hello</a> <script>malicious()</script>'
        )
        assert clean(source) == (
            '<a href="http://golang.org/" title="Go">hello</a> &lt;script&gt;malicious()&lt;/script&gt;'
        )

    def test_default_policy_is_used_for_none(self) -> None:
        assert sanitize(None, "<b onclick=x>b</b>") == sanitize(DEFAULT_POLICY, "<b onclick=x>b</b>") == "<b>b</b>"


class TestUrlAttributes(unittest.TestCase):
    def test_unsafe_schemes_are_dropped(self) -> None:
        for href in [
            "javascript:alert(1)",
            "JavaScript:alert(1)",
            " javascript:alert(1)",
            "\x01javascript:alert(1)",
            "java&#x09;script:alert(1)",
            "java&#x0A;script:alert(1)",
            "vbscript:msgbox(1)",
            "file:///etc/passwd",
        ]:
            with self.subTest(href=href):
                assert sanitize(None, f'<a href="{href}">x</a>') == "<a>x</a>"

    def test_safe_schemes_are_kept(self) -> None:
        for href in [
            "http://example.com/",
            "https://example.com/path?q=1#frag",
            "mailto:someone@example.com",
            "/relative/path",
            "#fragment",
            "data:text/plain,hello",
        ]:
            with self.subTest(href=href):
                assert sanitize(None, f'<a href="{href}">x</a>') == f'<a href="{href}">x</a>'

    def test_url_is_normalized(self) -> None:
        assert sanitize(None, '<a href="HTTP://Example.com/">x</a>') == '<a href="http://Example.com/">x</a>'
        assert sanitize(None, '<a href="  /path  ">x</a>') == '<a href="/path">x</a>'

    def test_ampersands_survive_round_trip(self) -> None:
        source = '<a href="/search?q=1&amp;r=2">x</a>'
        assert sanitize(None, source) == source

    def test_unparseable_url_is_dropped(self) -> None:
        assert sanitize(None, '<a href="http://[::1">x</a>') == "<a>x</a>"

    def test_media_urls(self) -> None:
        assert sanitize(None, '<img src="javascript:alert(1)" alt="x">') == ""
        assert sanitize(None, '<video src="movie.mp4" poster="javascript:x" controls></video>') == (
            '<video src="movie.mp4" controls=""></video>'
        )
        assert sanitize(None, '<audio src="https://example.com/a.ogg"></audio>') == (
            '<audio src="https://example.com/a.ogg"></audio>'
        )

    def test_allow_javascript_url_bypasses_the_check(self) -> None:
        policy = Policy(elements={"a": ["href"]}, allow_javascript_url=True)
        assert sanitize(policy, '<a href="javascript:go()">x</a>') == '<a href="javascript:go()">x</a>'

    def test_custom_url_validator(self) -> None:
        policy = Policy(elements={"a": ["href"]}, validate_url=lambda url: url.netloc == "example.com")
        assert sanitize(policy, '<a href="https://example.com/x">x</a>') == '<a href="https://example.com/x">x</a>'
        assert sanitize(policy, '<a href="https://evil.example/x">x</a>') == "<a>x</a>"

    def test_validator_cannot_widen_the_scheme_set(self) -> None:
        policy = Policy(elements={"a": ["href"]}, validate_url=lambda url: True)
        assert sanitize(policy, '<a href="javascript:alert(1)">x</a>') == "<a>x</a>"


class TestAttributes(unittest.TestCase):
    def test_disallowed_attributes_are_dropped(self) -> None:
        assert sanitize(None, '<b onclick="x()" style="color:red" title="t">x</b>') == '<b title="t">x</b>'

    def test_attribute_order_is_preserved(self) -> None:
        policy = Policy(elements={"abbr": ["lang"]}, global_attributes=["title"])
        assert sanitize(policy, '<abbr title="t" id="i" lang="en">x</abbr>') == '<abbr title="t" lang="en">x</abbr>'

    def test_value_pattern(self) -> None:
        policy = Policy(elements={"p": {"class": r"^(note|warning)$"}})
        assert sanitize(policy, '<p class="note">x</p>') == '<p class="note">x</p>'
        assert sanitize(policy, '<p class="evil">x</p>') == "<p>x</p>"

    def test_pattern_uses_search_semantics(self) -> None:
        policy = Policy(elements={"p": ["title"]}).match_attribute("p", "title", "or")
        assert sanitize(policy, '<p title="Hello"></p><p title="World"></p>') == '<p></p><p title="World"></p>'

    def test_namespaced_attributes_are_always_dropped(self) -> None:
        policy = Policy(elements={"a": ["href", "title"]})
        node = element(
            "a",
            attrs=[Attribute("href", "http://example.com/", "xlink"), Attribute("title", "t")],
            children=[text_node("x")],
        )
        assert render([sanitize_node(policy, node)]) == '<a title="t">x</a>'

    def test_duplicate_attributes_are_tolerated(self) -> None:
        node = element("b", attrs=[Attribute("title", "one"), Attribute("title", "two"), Attribute("id", "x")])
        assert render([sanitize_node(None, node)]) == '<b title="one" title="two"></b>'


class TestElements(unittest.TestCase):
    def test_disallowed_element_becomes_visible_text(self) -> None:
        assert sanitize(None, '<div class="x">a &amp; b</div>') == '&lt;div class="x"&gt;a &amp; b&lt;/div&gt;'

    def test_foreign_content_is_always_text(self) -> None:
        expected = '&lt;svg&gt;&lt;circle r="1"&gt;&lt;/circle&gt;&lt;/svg&gt;'
        assert sanitize(None, '<svg><circle r="1"></circle></svg>') == expected
        assert sanitize(Policy(elements=["svg", "circle"]), '<svg><circle r="1"></circle></svg>') == expected

    def test_math_is_text(self) -> None:
        assert sanitize(None, "<math><mi>x</mi></math>") == "&lt;math&gt;&lt;mi&gt;x&lt;/mi&gt;&lt;/math&gt;"

    def test_comments_pass_through_by_default(self) -> None:
        assert sanitize(None, "a<!-- note -->b") == "a<!-- note -->b"

    def test_escape_comments(self) -> None:
        policy = Policy(elements=["b"], escape_comments=True)
        assert sanitize(policy, "a<!-- note -->b") == "a&lt;!-- note --&gt;b"

    def test_doctype_node_is_demoted_to_text(self) -> None:
        out = sanitize_node(None, Node("!doctype", data="html"))
        assert out.is_text
        assert render([out]) == "&lt;!DOCTYPE html&gt;"

    def test_disallowed_subtree_is_not_filtered_further(self) -> None:
        node = element("span", children=[element("b", attrs={"onclick": "x"}, children=[text_node("y")])])
        out = sanitize_node(None, node)
        assert out.is_text
        assert out.data == '<span><b onclick="x">y</b></span>'

    def test_container_children_are_filtered(self) -> None:
        root = Node("#document-fragment", children=[element("script", children=[text_node("x")]), text_node("y")])
        out = sanitize_node(None, root)
        assert render([out]) == "&lt;script&gt;x&lt;/script&gt;y"

    def test_scenario_list_item_is_wrapped(self) -> None:
        assert sanitize(Policy(elements=["ul", "li"]), "<li>") == "<ul><li></li></ul>"

    def test_scenario_inline_wrapping_splits_nested_blocks(self) -> None:
        policy = Policy(elements=["em", "p"], wrap_text=True)
        assert sanitize(policy, "<em>hello <p>world</p>") == "<p><em>hello </em></p><p><em>world</em></p><p></p>"


class TestSanitizeNodes(unittest.TestCase):
    def test_input_tree_is_not_modified(self) -> None:
        nodes = parse('<b onclick="x">bold</b><li>item</li><div>d</div>')
        before = "\n".join(node.to_test_format() for node in nodes)
        out = sanitize_nodes(Policy(elements=["b", "li", "ul"]), nodes)
        after = "\n".join(node.to_test_format() for node in nodes)
        assert before == after
        assert render(out) == "<b>bold</b><ul><li>item</li></ul>&lt;div&gt;d&lt;/div&gt;"

    def test_output_nodes_are_fresh(self) -> None:
        nodes = parse("<b>x</b>y")
        out = sanitize_nodes(None, nodes)
        for original, cleaned in zip(nodes, out):
            assert original is not cleaned
        assert out[0].children[0] is not nodes[0].children[0]


if __name__ == "__main__":
    unittest.main()
