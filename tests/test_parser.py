from __future__ import annotations

import unittest

from htmlcleaner import parse, render, to_html, tree_depth
from htmlcleaner.node import Attribute, Node, comment_node, element, fragment, text_node


class TestParse(unittest.TestCase):
    def test_text_and_elements(self) -> None:
        nodes = parse("a<b>b</b>c")
        assert [node.name for node in nodes] == ["#text", "b", "#text"]
        assert nodes[1].children[0].data == "b"

    def test_empty_input(self) -> None:
        assert parse("") == []
        assert parse(None) == []

    def test_attributes_keep_order(self) -> None:
        (node,) = parse('<a title="t" href="/x">x</a>')
        assert [attr.name for attr in node.attrs] == ["title", "href"]
        assert node.get_attr("href") == "/x"

    def test_comment(self) -> None:
        nodes = parse("a<!-- c -->b")
        assert [node.name for node in nodes] == ["#text", "#comment", "#text"]
        assert nodes[1].data == " c "
        assert nodes[2].data == "b"

    def test_foreign_namespace(self) -> None:
        (svg,) = parse('<svg><circle r="1"></circle></svg>')
        assert svg.name == "svg"
        assert svg.namespace == "svg"
        assert svg.is_foreign
        assert svg.children[0].namespace == "svg"

    def test_namespaced_attribute(self) -> None:
        (svg,) = parse('<svg><a xlink:href="#x"></a></svg>')
        assert svg.children[0].attrs == [Attribute("href", "#x", "xlink")]

    def test_error_recovery(self) -> None:
        assert render(parse("<b><i>x</b>y")) == "<b><i>x</i></b><i>y</i>"
        assert render(parse("<table><td>x")) == "<table><tbody><tr><td>x</td></tr></tbody></table>"

    def test_deep_nesting(self) -> None:
        nodes = parse("<div>" * 1000)
        assert tree_depth(nodes) == 1000

    def test_test_format(self) -> None:
        (node,) = parse("<p class=x>hi</p>")
        assert node.to_test_format() == '| <p>\n|   class="x"\n|   "hi"'


class TestNode(unittest.TestCase):
    def test_empty_name(self) -> None:
        with self.assertRaises(ValueError):
            Node("")

    def test_append_self(self) -> None:
        node = element("div")
        with self.assertRaises(ValueError):
            node.append_child(node)

    def test_attribute_helpers(self) -> None:
        node = element("a", attrs={"href": "/", "title": None})
        assert node.get_attr("title") == ""
        assert node.get_attr("missing", "d") == "d"
        assert node.has_attr("href")
        assert not node.has_attr("src")

    def test_copy_owns_its_lists(self) -> None:
        node = element("b", children=[text_node("x")])
        clone = node.copy()
        clone.children.append(text_node("y"))
        assert len(node.children) == 1

    def test_kinds(self) -> None:
        assert element("p").is_element
        assert text_node("x").is_text
        assert comment_node("x").is_comment
        assert fragment().is_container
        assert not fragment().is_element


class TestRender(unittest.TestCase):
    def test_text_escaping(self) -> None:
        assert render([text_node('<&>"')]) == '&lt;&amp;&gt;"'

    def test_attribute_escaping(self) -> None:
        node = element("a", attrs={"title": 'a"b&c<d'})
        assert to_html(node) == '<a title="a&quot;b&amp;c<d"></a>'

    def test_empty_attribute_value(self) -> None:
        assert to_html(element("img", attrs={"src": ""})) == '<img src="">'

    def test_void_elements(self) -> None:
        assert render([element("br"), element("hr")]) == "<br><hr>"

    def test_raw_text_children(self) -> None:
        assert to_html(element("style", children=[text_node("a < b")])) == "<style>a < b</style>"

    def test_preformatted_leading_newline(self) -> None:
        node = element("pre", children=[text_node("\nx")])
        html = to_html(node)
        assert html == "<pre>\n\nx</pre>"
        assert parse(html)[0].children[0].data == "\nx"

    def test_comment(self) -> None:
        assert to_html(comment_node(" c ")) == "<!-- c -->"

    def test_qualified_attribute_name(self) -> None:
        node = element("a", attrs=[Attribute("href", "#x", "xlink")], namespace="svg")
        assert to_html(node) == '<a xlink:href="#x"></a>'

    def test_fragment_renders_children(self) -> None:
        assert to_html(fragment([text_node("a"), element("i")])) == "a<i></i>"

    def test_round_trip(self) -> None:
        source = '<p>a &amp; b<br><a href="/x?a=1&amp;b=2">l</a></p><pre>\n\nx</pre>'
        assert render(parse(source)) == source


if __name__ == "__main__":
    unittest.main()
