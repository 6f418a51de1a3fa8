from __future__ import annotations

import pytest

from soupy.node import Document


def build(spec, document=None, parent=0):
    """Build a Document from nested tuples.

    ("div", {"class": "a"}, [children...]) is an element, a bare string is a
    text node, and ("#comment", "data") is a comment.
    """
    if document is None:
        document = Document()
    for item in spec:
        if isinstance(item, str):
            document.append_text(parent, item)
        elif item[0] == "#comment":
            document.append_comment(parent, item[1])
        else:
            name, attrs, children = item
            index = document.append_element(parent, name, attrs)
            build(children, document, index)
    return document


@pytest.fixture
def two_paragraphs():
    # div > (p.a "X"), (p.b "Y")
    return build(
        [
            ("div", {}, [
                ("p", {"class": "a"}, ["X"]),
                ("p", {"class": "b"}, ["Y"]),
            ]),
        ]
    ).freeze()


@pytest.fixture
def page():
    return build(
        [
            ("html", {"lang": "en"}, [
                ("head", {}, [("title", {}, ["Hello!"])]),
                ("body", {}, [
                    ("h1", {}, ["Hello World!"]),
                    ("div", {"class": "parent"}, [
                        ("div", {"class": "child"}, [
                            ("div", {"id": "item"}, [
                                ("p", {}, ["Nested item"]),
                                ("a", {}, ["Broken Link"]),
                                ("a", {"href": "https://example.com"}, ["Example Link"]),
                            ]),
                        ]),
                    ]),
                    ("#comment", " note "),
                    ("a", {"href": "http://other.com", "class": "ext link"}, ["Other Link"]),
                ]),
            ]),
        ]
    ).freeze()


class LinkedNode:
    """Minimal hand-written backend: plain objects with parent/children links."""

    def __init__(self, name=None, attrs=None, text=None):
        self.name = name
        self.attrs = attrs or {}
        self.children = []
        self.parent = None
        self.text = text

    def add(self, child):
        self.children.append(child)
        child.parent = self
        return child

    def __repr__(self):
        return f"LinkedNode({self.name or self.text!r})"
