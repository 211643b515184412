"""Renderable element tree.

Elements are plain Python objects: a tag, its props and its children. Props
named ``on<Event>`` holding a callable are event listeners; everything else
becomes an attribute when the tree is serialized with ``to_html``. A host
(server-side template, browser bridge, test) dispatches events back into the
tree with ``Element.dispatch``.
"""
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from formlet.utils.html import escape_attribute, escape_text, html_sanitize

ChildType = Union[str, int, float, bool, None, "Element", List[Any]]

VOID_TAGS = {"input", "img", "br", "hr", "meta", "link"}


class Element:
    def __init__(self, tag: str, props: Dict = None, children: List[ChildType] = None):
        self.tag = tag
        self.props: Dict[str, Any] = {}
        self.listeners: Dict[str, Callable] = {}
        self.children: List[Union[str, "Element"]] = []

        for key, value in (props or {}).items():
            if key.startswith("on") and callable(value):
                self.listeners[key[2:].lower()] = value
            else:
                self.props[key] = value

        self._process_children(children)

    def _process_children(self, children):
        if children is None:
            return
        if not isinstance(children, list):
            children = [children]
        for child in children:
            if isinstance(child, list):
                self._process_children(child)
            elif child is None or child is False or child is True:
                continue
            elif isinstance(child, Element):
                self.children.append(child)
            else:
                self.children.append(str(child))

    def dispatch(self, event_name: str, *args) -> Any:
        handler = self.listeners.get(event_name.lower())
        if handler is None:
            raise KeyError(f"<{self.tag}> has no '{event_name}' listener")
        return handler(*args)

    def iter(self) -> Iterator["Element"]:
        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter()

    def find(self, element_id: str) -> Optional["Element"]:
        for element in self.iter():
            if element.props.get("id") == element_id:
                return element
        return None

    def find_all(self, predicate: Callable[["Element"], bool]) -> List["Element"]:
        return [element for element in self.iter() if predicate(element)]

    def text(self) -> str:
        return "".join(
            child.text() if isinstance(child, Element) else child
            for child in self.children
        )

    def _attributes(self) -> str:
        parts = []
        for key, value in self.props.items():
            if key == "html":
                continue
            if key in ("class_name", "classes"):
                key = "class"
            if key == "role" or key.startswith("aria-"):
                if value is None or value is False:
                    continue
                value = "true" if value is True else value
            if value is None or value is False:
                continue
            if value is True:
                parts.append(f" {key}")
            else:
                parts.append(f' {key}="{escape_attribute(value)}"')
        return "".join(parts)

    def to_html(self) -> str:
        attributes = self._attributes()
        if self.tag in VOID_TAGS:
            return f"<{self.tag}{attributes}>"
        if "html" in self.props:
            inner = html_sanitize(self.props["html"])
        else:
            inner = "".join(
                child.to_html() if isinstance(child, Element) else escape_text(child)
                for child in self.children
            )
        return f"<{self.tag}{attributes}>{inner}</{self.tag}>"

    def __repr__(self) -> str:
        return f"<Element {self.tag} id={self.props.get('id')!r}>"


class DomBuilder:

    def __getattr__(self, name):
        def _tag(*children, **kwargs):
            return self.generate_tag(name, *children, **kwargs)

        return _tag

    def generate_tag(self, tag: str, props: Dict = None, children: List[ChildType] = None, **kwargs):
        """
            Create an element, e.g. ``t.div({"class_name": "row"}, [...])``.
            Underscores in the tag become dashes (``t.rich_text_editor``).
        """
        tag = tag.lower().strip()

        if kwargs.get("tag"):
            tag = kwargs.pop("tag")
        elif "_" in tag:
            tag = tag.replace("_", "-")

        return Element(tag, props, children)


t = DomBuilder()
