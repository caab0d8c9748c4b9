"""
MJML -> tree parser

Tolerant reconstruction of the editor tree from hand-edited markup. The
markup is split and nested by tags.py; this module maps the resulting
elements onto the component schema:

- known type allowed under its parent -> EditorNode with the parsed props
- unknown tag, or known tag in a slot the schema forbids -> mj-raw node
  carrying the element's source markup verbatim (never reparented)
- text-bearing types keep their inner markup as content
- mj-head is read into HeadSettings, separate from the body tree

Only untokenizable input raises (MjmlParseError); everything else yields a
best-effort tree.
"""

import html
import logging
from typing import Optional

from pydantic import BaseModel

from ...shared.validators import validate_css_length, validate_tag_name
from .nodes import EditorNode, FontDefinition, HeadSettings
from .schema import can_contain, get_component_definition
from .tags import Element, SourceIndex, TextNode, build_element_tree, tokenize

logger = logging.getLogger(__name__)


class ParseMjmlResult(BaseModel):
    document: EditorNode
    head_settings: HeadSettings


class _TreeBuilder:
    """Maps an Element tree onto EditorNodes for one source string"""

    def __init__(self, source: str):
        self.source = source

    def raw_span(self, start: int, end: int) -> EditorNode:
        return EditorNode(type="mj-raw", content=self.source[start:end].strip())

    def passthrough(self, element: Element) -> EditorNode:
        logger.debug(f"Preserving <{element.name}> as raw markup")
        return self.raw_span(element.start, element.end)

    def inner_markup(self, element: Element) -> str:
        return self.source[element.inner_start:element.inner_end].strip()

    def convert(self, element: Element, parent_type: Optional[str]) -> EditorNode:
        definition = get_component_definition(element.name)

        if element.name == "mj-raw":
            # Raw blocks are accepted anywhere; re-wrapping them would nest
            # a new mj-raw on every round trip
            return EditorNode(
                type="mj-raw",
                props=element.attrs,
                content=None if element.self_closing else self.inner_markup(element),
            )

        if definition is None:
            return self.passthrough(element)

        if parent_type is not None and not can_contain(parent_type, element.name):
            logger.debug(f"<{element.name}> is not allowed inside <{parent_type}>")
            return self.passthrough(element)

        node = EditorNode(type=element.name, props=element.attrs)

        if definition.text_bearing:
            node.content = None if element.self_closing else self.inner_markup(element)
        elif not definition.void and not element.self_closing:
            node.children = self.convert_children(element, element.name)

        return node

    def convert_children(self, element: Element, parent_type: str) -> list[EditorNode]:
        children: list[EditorNode] = []
        for child in element.children:
            if isinstance(child, TextNode):
                text = child.text.strip()
                if not text:
                    continue
                if can_contain(parent_type, "mj-text"):
                    children.append(EditorNode(type="mj-text", content=text))
                else:
                    logger.debug(f"Dropping stray text inside <{parent_type}>: {text[:40]!r}")
                continue
            if element.name == "mjml" and child.name == "mj-head":
                continue
            children.append(self.convert(child, parent_type))
        return children


def _text_of(source: str, element: Element) -> str:
    return html.unescape(source[element.inner_start:element.inner_end].strip())


def _parse_head(source: str, head: Optional[Element]) -> HeadSettings:
    settings = HeadSettings()
    if head is None:
        return settings

    attributes: dict[str, dict[str, str]] = {}

    for element in head.elements:
        if element.name == "mj-title":
            settings.title = _text_of(source, element)
        elif element.name == "mj-preview":
            settings.preview = _text_of(source, element)
        elif element.name == "mj-breakpoint":
            try:
                settings.breakpoint = validate_css_length(element.attrs.get("width"))
            except ValueError:
                logger.debug(f"Ignoring invalid breakpoint: {element.attrs.get('width')!r}")
        elif element.name == "mj-font":
            if element.attrs.get("name") and element.attrs.get("href"):
                settings.fonts.append(FontDefinition(name=element.attrs["name"], href=element.attrs["href"]))
        elif element.name == "mj-attributes":
            for item in element.elements:
                attrs = dict(item.attrs)
                tag = item.name
                if tag == "mj-class":
                    tag = f"mj-class:{attrs.pop('name', '')}"
                try:
                    validate_tag_name(tag)
                except ValueError:
                    logger.debug(f"Ignoring head attributes for invalid tag {tag!r}")
                    continue
                attributes.setdefault(tag, {}).update(attrs)
        elif element.name == "mj-style":
            style = source[element.inner_start:element.inner_end].strip()
            if style:
                settings.styles.append(style)
        else:
            logger.debug(f"Ignoring unsupported head element <{element.name}>")

    settings.attributes = attributes
    return settings


def _find_child(element: Element, name: str) -> Optional[Element]:
    return next((child for child in element.elements if child.name == name), None)


FRAGMENT_CONTAINERS = ("mj-column", "mj-section", "mj-body")


def _fragment_container(elements: list[Element]) -> str:
    """Innermost container accepting the most of elements (the rest become raw)"""

    def accepted(container: str) -> int:
        return sum(element.name == "mj-raw" or can_contain(container, element.name) for element in elements)

    return max(FRAGMENT_CONTAINERS, key=accepted)


def parse_mjml(mjml_text: str) -> ParseMjmlResult:
    """
    Parse markup into a document tree plus head settings.

    Raises:
        MjmlParseError: The markup cannot be tokenized, or holds no element
    """
    index = SourceIndex(mjml_text)
    root = build_element_tree(tokenize(mjml_text, index), mjml_text)
    top_level = root.elements
    if not top_level:
        raise index.error("No MJML elements found", 0)

    builder = _TreeBuilder(mjml_text)

    mjml_element = _find_child(root, "mjml")
    if mjml_element is not None:
        head = _find_child(mjml_element, "mj-head")
        document = EditorNode(
            type="mjml",
            props=mjml_element.attrs,
            children=builder.convert_children(mjml_element, "mjml"),
        )
        return ParseMjmlResult(document=document, head_settings=_parse_head(mjml_text, head))

    head = _find_child(root, "mj-head")
    body_element = _find_child(root, "mj-body")
    if body_element is not None:
        document = EditorNode(type="mjml", children=[builder.convert(body_element, "mjml")])
        return ParseMjmlResult(document=document, head_settings=_parse_head(mjml_text, head))

    # Fragment: a lone element is the root of its own subtree, siblings
    # share the nearest container that accepts them
    fragments = [element for element in top_level if element.name != "mj-head"] or top_level
    if not any(get_component_definition(element.name) for element in fragments):
        fragment_node = builder.raw_span(fragments[0].start, fragments[-1].end)
    elif len(fragments) == 1:
        fragment_node = builder.convert(fragments[0], None)
    else:
        container = _fragment_container(fragments)
        logger.debug(f"Wrapping {len(fragments)} top-level elements in <{container}>")
        fragment_node = EditorNode(
            type=container,
            children=[builder.convert(element, container) for element in fragments],
        )
        if container == "mj-body":
            fragment_node = EditorNode(type="mjml", children=[fragment_node])

    return ParseMjmlResult(document=fragment_node, head_settings=_parse_head(mjml_text, head))


def parse_mjml_to_node(mjml_text: str) -> EditorNode:
    """Parse markup into a document tree (head settings are discarded)"""
    return parse_mjml(mjml_text).document
