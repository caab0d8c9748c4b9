"""
HTML -> component tree bridge

Best-effort mapping of pasted HTML fragments onto column-level components.
Block-level text becomes mj-text, images, rules and tables map to their
MJML counterparts, button-styled links become mj-button. Anything the walk
cannot place confidently ends up as a single mj-text holding the escaped
text of the fragment.
"""

import logging
from typing import Optional

from bs4 import BeautifulSoup
from bs4.element import CData, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

from ...shared.validators import validate_css_length
from ...utils.sanitization import (
    collapse_whitespace,
    escape_text,
    sanitize_html,
    sanitize_table_rows,
)
from .nodes import EditorNode, create_node
from .serializer import node_to_mjml

logger = logging.getLogger(__name__)

BLOCK_TEXT_TAGS = frozenset({"p", "h1", "h2", "h3", "h4", "h5", "h6", "ul", "ol", "blockquote", "pre"})

CONTAINER_TAGS = frozenset(
    {
        "html", "body", "div", "section", "article", "main", "header", "footer",
        "aside", "nav", "figure", "figcaption", "center", "form", "fieldset",
    }
)

DROPPED_TAGS = frozenset(
    {
        "script", "style", "noscript", "template", "head", "meta", "link", "title",
        "iframe", "object", "embed", "svg", "canvas", "button", "input", "select", "textarea",
    }
)

STRUCTURAL_TAGS = sorted(BLOCK_TEXT_TAGS | CONTAINER_TAGS | {"img", "hr", "table"})

SKIPPED_STRINGS = (Comment, Doctype, Declaration, CData, ProcessingInstruction)

UNSAFE_URL_SCHEMES = ("javascript:", "vbscript:", "data:text")


def _parse_style(style: Optional[str]) -> dict[str, str]:
    declarations = {}
    for part in (style or "").split(";"):
        if ":" not in part:
            continue
        name, value = part.split(":", 1)
        declarations[name.strip().lower()] = value.strip()
    return declarations


def _safe_url(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    url = url.strip()
    if url.lower().startswith(UNSAFE_URL_SCHEMES):
        logger.debug(f"Dropping unsafe URL: {url[:40]!r}")
        return None
    return url


def _is_button_link(tag: Tag) -> bool:
    classes = tag.get("class") or []
    if any("btn" in name or "button" in name for name in classes):
        return True
    style = _parse_style(tag.get("style"))
    return "background" in style or "background-color" in style


def _image_node(img: Tag, href: Optional[str] = None) -> Optional[EditorNode]:
    src = _safe_url(img.get("src"))
    if not src:
        return None

    props = {"src": src, "alt": img.get("alt") or ""}
    width = img.get("width")
    if width:
        try:
            props["width"] = validate_css_length(width)
        except ValueError:
            logger.debug(f"Ignoring image width {width!r}")
    if href:
        props["href"] = href
    return create_node("mj-image", props)


def _button_node(link: Tag) -> EditorNode:
    props = {"href": _safe_url(link.get("href")) or "#"}
    style = _parse_style(link.get("style"))
    background = style.get("background-color") or style.get("background")
    if background:
        props["background-color"] = background
    if style.get("color"):
        props["color"] = style["color"]
    return create_node("mj-button", props, content=escape_text(collapse_whitespace(link.get_text())))


def _table_node(table: Tag) -> Optional[EditorNode]:
    content = sanitize_table_rows(str(table))
    if not content:
        return None
    return create_node("mj-table", content=content)


class _FragmentWalker:
    """Collects column-level nodes while merging adjacent inline content"""

    def __init__(self):
        self.nodes: list[EditorNode] = []
        self.inline_run: list[str] = []

    def flush(self) -> None:
        if not self.inline_run:
            return
        markup = "".join(self.inline_run)
        self.inline_run = []
        self.add_text(markup)

    def add_text(self, markup: str) -> None:
        content = sanitize_html(markup)
        if not collapse_whitespace(BeautifulSoup(content, "html.parser").get_text()):
            return
        self.nodes.append(create_node("mj-text", content=content))

    def add(self, node: Optional[EditorNode]) -> None:
        self.flush()
        if node is not None:
            self.nodes.append(node)

    def walk(self, parent: Tag) -> None:
        for child in parent.children:
            if isinstance(child, SKIPPED_STRINGS):
                continue
            if isinstance(child, NavigableString):
                self.inline_run.append(escape_text(str(child)))
                continue
            if isinstance(child, Tag):
                self.visit(child)

    def visit(self, tag: Tag) -> None:
        name = tag.name.lower()

        if name == "img":
            self.add(_image_node(tag))
        elif name == "hr":
            self.add(create_node("mj-divider"))
        elif name == "table":
            self.add(_table_node(tag))
        elif name == "a" and _is_button_link(tag):
            self.add(_button_node(tag))
        elif name == "a" and tag.find("img") is not None and not collapse_whitespace(tag.get_text()):
            self.add(_image_node(tag.find("img"), _safe_url(tag.get("href"))))
        elif name in BLOCK_TEXT_TAGS:
            self.flush()
            self.add_text(str(tag))
        elif name in CONTAINER_TAGS or tag.find(STRUCTURAL_TAGS) is not None:
            self.flush()
            self.walk(tag)
            self.flush()
        else:
            # inline markup (strong, em, span, a, br ...) joins the running text
            self.inline_run.append(str(tag))


def parse_html_to_nodes(html: str) -> list[EditorNode]:
    """Map an HTML fragment onto column-level nodes ([] for blank input)"""
    if not html or not html.strip():
        return []

    soup = BeautifulSoup(html, "html.parser")
    for dropped in soup.find_all(sorted(DROPPED_TAGS)):
        if dropped.decomposed:
            continue
        logger.debug(f"Dropping <{dropped.name}> from pasted HTML")
        dropped.decompose()

    walker = _FragmentWalker()
    walker.walk(soup)
    walker.flush()

    if not walker.nodes:
        text = collapse_whitespace(soup.get_text())
        if text:
            logger.debug("No structural mapping for pasted HTML, keeping its text")
            return [create_node("mj-text", content=escape_text(text))]
    return walker.nodes


def parse_html_to_node(html: str) -> EditorNode:
    """HTML fragment wrapped in a one-column section"""
    column = create_node("mj-column", children=parse_html_to_nodes(html))
    return create_node("mj-section", children=[column])


def parse_html_to_mjml(html: str) -> str:
    return node_to_mjml(parse_html_to_node(html))
