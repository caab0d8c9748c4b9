"""
MJML lowering pass

The compile engine only knows the core MJML components. Interactive types
(mj-accordion, mj-carousel) are rewritten into mj-raw nodes holding static,
table-based HTML before compilation. Each rule receives the node and returns
the rows it renders to; they are emitted inside the parent column's table,
so every rule produces <tr> elements.

Editor-only attributes (data-*) are stripped from every node on the way.
"""

import html
import logging
import re
from typing import Callable, Mapping, Optional

from ... import config
from .nodes import EditorNode, resolve_prop

logger = logging.getLogger(__name__)

EDITOR_ATTRIBUTE_PREFIX = "data-"

_NEEDS_LOWERING_RE = re.compile(r"<mj-(accordion|carousel)\b|\sdata-[A-Za-z0-9_.:\-]+\s*=", re.IGNORECASE)


def _style(*declarations: tuple[str, Optional[str]]) -> str:
    return ";".join(f"{name}:{value}" for name, value in declarations if value) + ";"


def _attr(value: Optional[str]) -> str:
    return html.escape(value or "", quote=True)


def _children_of(node: EditorNode, component_type: str) -> list[EditorNode]:
    return [child for child in node.children if child.type == component_type]


def lower_accordion(node: EditorNode) -> str:
    """One bordered box per accordion element, title row above its text row"""
    border = resolve_prop(node, "border")
    font_family = resolve_prop(node, "font-family")
    items = []

    for element in _children_of(node, "mj-accordion-element"):
        element_border = element.props.get("border") or border
        element_font = element.props.get("font-family") or font_family
        rows = []
        for part in element.children:
            if part.type not in ("mj-accordion-title", "mj-accordion-text"):
                continue
            is_title = part.type == "mj-accordion-title"
            style = _style(
                ("padding", resolve_prop(part, "padding")),
                ("background-color", resolve_prop(part, "background-color") or element.props.get("background-color")),
                ("color", resolve_prop(part, "color")),
                ("font-size", resolve_prop(part, "font-size")),
                ("font-family", element_font),
                ("font-weight", "bold" if is_title else None),
            )
            rows.append(f'<tr><td style="{_attr(style)}">{part.content or ""}</td></tr>')

        items.append(
            '<table role="presentation" width="100%" cellpadding="0" cellspacing="0" border="0" '
            f'style="{_attr(_style(("border-collapse", "collapse"), ("border", element_border)))}">'
            + "".join(rows)
            + "</table>"
        )

    cell_style = _style(
        ("padding", resolve_prop(node, "padding")),
        ("background-color", resolve_prop(node, "container-background-color")),
    )
    return f'<tr><td style="{_attr(cell_style)}">' + "".join(items) + "</td></tr>"


def _image_tag(image: EditorNode, width: str, border_radius: Optional[str]) -> str:
    style = _style(
        ("display", "block"),
        ("width", width),
        ("max-width", "100%"),
        ("border", "0"),
        ("border-radius", border_radius),
    )
    tag = f'<img src="{_attr(resolve_prop(image, "src"))}" alt="{_attr(resolve_prop(image, "alt"))}" style="{_attr(style)}" />'
    href = image.props.get("href")
    if href:
        target = image.props.get("target") or "_blank"
        tag = f'<a href="{_attr(href)}" target="{_attr(target)}">{tag}</a>'
    return tag


def lower_carousel(node: EditorNode) -> str:
    """First slide at full width, the remaining slides as a thumbnail strip"""
    images = _children_of(node, "mj-carousel-image")
    align = resolve_prop(node, "align")
    border_radius = resolve_prop(node, "border-radius")
    cell_style = _style(
        ("padding", "10px 25px"),
        ("background-color", resolve_prop(node, "container-background-color")),
    )

    if not images:
        return f'<tr><td style="{_attr(cell_style)}"></td></tr>'

    parts = [_image_tag(images[0], "100%", border_radius)]

    if len(images) > 1 and resolve_prop(node, "thumbnails") != "hidden":
        thumbnail_width = f"{100 // len(images)}%"
        cells = "".join(
            f'<td width="{thumbnail_width}" style="padding:4px 2px;">{_image_tag(image, "100%", border_radius)}</td>'
            for image in images
        )
        parts.append(
            '<table role="presentation" width="100%" cellpadding="0" cellspacing="0" border="0">'
            f"<tr>{cells}</tr></table>"
        )

    return f'<tr><td align="{_attr(align)}" style="{_attr(cell_style)}">' + "".join(parts) + "</td></tr>"


LOWERING_RULES: Mapping[str, Callable[[EditorNode], str]] = {
    "mj-accordion": lower_accordion,
    "mj-carousel": lower_carousel,
}


def strip_editor_attributes(props: dict[str, str]) -> dict[str, str]:
    return {name: value for name, value in props.items() if not name.startswith(EDITOR_ATTRIBUTE_PREFIX)}


def needs_lowering(mjml_text: str) -> bool:
    """True when markup holds lowered component types or editor-only attributes"""
    return _NEEDS_LOWERING_RE.search(mjml_text) is not None


def lower_document(
    root: EditorNode,
    rules: Optional[Mapping[str, Callable[[EditorNode], str]]] = None,
) -> EditorNode:
    """
    Copy of root ready for the compile engine.

    Args:
        root: Document (or subtree) to lower, left untouched
        rules: Type -> rule mapping; defaults to LOWERING_RULES when
            LOWER_INTERACTIVE_COMPONENTS is enabled, otherwise no rules

    Returns:
        New tree with lowered nodes replaced by mj-raw and data-* removed
    """
    if rules is None:
        rules = LOWERING_RULES if config.LOWER_INTERACTIVE_COMPONENTS else {}

    rule = rules.get(root.type)
    if rule is not None:
        logger.debug(f"Lowering {root.type} {root.id} to raw HTML")
        return EditorNode(id=root.id, type="mj-raw", content=rule(root))

    return EditorNode(
        id=root.id,
        type=root.type,
        props=strip_editor_attributes(root.props),
        children=[lower_document(child, rules) for child in root.children],
        content=root.content,
    )
