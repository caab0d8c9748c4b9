"""
Tree -> MJML serializer

Deterministic and total over well-formed trees: attribute order is stable
(schema order, then the remaining names sorted), indentation is two spaces
per level and content is emitted verbatim.
"""

import html
from typing import Optional

from .nodes import EditorNode, HeadSettings
from .schema import can_contain, get_component_definition

INDENT = "  "


def _ordered_attribute_names(node: EditorNode) -> list[str]:
    definition = get_component_definition(node.type)
    declared = definition.attributes if definition else {}
    ordered = [name for name in declared if name in node.props]
    ordered.extend(sorted(name for name in node.props if name not in declared))
    return ordered


def format_attributes(attrs: dict[str, str], order: Optional[list[str]] = None) -> str:
    """' key="value" ...' with escaped values, or "" when there are none"""
    names = order if order is not None else list(attrs)
    return "".join(f' {name}="{html.escape(attrs[name], quote=True)}"' for name in names)


def node_to_mjml(node: EditorNode, depth: int = 0) -> str:
    """Serialize one node and its subtree"""
    pad = INDENT * depth
    attributes = format_attributes(node.props, _ordered_attribute_names(node))

    if node.children:
        inner = "\n".join(node_to_mjml(child, depth + 1) for child in node.children)
        return f"{pad}<{node.type}{attributes}>\n{inner}\n{pad}</{node.type}>"

    if node.content is not None:
        return f"{pad}<{node.type}{attributes}>{node.content}</{node.type}>"

    return f"{pad}<{node.type}{attributes} />"


def head_to_mjml(head_settings: Optional[HeadSettings], depth: int = 1) -> str:
    """Serialize head settings into an <mj-head> block ("" when empty)"""
    if head_settings is None or head_settings.is_empty():
        return ""

    pad = INDENT * depth
    inner_pad = INDENT * (depth + 1)
    lines = [f"{pad}<mj-head>"]

    if head_settings.title:
        lines.append(f"{inner_pad}<mj-title>{html.escape(head_settings.title, quote=False)}</mj-title>")
    if head_settings.preview:
        lines.append(f"{inner_pad}<mj-preview>{html.escape(head_settings.preview, quote=False)}</mj-preview>")
    if head_settings.breakpoint:
        lines.append(f'{inner_pad}<mj-breakpoint width="{html.escape(head_settings.breakpoint)}" />')
    for font in head_settings.fonts:
        lines.append(
            f'{inner_pad}<mj-font name="{html.escape(font.name)}" href="{html.escape(font.href)}" />'
        )

    if head_settings.attributes:
        lines.append(f"{inner_pad}<mj-attributes>")
        attribute_pad = INDENT * (depth + 2)
        # mj-all first so per-tag defaults override it
        tags = sorted(head_settings.attributes, key=lambda tag: (tag != "mj-all", tag))
        for tag in tags:
            attrs = head_settings.attributes[tag]
            if tag.startswith("mj-class:"):
                class_name = tag.split(":", 1)[1]
                rendered = format_attributes({"name": class_name, **attrs})
                lines.append(f"{attribute_pad}<mj-class{rendered} />")
            else:
                lines.append(f"{attribute_pad}<{tag}{format_attributes(attrs, sorted(attrs))} />")
        lines.append(f"{inner_pad}</mj-attributes>")

    for style in head_settings.styles:
        lines.append(f"{inner_pad}<mj-style>{style}</mj-style>")

    lines.append(f"{pad}</mj-head>")
    return "\n".join(lines)


def _wrap_for_body(node: EditorNode) -> EditorNode:
    if node.type == "mj-raw" or can_contain("mj-body", node.type):
        return node
    if not can_contain("mj-section", node.type):
        node = EditorNode(type="mj-column", children=[node])
    return EditorNode(type="mj-section", children=[node])


def generate_mjml(document_root: EditorNode, head_settings: Optional[HeadSettings] = None) -> str:
    """
    Full MJML document for a tree.

    An mjml root gets the head block inserted before its children, an
    mj-body root is wrapped in <mjml>, anything else in <mjml><mj-body>
    plus the section and column levels the body requires.
    """
    if document_root.type == "mjml":
        root = document_root
        body_parts = [node_to_mjml(child, 1) for child in root.children]
        root_attributes = format_attributes(root.props, _ordered_attribute_names(root))
    elif document_root.type == "mj-body":
        body_parts = [node_to_mjml(document_root, 1)]
        root_attributes = ""
    else:
        body = EditorNode(type="mj-body", children=[_wrap_for_body(document_root)])
        body_parts = [node_to_mjml(body, 1)]
        root_attributes = ""

    head = head_to_mjml(head_settings, 1)
    parts = [head] if head else []
    parts.extend(body_parts)

    if not parts:
        return f"<mjml{root_attributes}>\n</mjml>"
    return f"<mjml{root_attributes}>\n" + "\n".join(parts) + "\n</mjml>"
