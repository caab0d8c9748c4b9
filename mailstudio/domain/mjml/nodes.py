"""
Editor node model and factory

EditorNode is the in-memory document tree shared by the canvas, the property
panel and the source editor. Attribute bags are validated when a node is
built (pydantic), so every read site sees plain str -> str props.
"""

import logging
import uuid
from collections.abc import Iterator
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from ...config import NODE_ID_PREFIX
from ...shared.validators import (
    coerce_attribute_value,
    validate_attribute_map,
    validate_attribute_name,
    validate_css_length,
    validate_tag_name,
)
from .errors import SchemaViolation
from .schema import ChildSpec, can_contain, get_component_definition

logger = logging.getLogger(__name__)

_UNSET: Any = object()


def generate_id() -> str:
    """New node identifier, unique for the lifetime of the process"""
    return f"{NODE_ID_PREFIX}{uuid.uuid4().hex}"


class EditorNode(BaseModel):
    """One element of the document tree"""

    id: str = Field(default_factory=generate_id)
    type: str
    props: dict[str, str] = Field(default_factory=dict)
    children: list["EditorNode"] = Field(default_factory=list)
    content: Optional[str] = None

    @field_validator("props", mode="before")
    @classmethod
    def validate_props(cls, v):
        return validate_attribute_map(v)


class FontDefinition(BaseModel):
    name: str
    href: str


class HeadSettings(BaseModel):
    """Document-wide settings serialized into <mj-head>"""

    title: str = ""
    preview: str = ""
    breakpoint: Optional[str] = None
    fonts: list[FontDefinition] = Field(default_factory=list)
    # tag name -> default attributes; "mj-all" applies to every tag,
    # "mj-class:<name>" holds an mj-class definition
    attributes: dict[str, dict[str, str]] = Field(default_factory=dict)
    styles: list[str] = Field(default_factory=list)

    @field_validator("breakpoint")
    @classmethod
    def validate_breakpoint(cls, v):
        if v:
            return validate_css_length(v)
        return v

    @field_validator("attributes", mode="before")
    @classmethod
    def validate_attributes(cls, v):
        if not v:
            return {}
        return {validate_tag_name(tag): validate_attribute_map(attrs) for tag, attrs in v.items()}

    def is_empty(self) -> bool:
        return not (self.title or self.preview or self.breakpoint or self.fonts or self.attributes or self.styles)


# ============================================================================
# FACTORY
# ============================================================================


def _build_from_spec(spec: ChildSpec) -> EditorNode:
    children = [_build_from_spec(child) for child in spec.children] if spec.children else None
    return create_node(
        spec.type,
        dict(spec.props),
        children=children,
        content=spec.content if spec.content is not None else _UNSET,
    )


def create_node(
    component_type: str,
    props: Optional[dict[str, Any]] = None,
    *,
    children: Optional[list[EditorNode]] = None,
    content: Any = _UNSET,
) -> EditorNode:
    """
    Build a node of component_type populated with schema defaults.

    Args:
        component_type: Schema type, e.g. "mj-text"
        props: Attribute overrides merged over the defaults (None removes a default)
        children: Explicit children, replacing the schema default children
        content: Explicit content, replacing the schema default content

    Raises:
        SchemaViolation: Unknown type, or a child the schema does not allow
    """
    definition = get_component_definition(component_type)
    if definition is None:
        raise SchemaViolation(f"Unknown component type: {component_type}", child_type=component_type)

    merged: dict[str, Any] = definition.default_props()
    if props:
        merged.update(props)

    if children is None:
        built_children = [_build_from_spec(spec) for spec in definition.default_children]
    else:
        for child in children:
            if not can_contain(component_type, child.type):
                raise SchemaViolation(
                    f"{component_type} cannot contain {child.type}",
                    parent_type=component_type,
                    child_type=child.type,
                )
        built_children = list(children)

    node_content = definition.default_content if content is _UNSET else content

    return EditorNode(
        type=component_type,
        props=merged,
        children=built_children,
        content=node_content,
    )


def clone_document_with_new_ids(root: EditorNode) -> EditorNode:
    """Deep copy of root where every node gets a fresh id"""
    return EditorNode(
        id=generate_id(),
        type=root.type,
        props=dict(root.props),
        children=[clone_document_with_new_ids(child) for child in root.children],
        content=root.content,
    )


def resolve_prop(node: EditorNode, name: str) -> Optional[str]:
    """Attribute value with schema-default fallback (None when neither exists)"""
    if name in node.props:
        return node.props[name]
    definition = get_component_definition(node.type)
    if definition is None:
        return None
    return definition.attributes.get(name)


# ============================================================================
# STRUCTURAL QUERIES
# ============================================================================


def walk(root: EditorNode) -> Iterator[EditorNode]:
    """Depth-first traversal, yielding root first"""
    yield root
    for child in root.children:
        yield from walk(child)


def find_node(root: EditorNode, node_id: str) -> Optional[EditorNode]:
    for node in walk(root):
        if node.id == node_id:
            return node
    return None


def find_parent(root: EditorNode, node_id: str) -> Optional[EditorNode]:
    for node in walk(root):
        if any(child.id == node_id for child in node.children):
            return node
    return None


def collect_ids(root: EditorNode) -> list[str]:
    return [node.id for node in walk(root)]


def structure_of(node: EditorNode) -> dict:
    """Identity-free view of a subtree (type, props, content, children)"""
    return {
        "type": node.type,
        "props": dict(node.props),
        "content": node.content,
        "children": [structure_of(child) for child in node.children],
    }


def same_structure(a: EditorNode, b: EditorNode) -> bool:
    """Structural equality ignoring node ids"""
    return structure_of(a) == structure_of(b)


def validate_tree(root: EditorNode) -> EditorNode:
    """
    Check a tree received from outside against the schema.

    The root may be any known type. Below it every child must be allowed
    by its parent, except mj-raw which is accepted anywhere.

    Raises:
        SchemaViolation: Unknown type or a forbidden parent/child pairing
    """
    if get_component_definition(root.type) is None:
        raise SchemaViolation(f"Unknown component type: {root.type}", child_type=root.type)

    for node in walk(root):
        for child in node.children:
            if child.type == "mj-raw" and node.type != "mj-raw":
                continue
            if not can_contain(node.type, child.type):
                raise SchemaViolation(
                    f"{node.type} cannot contain {child.type}",
                    parent_type=node.type,
                    child_type=child.type,
                )
    return root


# ============================================================================
# MUTATION HELPERS
# ============================================================================


def insert_child(parent: EditorNode, child: EditorNode, index: Optional[int] = None) -> EditorNode:
    """
    Insert child under parent at index (appended when None).

    Raises:
        SchemaViolation: If the schema does not allow the pairing
    """
    if not can_contain(parent.type, child.type):
        raise SchemaViolation(
            f"{parent.type} cannot contain {child.type}",
            parent_type=parent.type,
            child_type=child.type,
        )

    if index is None or index >= len(parent.children):
        parent.children.append(child)
    else:
        parent.children.insert(max(index, 0), child)
    return child


def remove_node(root: EditorNode, node_id: str) -> Optional[EditorNode]:
    """Detach the node with node_id from its parent and return it"""
    parent = find_parent(root, node_id)
    if parent is None:
        return None

    for position, child in enumerate(parent.children):
        if child.id == node_id:
            return parent.children.pop(position)
    return None


def move_node(root: EditorNode, node_id: str, target_id: str, index: Optional[int] = None) -> EditorNode:
    """
    Move a node under a new parent.

    Raises:
        SchemaViolation: Unknown node/target, a move into the node's own
            subtree, or a pairing the schema forbids
    """
    node = find_node(root, node_id)
    target = find_node(root, target_id)
    if node is None or target is None:
        raise SchemaViolation(f"Cannot move {node_id} to {target_id}: node not found")

    if find_node(node, target_id) is not None:
        raise SchemaViolation(
            f"Cannot move {node.type} into its own subtree",
            parent_type=target.type,
            child_type=node.type,
        )

    if not can_contain(target.type, node.type):
        raise SchemaViolation(
            f"{target.type} cannot contain {node.type}",
            parent_type=target.type,
            child_type=node.type,
        )

    old_parent = find_parent(root, node_id)
    old_index = next(i for i, child in enumerate(old_parent.children) if child.id == node_id)
    old_parent.children.pop(old_index)

    # Reordering within one parent: positions after the old slot shift left
    if old_parent is target and index is not None and index > old_index:
        index -= 1

    logger.debug(f"Moving {node.type} {node_id} into {target.type} {target_id} at {index}")
    return insert_child(target, node, index)


def update_props(node: EditorNode, changes: dict[str, Any]) -> EditorNode:
    """Apply attribute changes in place, a None value removes the attribute"""
    for key, value in changes.items():
        validate_attribute_name(key)
        coerced = coerce_attribute_value(value)
        if coerced is None:
            node.props.pop(key, None)
        else:
            node.props[key] = coerced
    return node
