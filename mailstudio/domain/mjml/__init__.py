"""MJML domain - document model, serializer, parser and compiler"""

from .compiler import compile_document, compile_mjml
from .errors import MjmlCompileError, MjmlError, MjmlParseError, SchemaViolation
from .html_bridge import parse_html_to_mjml, parse_html_to_node, parse_html_to_nodes
from .lowering import LOWERING_RULES, lower_document
from .nodes import (
    EditorNode,
    FontDefinition,
    HeadSettings,
    clone_document_with_new_ids,
    create_node,
    find_node,
    find_parent,
    generate_id,
    insert_child,
    move_node,
    remove_node,
    resolve_prop,
    same_structure,
    update_props,
    validate_tree,
    walk,
)
from .parser import ParseMjmlResult, parse_mjml, parse_mjml_to_node
from .schema import (
    COMPONENT_CATEGORIES,
    COMPONENT_DEFINITIONS,
    PREDEFINED_SOCIAL_PLATFORMS,
    can_contain,
    get_allowed_children,
    get_component_definition,
    get_social_platform,
)
from .serializer import generate_mjml, head_to_mjml, node_to_mjml
from .tags import EditRange, LockedRegion, find_locked_regions, is_range_in_locked_region

__all__ = [
    "COMPONENT_CATEGORIES",
    "COMPONENT_DEFINITIONS",
    "LOWERING_RULES",
    "PREDEFINED_SOCIAL_PLATFORMS",
    "EditRange",
    "EditorNode",
    "FontDefinition",
    "HeadSettings",
    "LockedRegion",
    "MjmlCompileError",
    "MjmlError",
    "MjmlParseError",
    "ParseMjmlResult",
    "SchemaViolation",
    "can_contain",
    "clone_document_with_new_ids",
    "compile_document",
    "compile_mjml",
    "create_node",
    "find_locked_regions",
    "find_node",
    "find_parent",
    "generate_id",
    "generate_mjml",
    "get_allowed_children",
    "get_component_definition",
    "get_social_platform",
    "head_to_mjml",
    "insert_child",
    "is_range_in_locked_region",
    "lower_document",
    "move_node",
    "node_to_mjml",
    "parse_html_to_mjml",
    "parse_html_to_node",
    "parse_html_to_nodes",
    "parse_mjml",
    "parse_mjml_to_node",
    "remove_node",
    "resolve_prop",
    "same_structure",
    "update_props",
    "validate_tree",
    "walk",
]
