"""
Tests for the node model, factory and mutation helpers.
"""

import pytest
from pydantic import ValidationError

from mailstudio.config import NODE_ID_PREFIX
from mailstudio.domain.mjml.errors import SchemaViolation
from mailstudio.domain.mjml.nodes import (
    EditorNode,
    HeadSettings,
    clone_document_with_new_ids,
    collect_ids,
    create_node,
    find_node,
    find_parent,
    generate_id,
    insert_child,
    move_node,
    remove_node,
    resolve_prop,
    same_structure,
    structure_of,
    update_props,
    validate_tree,
    walk,
)
from mailstudio.domain.mjml.schema import DEFAULT_SOCIAL_ELEMENTS


class TestEditorNode:
    def test_generated_id(self):
        node = EditorNode(type="mj-text")
        assert node.id.startswith(NODE_ID_PREFIX)

    def test_ids_are_unique(self):
        ids = {generate_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_props_coerced_to_strings(self):
        node = EditorNode(type="mj-spacer", props={"height": 20, "data-locked": True})
        assert node.props == {"height": "20", "data-locked": "true"}

    def test_none_props_dropped(self):
        node = EditorNode(type="mj-text", props={"color": None})
        assert node.props == {}

    def test_invalid_attribute_name_rejected(self):
        with pytest.raises(ValidationError):
            EditorNode(type="mj-text", props={"bad name": "x"})

    def test_container_value_rejected(self):
        with pytest.raises(ValidationError):
            EditorNode(type="mj-text", props={"color": ["red"]})

    def test_content_none_and_empty_are_distinct(self):
        assert EditorNode(type="mj-text").content is None
        assert EditorNode(type="mj-text", content="").content == ""


class TestHeadSettings:
    def test_empty(self):
        assert HeadSettings().is_empty()
        assert not HeadSettings(title="Hi").is_empty()

    def test_breakpoint_normalized(self):
        assert HeadSettings(breakpoint="320").breakpoint == "320px"

    def test_invalid_breakpoint(self):
        with pytest.raises(ValidationError):
            HeadSettings(breakpoint="wide")

    def test_invalid_attribute_tag(self):
        with pytest.raises(ValidationError):
            HeadSettings(attributes={"not a tag": {"color": "red"}})


class TestCreateNode:
    def test_defaults(self):
        node = create_node("mj-text")
        assert node.type == "mj-text"
        assert node.props["font-size"] == "16px"
        assert node.content == "Write your text here"
        assert node.children == []

    def test_overrides(self):
        node = create_node("mj-button", {"href": "https://example.com", "color": None}, content="Go")
        assert node.props["href"] == "https://example.com"
        assert "color" not in node.props
        assert node.content == "Go"

    def test_idempotent_defaulting(self):
        first = create_node("mj-section")
        second = create_node("mj-section")
        assert first.id != second.id
        assert first.props == second.props
        assert same_structure(first, second)

    def test_social_gets_default_elements(self):
        social = create_node("mj-social")
        assert len(social.children) == len(DEFAULT_SOCIAL_ELEMENTS)
        assert [child.props["name"] for child in social.children] == ["facebook", "twitter", "linkedin"]
        assert all(child.type == "mj-social-element" for child in social.children)

    def test_default_children_chain(self):
        root = create_node("mjml")
        assert [node.type for node in walk(root)] == ["mjml", "mj-body", "mj-section", "mj-column"]

    def test_explicit_content_none(self):
        assert create_node("mj-text", content=None).content is None

    def test_unknown_type(self):
        with pytest.raises(SchemaViolation):
            create_node("mj-nope")

    def test_forbidden_child(self):
        with pytest.raises(SchemaViolation) as exc_info:
            create_node("mj-column", children=[create_node("mj-section")])
        assert exc_info.value.parent_type == "mj-column"
        assert exc_info.value.child_type == "mj-section"


class TestClone:
    def test_new_ids_everywhere(self, rich_document):
        clone = clone_document_with_new_ids(rich_document)
        assert same_structure(clone, rich_document)
        assert not set(collect_ids(clone)) & set(collect_ids(rich_document))

    def test_repeated_clones_never_share_ids(self, rich_document):
        ids = []
        for _ in range(3):
            ids.extend(collect_ids(clone_document_with_new_ids(rich_document)))
        assert len(ids) == len(set(ids))

    def test_clone_is_independent(self, simple_document):
        clone = clone_document_with_new_ids(simple_document)
        clone.children[0].props["background-color"] = "#000000"
        assert simple_document.children[0].props["background-color"] == "#ffffff"


class TestQueries:
    def test_resolve_prop(self):
        node = EditorNode(type="mj-text", props={"color": "#ff0000"})
        assert resolve_prop(node, "color") == "#ff0000"
        assert resolve_prop(node, "font-size") == "16px"
        assert resolve_prop(node, "font-family") is None
        assert resolve_prop(EditorNode(type="mj-unknown"), "color") is None

    def test_find_node_and_parent(self, simple_document):
        text = simple_document.children[0].children[0].children[0].children[0]
        assert find_node(simple_document, text.id) is text
        assert find_parent(simple_document, text.id).type == "mj-column"
        assert find_parent(simple_document, simple_document.id) is None
        assert find_node(simple_document, "missing") is None

    def test_structure_ignores_ids(self):
        a = EditorNode(type="mj-text", content="x")
        b = EditorNode(type="mj-text", content="x")
        assert structure_of(a) == structure_of(b)
        assert not same_structure(a, EditorNode(type="mj-text", content="y"))


class TestValidateTree:
    def test_valid_document(self, simple_document):
        assert validate_tree(simple_document) is simple_document

    def test_fragment_root_allowed(self):
        validate_tree(create_node("mj-column", children=[create_node("mj-text")]))

    def test_raw_accepted_anywhere(self):
        column = EditorNode(type="mj-column", children=[EditorNode(type="mj-raw", content="<p>x</p>")])
        validate_tree(column)

    def test_unknown_root(self):
        with pytest.raises(SchemaViolation, match="Unknown component type"):
            validate_tree(EditorNode(type="foo"))

    def test_unknown_child(self):
        with pytest.raises(SchemaViolation) as exc_info:
            validate_tree(EditorNode(type="mj-column", children=[EditorNode(type="foo")]))
        assert exc_info.value.child_type == "foo"

    def test_forbidden_nested_pairing(self, simple_document):
        column = simple_document.children[0].children[0].children[0]
        column.children.append(EditorNode(type="mj-section"))
        with pytest.raises(SchemaViolation) as exc_info:
            validate_tree(simple_document)
        assert (exc_info.value.parent_type, exc_info.value.child_type) == ("mj-column", "mj-section")

    def test_children_under_void_type(self):
        with pytest.raises(SchemaViolation):
            validate_tree(EditorNode(type="mj-image", children=[EditorNode(type="mj-text")]))


class TestMutation:
    def test_insert_child(self):
        column = create_node("mj-column")
        first = insert_child(column, create_node("mj-text", content="a"))
        insert_child(column, create_node("mj-text", content="b"), 0)
        assert [child.content for child in column.children] == ["b", "a"]
        assert column.children[1] is first

    def test_insert_forbidden(self):
        with pytest.raises(SchemaViolation):
            insert_child(create_node("mj-column"), create_node("mj-section"))

    def test_remove_node(self, simple_document):
        text = simple_document.children[0].children[0].children[0].children[0]
        removed = remove_node(simple_document, text.id)
        assert removed is text
        assert find_node(simple_document, text.id) is None
        assert remove_node(simple_document, "missing") is None

    def test_move_between_columns(self):
        text = create_node("mj-text")
        left = create_node("mj-column", children=[text])
        right = create_node("mj-column", children=[])
        section = create_node("mj-section", children=[left, right])
        move_node(section, text.id, right.id)
        assert left.children == []
        assert right.children == [text]

    def test_move_within_parent(self):
        texts = [create_node("mj-text", content=str(i)) for i in range(3)]
        column = create_node("mj-column", children=list(texts))
        move_node(column, texts[0].id, column.id, 2)
        assert [child.content for child in column.children] == ["1", "0", "2"]

    def test_move_into_own_subtree(self, simple_document):
        section = simple_document.children[0].children[0]
        column = section.children[0]
        with pytest.raises(SchemaViolation):
            move_node(simple_document, section.id, column.id)

    def test_move_into_invalid_parent(self, simple_document):
        body = simple_document.children[0]
        column = body.children[0].children[0]
        with pytest.raises(SchemaViolation):
            move_node(simple_document, column.id, body.id)
        assert find_parent(simple_document, column.id).type == "mj-section"

    def test_move_unknown_node(self, simple_document):
        with pytest.raises(SchemaViolation):
            move_node(simple_document, "missing", simple_document.id)

    def test_update_props(self):
        node = create_node("mj-text")
        update_props(node, {"color": "#000000", "font-size": None, "data-locked": True})
        assert node.props["color"] == "#000000"
        assert "font-size" not in node.props
        assert node.props["data-locked"] == "true"

    def test_update_props_invalid_name(self):
        with pytest.raises(ValueError):
            update_props(create_node("mj-text"), {"bad name": "x"})
