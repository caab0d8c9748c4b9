"""
Tests for the template catalog.
"""

import pytest

from mailstudio.domain.mjml.nodes import collect_ids, same_structure, validate_tree, walk
from mailstudio.domain.mjml.schema import can_contain
from mailstudio.domain.templates.catalog import (
    TEMPLATES,
    empty_document,
    get_template,
    instantiate_template,
    list_templates,
)


class TestEmptyDocument:
    def test_shape(self):
        root = empty_document()
        assert [node.type for node in walk(root)] == ["mjml", "mj-body", "mj-section", "mj-column"]

    def test_fresh_ids(self):
        first, second = empty_document(), empty_document()
        assert same_structure(first, second)
        assert not set(collect_ids(first)) & set(collect_ids(second))


class TestCatalog:
    def test_required_templates(self):
        assert {"blank", "welcome", "newsletter", "promotion", "receipt"} <= set(TEMPLATES)

    def test_list_and_get(self):
        assert len(list_templates()) == len(TEMPLATES)
        assert get_template("welcome").name == "Welcome"
        assert get_template("missing") is None

    @pytest.mark.parametrize("template_id", sorted(TEMPLATES))
    def test_templates_respect_containment(self, template_id):
        for node in walk(TEMPLATES[template_id].document):
            for child in node.children:
                assert can_contain(node.type, child.type), (node.type, child.type)

    def test_template_head(self):
        head = get_template("welcome").head_settings
        assert head.title == "Welcome!"
        assert "mj-all" in head.attributes


class TestInstantiate:
    def test_clone_has_new_ids(self):
        document, _ = instantiate_template("newsletter")
        template = get_template("newsletter")
        assert same_structure(document, template.document)
        assert not set(collect_ids(document)) & set(collect_ids(template.document))

    def test_instances_are_independent(self):
        document, head = instantiate_template("welcome")
        document.children[0].props["background-color"] = "#000000"
        head.title = "Changed"
        fresh_document, fresh_head = instantiate_template("welcome")
        assert fresh_document.children[0].props["background-color"] != "#000000"
        assert fresh_head.title == "Welcome!"

    def test_get_template_returns_a_copy(self):
        get_template("welcome").document.children.clear()
        get_template("welcome").head_settings.title = "Changed"
        document, head = instantiate_template("welcome")
        assert document.children
        assert head.title == "Welcome!"

    def test_listed_templates_are_copies(self):
        for template in list_templates():
            template.document.children.clear()
        assert all(template.document.children for template in list_templates())

    def test_instances_pass_tree_validation(self):
        for template_id in TEMPLATES:
            document, _ = instantiate_template(template_id)
            assert validate_tree(document) is document

    def test_unknown_template(self):
        with pytest.raises(KeyError):
            instantiate_template("missing")
