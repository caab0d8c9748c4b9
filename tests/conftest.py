import pytest

from mailstudio.domain.mjml.nodes import create_node


@pytest.fixture
def simple_document():
    """mjml > body > section > column > text"""
    text = create_node("mj-text", content="Hello")
    column = create_node("mj-column", children=[text])
    section = create_node("mj-section", children=[column])
    body = create_node("mj-body", children=[section])
    return create_node("mjml", children=[body])


@pytest.fixture
def rich_document():
    """A document built only from schema-default constructions"""
    column = create_node(
        "mj-column",
        children=[
            create_node("mj-text"),
            create_node("mj-image"),
            create_node("mj-button"),
            create_node("mj-divider"),
            create_node("mj-spacer"),
            create_node("mj-social"),
            create_node("mj-navbar"),
            create_node("mj-accordion"),
            create_node("mj-carousel"),
            create_node("mj-table"),
            create_node("mj-raw"),
        ],
    )
    section = create_node("mj-section", children=[column, create_node("mj-column")])
    body = create_node("mj-body", children=[section])
    return create_node("mjml", children=[body])
