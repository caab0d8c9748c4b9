"""
Tests for tree -> MJML serialization.
"""

from mailstudio.domain.mjml.nodes import EditorNode, FontDefinition, HeadSettings, create_node, validate_tree
from mailstudio.domain.mjml.parser import parse_mjml_to_node
from mailstudio.domain.mjml.serializer import format_attributes, generate_mjml, head_to_mjml, node_to_mjml


class TestFormatAttributes:
    def test_escaping(self):
        assert format_attributes({"title": "a \"b\" & <c> 'd'"}) == (
            ' title="a &quot;b&quot; &amp; &lt;c&gt; &#x27;d&#x27;"'
        )

    def test_empty(self):
        assert format_attributes({}) == ""


class TestNodeToMjml:
    def test_content_inline(self):
        node = EditorNode(type="mj-text", props={"color": "red"}, content="Hi <b>there</b>")
        assert node_to_mjml(node) == '<mj-text color="red">Hi <b>there</b></mj-text>'

    def test_empty_content_is_paired(self):
        assert node_to_mjml(EditorNode(type="mj-text", content="")) == "<mj-text></mj-text>"

    def test_no_content_self_closes(self):
        assert node_to_mjml(EditorNode(type="mj-spacer", props={"height": "20px"})) == '<mj-spacer height="20px" />'

    def test_schema_order_then_sorted(self):
        node = EditorNode(type="mj-text", props={"zeta": "1", "padding": "0", "align": "left", "alpha": "2"})
        assert node_to_mjml(node) == '<mj-text align="left" padding="0" alpha="2" zeta="1" />'

    def test_nesting_and_indentation(self):
        column = EditorNode(type="mj-column", children=[EditorNode(type="mj-text", content="Hi")])
        section = EditorNode(type="mj-section", children=[column])
        assert node_to_mjml(section) == (
            "<mj-section>\n"
            "  <mj-column>\n"
            "    <mj-text>Hi</mj-text>\n"
            "  </mj-column>\n"
            "</mj-section>"
        )

    def test_defaults_emitted(self):
        markup = node_to_mjml(create_node("mj-button"))
        assert 'background-color="#2563eb"' in markup
        assert ">Click me</mj-button>" in markup

    def test_locked_attribute_preserved(self):
        node = EditorNode(type="mj-section", props={"data-locked": "true"})
        assert node_to_mjml(node) == '<mj-section data-locked="true" />'


class TestHeadToMjml:
    def test_empty_head(self):
        assert head_to_mjml(HeadSettings()) == ""
        assert head_to_mjml(None) == ""

    def test_full_head(self):
        head = HeadSettings(
            title="Hello & welcome",
            preview="Preview",
            breakpoint="480px",
            fonts=[FontDefinition(name="Inter", href="https://fonts.example.com/inter.css")],
            attributes={
                "mj-text": {"color": "#333333"},
                "mj-all": {"font-family": "Inter"},
                "mj-class:blue": {"color": "blue"},
            },
            styles=[".red { color: red; }"],
        )
        assert head_to_mjml(head, 0) == (
            "<mj-head>\n"
            "  <mj-title>Hello &amp; welcome</mj-title>\n"
            "  <mj-preview>Preview</mj-preview>\n"
            '  <mj-breakpoint width="480px" />\n'
            '  <mj-font name="Inter" href="https://fonts.example.com/inter.css" />\n'
            "  <mj-attributes>\n"
            '    <mj-all font-family="Inter" />\n'
            '    <mj-class name="blue" color="blue" />\n'
            '    <mj-text color="#333333" />\n'
            "  </mj-attributes>\n"
            "  <mj-style>.red { color: red; }</mj-style>\n"
            "</mj-head>"
        )


class TestGenerateMjml:
    def test_mjml_root_with_head(self, simple_document):
        markup = generate_mjml(simple_document, HeadSettings(title="T"))
        lines = markup.splitlines()
        assert lines[0] == "<mjml>"
        assert lines[1] == "  <mj-head>"
        assert lines[-1] == "</mjml>"
        assert "    <mj-title>T</mj-title>" in lines
        assert markup.index("<mj-head>") < markup.index("<mj-body")

    def test_body_root_wrapped(self):
        markup = generate_mjml(EditorNode(type="mj-body"))
        assert markup == "<mjml>\n  <mj-body />\n</mjml>"

    def test_fragment_root_wrapped_in_body(self):
        markup = generate_mjml(EditorNode(type="mj-section"))
        assert markup == "<mjml>\n  <mj-body>\n    <mj-section />\n  </mj-body>\n</mjml>"

    def test_column_root_gets_a_section(self):
        markup = generate_mjml(EditorNode(type="mj-column"))
        assert markup == "<mjml>\n  <mj-body>\n    <mj-section>\n      <mj-column />\n    </mj-section>\n  </mj-body>\n</mjml>"

    def test_leaf_root_gets_section_and_column(self):
        markup = generate_mjml(EditorNode(type="mj-text", content="Hi"))
        assert markup == (
            "<mjml>\n"
            "  <mj-body>\n"
            "    <mj-section>\n"
            "      <mj-column>\n"
            "        <mj-text>Hi</mj-text>\n"
            "      </mj-column>\n"
            "    </mj-section>\n"
            "  </mj-body>\n"
            "</mjml>"
        )

    def test_wrapped_leaf_reparses_within_schema(self):
        root = parse_mjml_to_node(generate_mjml(EditorNode(type="mj-image", props={"src": "a.png"})))
        validate_tree(root)
        column = root.children[0].children[0].children[0]
        assert column.children[0].props == {"src": "a.png"}

    def test_empty_mjml_root(self):
        assert generate_mjml(EditorNode(type="mjml", props={"lang": "en"})) == '<mjml lang="en">\n</mjml>'

    def test_deterministic(self, rich_document):
        assert generate_mjml(rich_document) == generate_mjml(rich_document)
