"""
Tests for the HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from mailstudio import config
from mailstudio.domain.mjml import compiler
from mailstudio.domain.mjml.nodes import create_node
from mailstudio.main import app


@pytest.fixture
def client():
    return TestClient(app)


class TestHealth:
    def test_root(self, client):
        assert client.get("/").json() == {"message": "Mail Studio API is running"}

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestSchemaEndpoints:
    def test_components(self, client):
        data = client.get("/mjml/components").json()
        types = {component["type"] for component in data["components"]}
        assert "mj-section" in types
        assert {category["id"] for category in data["categories"]} == {"layout", "content", "interactive"}

    def test_social_platforms(self, client):
        names = {platform["name"] for platform in client.get("/mjml/social-platforms").json()["platforms"]}
        assert "facebook" in names


class TestMarkupEndpoints:
    def test_parse(self, client):
        response = client.post(
            "/mjml/parse",
            json={"mjml": "<mj-section><mj-column><mj-text>Hi</mj-text></mj-column></mj-section>"},
        )
        assert response.status_code == 200
        document = response.json()["document"]
        assert document["type"] == "mj-section"
        assert document["children"][0]["children"][0]["content"] == "Hi"

    def test_parse_error(self, client):
        response = client.post("/mjml/parse", json={"mjml": '<mj-text title="oops>'})
        assert response.status_code == 422
        assert "quote" in response.json()["detail"]
        assert response.json()["line"] == 1

    def test_parse_no_elements(self, client):
        response = client.post("/mjml/parse", json={"mjml": "plain text"})
        assert response.status_code == 422
        assert "No MJML elements found" in response.json()["detail"]

    def test_markup_too_large(self, client, monkeypatch):
        monkeypatch.setattr(config, "MAX_MARKUP_LENGTH", 10)
        response = client.post("/mjml/parse", json={"mjml": "<mjml><mj-body /></mjml>"})
        assert response.status_code == 413

    def test_generate_round_trip(self, client):
        section = create_node("mj-section")
        response = client.post("/mjml/generate", json={"document": section.model_dump()})
        assert response.status_code == 200
        markup = response.json()["mjml"]
        assert markup.startswith("<mjml>")

        parsed = client.post("/mjml/parse", json={"mjml": markup}).json()
        assert parsed["document"]["type"] == "mjml"

    def test_generate_with_head(self, client):
        response = client.post(
            "/mjml/generate",
            json={"document": {"type": "mj-body"}, "head_settings": {"title": "Hello"}},
        )
        assert "<mj-title>Hello</mj-title>" in response.json()["mjml"]

    def test_generate_invalid_props(self, client):
        response = client.post("/mjml/generate", json={"document": {"type": "mj-text", "props": {"bad name": "x"}}})
        assert response.status_code == 422

    def test_generate_forbidden_pairing(self, client):
        document = {"type": "mj-column", "children": [{"type": "mj-section"}]}
        response = client.post("/mjml/generate", json={"document": document})
        assert response.status_code == 400
        assert "mj-column cannot contain mj-section" in response.json()["detail"]

    def test_generate_unknown_type(self, client):
        response = client.post("/mjml/generate", json={"document": {"type": "foo"}})
        assert response.status_code == 400
        assert "Unknown component type" in response.json()["detail"]

    def test_html_to_mjml(self, client):
        response = client.post("/mjml/html-to-mjml", json={"html": "<p>Hi</p><hr>"})
        assert response.status_code == 200
        data = response.json()
        assert data["document"]["type"] == "mj-section"
        assert [node["type"] for node in data["document"]["children"][0]["children"]] == ["mj-text", "mj-divider"]
        assert data["mjml"].startswith("<mj-section")

    def test_locked_regions(self, client):
        source = '<mj-section>\n  <mj-column data-locked="true">\n  </mj-column>\n</mj-section>'
        response = client.post("/mjml/locked-regions", json={"mjml": source})
        assert response.json()["regions"] == [{"start_line": 2, "end_line": 3, "start_column": 1, "end_column": 15}]

    def test_locked_range_check(self, client):
        source = '<mj-section>\n  <mj-column data-locked="true">\n  </mj-column>\n</mj-section>'
        payload = {"mjml": source, "start_line": 2, "start_column": 3, "end_line": 2, "end_column": 4}
        assert client.post("/mjml/locked-regions/check", json=payload).json() == {"locked": True}
        payload.update(start_line=4, end_line=4)
        assert client.post("/mjml/locked-regions/check", json=payload).json() == {"locked": False}


class TestCompileEndpoints:
    def test_compile(self, client, monkeypatch):
        monkeypatch.setattr(compiler, "mjml_to_html", lambda fp: {"html": "<html>ok</html>", "errors": []})
        response = client.post("/mjml/compile", json={"mjml": "<mjml><mj-body /></mjml>"})
        assert response.json() == {"html": "<html>ok</html>"}

    def test_compile_document(self, client, monkeypatch):
        monkeypatch.setattr(compiler, "mjml_to_html", lambda fp: {"html": "<html>doc</html>", "errors": []})
        response = client.post("/mjml/compile-document", json={"document": create_node("mjml").model_dump()})
        assert response.json() == {"html": "<html>doc</html>"}

    def test_compile_document_schema_violation(self, client, monkeypatch):
        engine_calls = []
        monkeypatch.setattr(compiler, "mjml_to_html", lambda fp: engine_calls.append(fp) or {"html": "", "errors": []})
        document = {"type": "mjml", "children": [{"type": "mj-body", "children": [{"type": "mj-text"}]}]}
        response = client.post("/mjml/compile-document", json={"document": document})
        assert response.status_code == 400
        assert engine_calls == []

    def test_engine_failure(self, client, monkeypatch):
        def broken(fp):
            raise RuntimeError("engine down")

        monkeypatch.setattr(compiler, "mjml_to_html", broken)
        response = client.post("/mjml/compile", json={"mjml": "<mjml><mj-body /></mjml>"})
        assert response.status_code == 502


class TestTemplateEndpoints:
    def test_list(self, client):
        ids = {template["id"] for template in client.get("/templates").json()}
        assert {"blank", "welcome", "newsletter", "promotion", "receipt"} <= ids

    def test_empty(self, client):
        document = client.get("/templates/empty").json()["document"]
        assert document["type"] == "mjml"
        assert document["children"][0]["children"][0]["children"][0]["type"] == "mj-column"

    def test_get_fresh_copy(self, client):
        first = client.get("/templates/welcome").json()
        second = client.get("/templates/welcome").json()
        assert first["document"]["id"] != second["document"]["id"]
        assert first["head_settings"]["title"] == "Welcome!"

    def test_unknown_template(self, client):
        assert client.get("/templates/missing").status_code == 404
