"""Tests for the flog-js Flask server."""

from __future__ import annotations

import pytest

flask = pytest.importorskip("flask", reason="Flask not installed")

from flogjs.server import create_app  # noqa: E402


SAMPLE = "function check(a) { if (a) { return eval(a); } }"


@pytest.fixture
def client():
    app = create_app()
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


class TestHealth:
    def test_health_ok(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["status"] == "ok"
        assert "version" in data

    def test_health_cors_headers(self, client):
        resp = client.get("/health")
        assert resp.headers.get("Access-Control-Allow-Origin") == "*"


class TestAnalyze:
    def test_analyze_source(self, client):
        resp = client.post("/analyze", json={"source": SAMPLE, "filename": "check.js"})
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["mode"] == "lang"
        assert data["reasons"] == ["ext"]
        assert data["total"] == pytest.approx(1.0 + 0.1 + 4.0)
        fn = data["functions"][0]
        assert fn["name"] == "check"
        assert fn["drivers"][0]["kind"] == "dynamic_call"

    def test_react_detection(self, client):
        resp = client.post("/analyze", json={
            "source": "function A({ x }) { return <div>{x ? 1 : 2}</div>; }",
            "filename": "A.jsx",
        })
        data = resp.get_json()
        assert data["mode"] == "react"
        assert data["functions"][0]["group"] == "A"

    def test_without_details(self, client):
        resp = client.post("/analyze", json={"source": SAMPLE, "details": False})
        assert "drivers" not in resp.get_json()["functions"][0]

    def test_methods_only(self, client):
        resp = client.post("/analyze", json={"source": "if (a) {}", "methods_only": True})
        assert resp.get_json()["total"] == 0.0

    def test_forced_mode(self, client):
        resp = client.post("/analyze", json={
            "source": "const a = <div />;", "filename": "a.jsx", "mode": "lang",
        })
        data = resp.get_json()
        assert data["mode"] == "lang"
        assert data["reasons"] == ["config"]

    def test_unknown_mode(self, client):
        resp = client.post("/analyze", json={"source": SAMPLE, "mode": "vue"})
        assert resp.status_code == 400
        assert "vue" in resp.get_json()["error"]

    def test_parse_error(self, client):
        resp = client.post("/analyze", json={"source": "function (", "filename": "bad.js"})
        assert resp.status_code == 400
        data = resp.get_json()
        assert data["line"] == 1
        assert "error" in data

    def test_missing_source(self, client):
        resp = client.post("/analyze", json={"filename": "a.js"})
        assert resp.status_code == 400

    def test_not_json(self, client):
        resp = client.post("/analyze", data="hello", content_type="text/plain")
        assert resp.status_code == 400

    def test_options_preflight(self, client):
        resp = client.options("/analyze")
        assert resp.status_code == 204
        assert resp.headers.get("Access-Control-Allow-Methods") == "GET, POST, OPTIONS"


class TestModes:
    def test_list_modes(self, client):
        resp = client.get("/modes")
        assert resp.status_code == 200
        data = resp.get_json()
        assert "lang" in data
        assert "react" in data
