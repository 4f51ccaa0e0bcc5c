"""Minimal Flask server for scoring source text over HTTP."""

from __future__ import annotations

from flask import Flask, jsonify, request

from flogjs import __version__
from flogjs.analyzer import Analyzer
from flogjs.config import Settings
from flogjs.mode import ModeSelectionError, list_modes as _list_modes
from flogjs.parser import ParseError


def create_app() -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)

    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok", "version": __version__})

    @app.route("/analyze", methods=["POST", "OPTIONS"])
    def analyze():
        if request.method == "OPTIONS":
            return "", 204

        data = request.get_json(silent=True)
        if not data or not isinstance(data, dict):
            return jsonify({"error": "Request body must be a JSON object"}), 400

        source = data.get("source")
        if not isinstance(source, str):
            return jsonify({"error": "Provide 'source' in request body"}), 400

        filename = data.get("filename") or "input.js"
        details = bool(data.get("details", True))
        settings = Settings(
            methods_only=bool(data.get("methods_only", False)),
            mode=data.get("mode"),
        )

        try:
            analyzer = Analyzer(settings=settings)
            result = analyzer.run(source, filename)
        except ModeSelectionError as e:
            return jsonify({"error": str(e)}), 400
        except ParseError as e:
            return jsonify({"error": str(e), "line": e.line, "column": e.column}), 400

        body = result.to_dict(include_functions=False)
        body["reasons"] = result.reasons
        body["functions"] = [f.to_dict(include_drivers=details) for f in result.functions]
        return jsonify(body)

    @app.route("/modes", methods=["GET"])
    def modes():
        return jsonify(_list_modes())

    return app
