"""JSON, HTML, CSV and JSONL renderers for analysis results."""

from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass
from pathlib import PurePath
from typing import IO, Callable

import jinja2

from flogjs.aggregate import summarize
from flogjs.analyzer import UnitResult


@dataclass(frozen=True)
class Renderer:
    """Turns ranked unit results into a serialized document."""

    id: str
    name: str
    extension: str
    render: Callable[[list[UnitResult], bool], str]


_renderers: dict[str, Renderer] = {}


def register_renderer(renderer: Renderer) -> Renderer:
    _renderers[renderer.id] = renderer
    return renderer


def get_renderer(renderer_id: str) -> Renderer:
    """Get a registered renderer by id."""
    if renderer_id not in _renderers:
        available = ", ".join(sorted(_renderers.keys()))
        raise KeyError(f"Unknown renderer: {renderer_id!r}. Available: {available}")
    return _renderers[renderer_id]


def list_renderers() -> dict[str, str]:
    """Return {id: name} for all registered renderers."""
    return {rid: r.name for rid, r in sorted(_renderers.items())}


def renderer_for_path(path: str) -> Renderer:
    """Pick a renderer from an output file's extension (JSON by default)."""
    suffix = PurePath(path).suffix.lstrip(".").lower()
    return get_renderer(suffix or "json")


def render(renderer_id: str, units: list[UnitResult], details: bool = False) -> str:
    return get_renderer(renderer_id).render(units, details)


# --- JSON ---

def results_to_dict(units: list[UnitResult], details: bool = False) -> dict:
    """Summary plus one entry per unit; functions and drivers only with ``details``."""
    summary = summarize(units)
    return {
        "summary": {
            "totalFiles": summary.units,
            "totalScore": round(summary.total, 3),
            "averageScore": round(summary.average_per_unit, 3),
        },
        "files": [unit.to_dict(include_functions=details) for unit in units],
    }


def _render_json(units: list[UnitResult], details: bool) -> str:
    return json.dumps(results_to_dict(units, details), indent=2)


# --- JSONL ---

def unit_to_jsonl_line(unit: UnitResult, details: bool = False) -> str:
    """Convert one unit to a single-line JSON string (no trailing newline)."""
    return json.dumps(unit.to_dict(include_functions=details), separators=(",", ":"))


def _render_jsonl(units: list[UnitResult], details: bool) -> str:
    return "".join(unit_to_jsonl_line(u, details) + "\n" for u in units)


# --- CSV ---

def unit_to_csv_row(unit: UnitResult) -> dict:
    """Flatten a unit into a single CSV-friendly dict."""
    top = max(unit.functions, key=lambda f: f.score, default=None)
    return {
        "file": unit.file,
        "mode": unit.mode,
        "total": round(unit.total, 3),
        "functions": len(unit.functions),
        "top_function": top.name if top else "",
        "top_score": round(top.score, 3) if top else "",
        "top_drivers": ",".join(d.kind for d in top.top_drivers) if top else "",
    }


def units_to_csv(rows: list[dict], output: IO[str] | None = None) -> str | None:
    """Write flattened unit rows as CSV.

    Args:
        rows: List of dicts from unit_to_csv_row().
        output: Optional writable stream. If None, returns CSV as string.

    Returns:
        CSV string if output is None, otherwise None (written to stream).
    """
    if not rows:
        return "" if output is None else None

    buf = io.StringIO() if output is None else output
    writer = csv.DictWriter(buf, fieldnames=list(rows[0].keys()))
    writer.writeheader()
    writer.writerows(rows)
    return buf.getvalue() if output is None else None


def _render_csv(units: list[UnitResult], details: bool) -> str:
    return units_to_csv([unit_to_csv_row(u) for u in units]) or ""


# --- HTML ---

_HTML_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>flog-js Report</title>
  <style>
    body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
           background: #f5f5f5; padding: 2rem; line-height: 1.6; }
    .container { max-width: 1200px; margin: 0 auto; }
    header, .files { background: white; border-radius: 8px; padding: 1.5rem;
                     box-shadow: 0 2px 4px rgba(0,0,0,0.1); margin-bottom: 2rem; }
    .summary { display: flex; gap: 1rem; }
    .card { background: #f8f9fa; padding: 1rem; border-left: 4px solid #007bff; flex: 1; }
    .card .value { font-size: 1.5rem; font-weight: bold; }
    table { width: 100%; border-collapse: collapse; }
    th, td { padding: 0.75rem; text-align: left; border-bottom: 1px solid #e9ecef; }
    .file { font-family: monospace; }
    .score.high { color: #dc3545; } .score.medium { color: #e0a800; } .score.low { color: #28a745; }
    .badge { padding: 0.2rem 0.5rem; border-radius: 4px; font-size: 0.75rem; text-transform: uppercase; }
    .badge.lang { background: #e3f2fd; color: #1976d2; }
    .badge.react { background: #e8f5e9; color: #388e3c; }
    .fn { font-family: monospace; font-size: 0.875rem; }
    .drivers { color: #999; font-size: 0.75rem; padding-left: 1rem; }
  </style>
</head>
<body>
<div class="container">
  <header>
    <h1>flog-js Report</h1>
    <div class="summary">
      <div class="card"><div>Total Files</div><div class="value">{{ summary.units }}</div></div>
      <div class="card"><div>Total Score</div><div class="value">{{ "%.1f"|format(summary.total) }}</div></div>
      <div class="card"><div>Average Score</div><div class="value">{{ "%.1f"|format(summary.average_per_unit) }}</div></div>
    </div>
  </header>
  <div class="files">
    <table>
      <thead><tr><th>File</th><th>Mode</th><th>Score</th>{% if details %}<th>Functions</th>{% endif %}</tr></thead>
      <tbody>
      {% for unit in units %}
        <tr>
          <td class="file">{{ unit.file | basename }}</td>
          <td><span class="badge {{ unit.mode }}">{{ unit.mode }}</span></td>
          <td><span class="score {{ unit.total | level }}">{{ "%.2f"|format(unit.total) }}</span></td>
          {% if details %}
          <td>
            {% for fn in unit.functions[:5] %}
              <div class="fn">{{ "%.1f"|format(fn.score) }} - {{ fn.name }}:{{ fn.start }}-{{ fn.end }}
                {% if fn.top_drivers %}<div class="drivers">{{ fn.top_drivers[:3] | map(attribute="kind") | join(", ") }}</div>{% endif %}
              </div>
            {% else %}-{% endfor %}
          </td>
          {% endif %}
        </tr>
      {% endfor %}
      </tbody>
    </table>
  </div>
</div>
</body>
</html>
"""


def _score_level(total: float) -> str:
    if total > 20:
        return "high"
    elif total > 10:
        return "medium"
    return "low"


_env = jinja2.Environment(autoescape=True)
_env.filters["basename"] = lambda p: PurePath(p).name
_env.filters["level"] = _score_level
_html = _env.from_string(_HTML_TEMPLATE)


def _render_html(units: list[UnitResult], details: bool) -> str:
    return _html.render(units=units, details=details, summary=summarize(units))


register_renderer(Renderer("json", "JSON document", ".json", _render_json))
register_renderer(Renderer("jsonl", "JSON lines, one unit per line", ".jsonl", _render_jsonl))
register_renderer(Renderer("csv", "CSV, one row per unit", ".csv", _render_csv))
register_renderer(Renderer("html", "Standalone HTML page", ".html", _render_html))
