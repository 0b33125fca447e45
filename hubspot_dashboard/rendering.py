"""HTML and JSON renderings of a dashboard response."""
from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict

from jinja2 import Template

if TYPE_CHECKING:  # pragma: no cover
    from .dashboard import DashboardResponse

PLOTLY_JS_URL = "https://cdn.plot.ly/plotly-2.35.2.min.js"

STAT_CARDS = (
    ("open_tickets", "Open Tickets"),
    ("new_tickets_this_week", "New This Week"),
    ("osw_count", "In Process - OSW"),
    ("staffmark_count", "In Process - Staffmark"),
    ("closed_tickets", "Closed Tickets"),
)

CHART_SECTIONS = (
    ("resource_support", "Resource Support"),
    ("service_provided", "Services Provided"),
    ("crisis_wish_tracking", "Crisis Wish Tracking"),
    ("age_demographics", "Age Demographics"),
)

HTML_TEMPLATE = Template(
    """
<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>Ticket Dashboard</title>
    <script src="{{ plotly_js_url }}"></script>
    <style>
      body { font-family: system-ui, sans-serif; margin: 2rem; background: #f8fafc; color: #0f172a; }
      h1 { margin-bottom: 1.5rem; }
      .stats { display: grid; grid-template-columns: repeat(5, 1fr); gap: 1rem; margin-bottom: 2rem; }
      .card { background: #ffffff; border-radius: 12px; padding: 1rem 1.25rem; box-shadow: 0 1px 3px rgba(15, 23, 42, 0.08); }
      .card .label { font-size: 0.8rem; color: #64748b; text-transform: uppercase; }
      .card .value { font-size: 2rem; font-weight: 700; }
      .charts { display: grid; grid-template-columns: repeat(2, 1fr); gap: 1rem; }
      .error { background: #fee2e2; color: #991b1b; border-radius: 12px; padding: 1rem 1.25rem; }
    </style>
  </head>
  <body>
    <h1>Ticket Dashboard</h1>
    {% if not response.success %}
    <div class="error"><strong>Unable to load dashboard:</strong> {{ response.error|e }}</div>
    {% else %}
    <div class="stats">
      {% for key, label in stat_cards %}
      <div class="card"><div class="label">{{ label }}</div><div class="value" id="stat-{{ key }}">{{ response.stats[key] }}</div></div>
      {% endfor %}
    </div>
    <div class="charts">
      {% for key, label in chart_sections %}
      <div class="card"><h3>{{ label }}</h3><div id="chart-{{ key }}"></div></div>
      {% endfor %}
    </div>
    <script>
      {% for key, _ in chart_sections %}
      (function () {
        var chart = {{ charts[key]|tojson }};
        Plotly.newPlot("chart-{{ key }}", chart.data, chart.layout, {displayModeBar: false, responsive: true});
      })();
      {% endfor %}
    </script>
    {% endif %}
  </body>
</html>
"""
)


def _parse_charts(payload: Dict[str, Any]) -> Dict[str, Any]:
    charts: Dict[str, Any] = {}
    for key, raw in (payload.get("charts") or {}).items():
        charts[key] = json.loads(raw) if isinstance(raw, str) else raw
    return charts


def render_dashboard_html(response: "DashboardResponse") -> str:
    payload = response.to_dict()
    return HTML_TEMPLATE.render(
        response=payload,
        charts=_parse_charts(payload),
        stat_cards=STAT_CARDS,
        chart_sections=CHART_SECTIONS,
        plotly_js_url=PLOTLY_JS_URL,
    )


def save_dashboard_json(response: "DashboardResponse", output_path: Path) -> None:
    output_path.write_text(json.dumps(response.to_dict(), indent=2), encoding="utf-8")
