"""Plotly chart payloads for the dashboard front-end.

Each builder assembles ``plotly.graph_objects`` traces and a layout and
returns them as a :class:`ChartPayload`. The colours, sizes and label formats
are relied upon by the front-end's visual regression snapshots, so change them
deliberately.
"""
from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import plotly.graph_objects as go
from plotly.basedatatypes import BaseTraceType
from plotly.utils import PlotlyJSONEncoder

from .tickets import TicketRecord

LOGGER = logging.getLogger(__name__)

TRANSPARENT = "rgba(0,0,0,0)"
GRID_COLOR = "rgba(226, 232, 240, 0.5)"
FONT_FAMILY = "system-ui, sans-serif"

SERVICE_COLORS = (
    "#3B82F6",
    "#10B981",
    "#F59E0B",
    "#EF4444",
    "#8B5CF6",
    "#06B6D4",
    "#84CC16",
    "#F97316",
    "#EC4899",
    "#14B8A6",
)

# (label, exclusive upper bound); the last bucket is open ended.
AGE_BUCKETS: Sequence[Tuple[str, Optional[int]]] = (
    ("0-17", 18),
    ("18-24", 25),
    ("25-34", 35),
    ("35-44", 45),
    ("45-54", 55),
    ("55-64", 65),
    ("65+", None),
)
MIN_AGE = 0
MAX_AGE = 120


@dataclass(frozen=True)
class ChartPayload:
    """Validated Plotly traces and layout, held as plain JSON-ready dicts.

    Only the trace and layout objects are serialised, never a full
    ``go.Figure``, so no default template is injected into the payload.
    """

    data: List[Dict[str, Any]]
    layout: Dict[str, Any]

    @classmethod
    def from_plotly(cls, traces: Sequence[BaseTraceType], layout: go.Layout) -> "ChartPayload":
        return cls(
            data=[trace.to_plotly_json() for trace in traces],
            layout=layout.to_plotly_json(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"data": self.data, "layout": self.layout}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), cls=PlotlyJSONEncoder, separators=(",", ":"))

    @property
    def is_empty(self) -> bool:
        return not self.data


def _base_layout(**overrides: Any) -> go.Layout:
    return go.Layout(
        plot_bgcolor=TRANSPARENT,
        paper_bgcolor=TRANSPARENT,
        font=dict(family=FONT_FAMILY),
        **overrides,
    )


def _json_number(value: float) -> float | int:
    return int(value) if float(value).is_integer() else value


def format_currency(value: float) -> str:
    """Format like ``Number.toLocaleString`` in en-US: grouped, up to 3 decimals."""
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return f"${text}"


# -- Resource support snapshot ---------------------------------------------------
def resource_support_chart(tickets: Iterable[TicketRecord]) -> ChartPayload:
    statuses = Counter(ticket.status for ticket in tickets)
    resource = statuses.get("RESOURCE_SUPPORT", 0)
    waiting = statuses.get("WAITING_FOR_RESPONSE", 0)
    trace = go.Bar(
        x=["Resource", "Waiting"],
        y=[resource, waiting],
        marker=dict(
            color=["#E74C3C", "#D6E9F5"],
            cornerradius=8,
            line=dict(width=0),
        ),
        text=[str(resource), str(waiting)],
        textposition="outside",
        width=0.6,
    )
    layout = _base_layout(
        height=180,
        showlegend=False,
        margin=dict(l=15, r=15, t=5, b=25),
        xaxis=dict(
            fixedrange=True,
            showgrid=False,
            showline=False,
            zeroline=False,
            tickfont=dict(size=11, color="#64748b"),
        ),
        yaxis=dict(
            fixedrange=True,
            showgrid=True,
            gridcolor=GRID_COLOR,
            showline=False,
            zeroline=False,
            tickfont=dict(size=9, color="#94a3b8"),
        ),
    )
    return ChartPayload.from_plotly([trace], layout)


# -- Service distribution --------------------------------------------------------
def service_provided_chart(tickets: Iterable[TicketRecord]) -> ChartPayload:
    services = (ticket.service_provided for ticket in tickets)
    # Counter keeps first-seen insertion order.
    counts = Counter(service for service in services if service is not None)
    trace = go.Pie(
        labels=list(counts.keys()),
        values=list(counts.values()),
        hole=0.4,
        marker=dict(
            colors=list(SERVICE_COLORS),
            line=dict(color="#FFFFFF", width=2),
        ),
        textinfo="none",
        showlegend=True,
    )
    layout = _base_layout(
        height=300,
        showlegend=True,
        legend=dict(
            orientation="h",
            yanchor="top",
            y=-0.15,
            xanchor="center",
            x=0.5,
            font=dict(size=9),
            itemsizing="constant",
            itemclick="toggleothers",
        ),
        margin=dict(l=10, r=10, t=10, b=70),
    )
    return ChartPayload.from_plotly([trace], layout)


# -- Crisis wish running tally ---------------------------------------------------
def crisis_wish_entries(tickets: Iterable[TicketRecord]) -> List[Tuple[datetime, float]]:
    """Return ``(created, amount)`` pairs sorted by creation time."""
    entries = []
    for ticket in tickets:
        amount = ticket.crisis_wish_amount
        created = ticket.created_datetime
        if amount is None or created is None:
            continue
        entries.append((created, amount))
    entries.sort(key=lambda entry: entry[0])
    return entries


def crisis_wish_chart(tickets: Iterable[TicketRecord]) -> ChartPayload:
    dates: List[str] = []
    running_counts: List[int] = []
    running_totals: List[float | int] = []
    running_total = 0.0
    for index, (created, amount) in enumerate(crisis_wish_entries(tickets), start=1):
        running_total += amount
        dates.append(created.astimezone(timezone.utc).date().isoformat())
        running_counts.append(index)
        running_totals.append(_json_number(running_total))

    count_trace = go.Bar(
        x=dates,
        y=running_counts,
        name="Crisis Wish Count",
        marker=dict(color="#C73E1D", cornerradius=4),
        text=[str(count) for count in running_counts],
        textposition="outside",
        yaxis="y",
        offsetgroup="1",
    )
    total_trace = go.Scatter(
        x=dates,
        y=running_totals,
        mode="lines+markers+text",
        name="Running Total ($)",
        line=dict(color="#F18F01", width=4),
        marker=dict(size=10, color="#F18F01"),
        text=[format_currency(total) for total in running_totals],
        textposition="top center",
        yaxis="y2",
    )
    layout = _base_layout(
        height=400,
        showlegend=True,
        margin=dict(l=60, r=60, t=40, b=60),
        xaxis=dict(title="Date", type="category"),
        yaxis=dict(title="Crisis Wish Count", side="left"),
        yaxis2=dict(title="Running Total ($)", overlaying="y", side="right"),
    )
    return ChartPayload.from_plotly([count_trace, total_trace], layout)


# -- Age histogram ---------------------------------------------------------------
def age_bucket(age: int) -> str:
    for label, upper in AGE_BUCKETS:
        if upper is None or age < upper:
            return label
    raise ValueError(f"No bucket for age {age}")  # pragma: no cover - last bucket is open


def valid_ages(tickets: Iterable[TicketRecord], now: Optional[datetime] = None) -> List[int]:
    reference = now or datetime.now(timezone.utc)
    ages = (ticket.age_in_years(reference) for ticket in tickets)
    return [age for age in ages if age is not None and MIN_AGE <= age <= MAX_AGE]


def age_demographics_chart(
    tickets: Iterable[TicketRecord], now: Optional[datetime] = None
) -> ChartPayload:
    ages = valid_ages(tickets, now)
    counts = Counter(age_bucket(age) for age in ages)
    groups = [(label, counts[label]) for label, _ in AGE_BUCKETS if counts[label] > 0]

    if not groups:
        empty_layout = go.Layout(
            title="Age Demographics - No Data Available",
            height=400,
            plot_bgcolor=TRANSPARENT,
            paper_bgcolor=TRANSPARENT,
        )
        return ChartPayload.from_plotly([], empty_layout)

    trace = go.Bar(
        x=[count for _, count in groups],
        y=[label for label, _ in groups],
        orientation="h",
        marker=dict(color="#2E86AB", cornerradius=4),
        text=[str(count) for _, count in groups],
        textposition="outside",
        textfont=dict(size=14, weight="bold", color="#0f172a"),
    )
    layout = _base_layout(
        title=f"Age Demographics Distribution ({len(ages)} people)",
        height=400,
        margin=dict(l=60, r=20, t=40, b=40),
        xaxis=dict(
            title="Count",
            fixedrange=True,
            showgrid=True,
            gridcolor=GRID_COLOR,
        ),
        yaxis=dict(title="Age Group", fixedrange=True, showgrid=False),
    )
    return ChartPayload.from_plotly([trace], layout)


def build_charts(
    tickets: Sequence[TicketRecord], now: Optional[datetime] = None
) -> Dict[str, ChartPayload]:
    charts = {
        "resource_support": resource_support_chart(tickets),
        "service_provided": service_provided_chart(tickets),
        "crisis_wish_tracking": crisis_wish_chart(tickets),
        "age_demographics": age_demographics_chart(tickets, now),
    }
    LOGGER.debug(
        "Built %s charts (%s empty)",
        len(charts),
        sum(1 for chart in charts.values() if chart.is_empty),
    )
    return charts
