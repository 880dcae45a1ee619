"""
Visualization module for the Pipeline Leak Watch dashboard.

Provides Plotly-based interactive plots for the Streamlit interface.
"""

import plotly.graph_objects as go
from plotly.subplots import make_subplots
from typing import List, Optional

from config import RISK_LEVELS
from analytics.what_if import WhatIfResult
from models.pipeline import PipelineEntity

# Marker colours per status
_AT_RISK_COLOR = "#ef4444"
_NORMAL_COLOR = "#10b981"
_SELECTED_COLOR = "#facc15"


def _risk_band_bounds() -> List[float]:
    """Upper bounds of the bounded risk bands (0.2, 0.35, 0.5)."""
    return [upper for upper, _, _ in RISK_LEVELS if upper is not None]


def create_fleet_map_figure(
    fleet: List[PipelineEntity],
    threshold: float,
    selected_id: Optional[int] = None,
) -> go.Figure:
    """
    Geographic scatter of the fleet, split into at-risk and normal traces.

    Args:
        fleet: Pipeline entities.
        threshold: Leak probability above which a pipeline is at risk.
        selected_id: Optional pipeline id to highlight.

    Returns:
        Plotly Figure.
    """
    fig = go.Figure()

    groups = [
        ("At Risk", [p for p in fleet if p.leak_prob > threshold], _AT_RISK_COLOR),
        ("Normal", [p for p in fleet if p.leak_prob <= threshold], _NORMAL_COLOR),
    ]
    for label, members, color in groups:
        fig.add_trace(
            go.Scattergeo(
                lat=[p.lat for p in members],
                lon=[p.lon for p in members],
                mode="markers",
                marker=dict(
                    size=[8 + 14 * p.leak_prob for p in members],
                    color=color,
                    line=dict(width=1, color="black"),
                ),
                text=[
                    f"{p.name} (#{p.id})<br>P={p.pressure_bar} bar, Q={p.flow_m3h} m³/h"
                    f"<br>Leak: {p.leak_prob_percent:.1f}%"
                    for p in members
                ],
                customdata=[p.id for p in members],
                hoverinfo="text",
                name=f"{label} ({len(members)})",
            )
        )

    selected = [p for p in fleet if p.id == selected_id]
    if selected:
        p = selected[0]
        fig.add_trace(
            go.Scattergeo(
                lat=[p.lat],
                lon=[p.lon],
                mode="markers+text",
                marker=dict(size=20, color=_SELECTED_COLOR, symbol="star",
                            line=dict(width=2, color="black")),
                text=[p.name],
                textposition="top center",
                name="Selected",
                hoverinfo="text",
            )
        )

    fig.update_geos(
        fitbounds="locations",
        showcountries=True,
        showcoastlines=True,
        showland=True,
        landcolor="rgb(40,40,40)",
    )
    fig.update_layout(
        height=600,
        template="plotly_dark",
        legend=dict(orientation="h", yanchor="bottom", y=-0.1, xanchor="center", x=0.5),
        margin=dict(l=10, r=10, t=40, b=40),
        title=f"Pipeline Fleet, threshold {threshold * 100:.0f}%",
    )
    return fig


def create_regional_risk_figure(records: List[dict]) -> go.Figure:
    """Horizontal bar chart of regional risk scores (0-100)."""
    fig = go.Figure(
        go.Bar(
            x=[r["risk_score"] for r in records],
            y=[r["region"] for r in records],
            orientation="h",
            marker_color=_AT_RISK_COLOR,
            text=[
                f"{r['pipeline_count']} pipelines, {r['critical_count']} critical"
                for r in records
            ],
            hovertemplate="%{y}<br>Risk score: %{x}<br>%{text}<extra></extra>",
        )
    )
    fig.update_layout(
        height=350,
        template="plotly_dark",
        title="Regional Risk Heatmap",
        xaxis_title="Risk score",
        margin=dict(l=100, r=20, t=50, b=40),
    )
    return fig


def create_history_figure(history: List[dict]) -> go.Figure:
    """
    Two-row trend chart: leak probability on top, pressure and flow below.

    Args:
        history: Output of analytics.history.generate_history.
    """
    dates = [h["date"] for h in history]
    fig = make_subplots(
        rows=2, cols=1,
        shared_xaxes=True,
        specs=[[{}], [{"secondary_y": True}]],
        subplot_titles=("Leak Probability (%)", "Pressure & Flow"),
        vertical_spacing=0.12,
    )
    fig.add_trace(
        go.Scatter(
            x=dates,
            y=[h["leak_prob_percent"] for h in history],
            mode="lines",
            fill="tozeroy",
            line=dict(color=_AT_RISK_COLOR, width=2),
            name="Leak probability",
        ),
        row=1, col=1,
    )
    fig.add_trace(
        go.Scatter(
            x=dates,
            y=[h["pressure_bar"] for h in history],
            mode="lines",
            line=dict(color="#3b82f6", width=2),
            name="Pressure (bar)",
        ),
        row=2, col=1, secondary_y=False,
    )
    fig.add_trace(
        go.Scatter(
            x=dates,
            y=[h["flow_m3h"] for h in history],
            mode="lines",
            line=dict(color=_NORMAL_COLOR, width=2),
            name="Flow (m³/h)",
        ),
        row=2, col=1, secondary_y=True,
    )
    fig.update_layout(
        height=500,
        template="plotly_dark",
        legend=dict(orientation="h", yanchor="bottom", y=-0.2, xanchor="center", x=0.5),
        margin=dict(l=60, r=60, t=60, b=60),
    )
    return fig


def create_what_if_figure(results: List[WhatIfResult]) -> go.Figure:
    """
    Leak probability against percent change, with risk-band boundaries.

    Args:
        results: Output of analytics.what_if.what_if_sweep.
    """
    fig = go.Figure()
    if results:
        attribute = results[0].attribute
        fig.add_trace(
            go.Scatter(
                x=[r.percent_change for r in results],
                y=[r.new_leak_prob for r in results],
                mode="lines+markers",
                line=dict(color="white", width=2),
                text=[r.risk_level for r in results],
                hovertemplate="%{x:+.0f}%<br>P(leak)=%{y:.3f}<br>%{text}<extra></extra>",
                name=f"{attribute.title()} change",
            )
        )
    for bound in _risk_band_bounds():
        fig.add_hline(y=bound, line=dict(color="orange", width=1, dash="dash"))

    fig.update_layout(
        height=350,
        template="plotly_dark",
        xaxis_title="Change (%)",
        yaxis_title="Leak probability",
        yaxis=dict(range=[0, 1]),
        margin=dict(l=60, r=20, t=40, b=40),
    )
    return fig
