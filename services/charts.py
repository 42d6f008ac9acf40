#!/usr/bin/env python3
"""Plotly figures for trait scores."""

from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from services.analytics import Comparison

SCORE_COLORS = [(0.0, "#d64541"), (0.5, "#f39c12"), (1.0, "#2e8b57")]


def trait_bar_chart(df: pd.DataFrame, height: int = 420) -> go.Figure:
    """Horizontal bars of a trait frame's Percentage column, strongest on top."""
    ordered = df.sort_values("Percentage", kind="stable")
    fig = px.bar(
        ordered,
        x="Percentage",
        y="Trait",
        orientation="h",
        text=ordered["Percentage"].map(lambda x: f"{x}%"),
        color="Percentage",
        color_continuous_scale=SCORE_COLORS,
        range_color=[0, 100],
    )
    fig.update_layout(
        height=height,
        coloraxis_showscale=False,
        xaxis_range=[0, 105],
        margin={"l": 10, "r": 10, "t": 10, "b": 10},
    )
    fig.update_traces(textposition="outside", hovertemplate="%{y}: %{x}%<extra></extra>")
    return fig


def comparison_radar(comparison: Comparison, height: int = 480) -> go.Figure:
    df = comparison.to_frame()
    fig = px.line_polar(
        df,
        r="Percentage",
        theta="Trait",
        color="Candidate",
        line_close=True,
        range_r=[0, 100],
        category_orders={"Trait": comparison.traits},
    )
    fig.update_traces(fill="toself", opacity=0.6)
    fig.update_layout(height=height, margin={"l": 30, "r": 30, "t": 30, "b": 30})
    return fig


def comparison_bar_chart(comparison: Comparison, height: int = 420) -> go.Figure:
    df = comparison.to_frame()
    fig = px.bar(
        df,
        x="Trait",
        y="Percentage",
        color="Candidate",
        barmode="group",
        text=df["Percentage"].map(lambda x: f"{x}%"),
        category_orders={"Trait": comparison.traits},
    )
    fig.update_traces(textposition="outside")
    fig.update_layout(height=height, yaxis_range=[0, 110])
    return fig
