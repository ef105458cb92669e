"""
Analysis report page layout for the Dash application.
"""

import dash
import dash_bootstrap_components as dbc
from dash import html, dcc

# Import text content
from content import report_text
from content.data_sources import (
    get_sources, FAMILY_SCORES, APT30_PROBABILITY, REPORT_FILENAME,
    ATTENTION_WEIGHTS, GRID_K, POINT_K, QUERY_SEED
)

# Import components
from components.embedding_plots import create_embedding_graph
from components.report_cards import (
    section_card, create_family_score_chart, create_attention_heatmap,
    build_summary, create_summary_card
)
from components.som_plots import create_som_carousel

# Import utilities
from utils.data_processing import prepare_embedding_frame, points_from_frame, GeneratorSource
from utils.label_colors import ColorAssigner, extend_catalog

from callbacks.report_callbacks import register_report_callbacks

# Register the page
dash.register_page(__name__, path="/report", name="Report")

# --------------- LOAD AND PROCESS DATA ------------

sources = get_sources()

# Family score labels join the catalog so every chart shares one colour map
catalog = extend_catalog(sources.labels, [entry['label'] for entry in FAMILY_SCORES])
color_assigner = ColorAssigner(catalog)

embedding_df = prepare_embedding_frame(sources.embedding_records)
reference_points = points_from_frame(embedding_df)

summary = build_summary(REPORT_FILENAME, FAMILY_SCORES, APT30_PROBABILITY)

# ------------- CREATE PAGE COMPONENTS -------------

family_chart = dcc.Graph(figure=create_family_score_chart(FAMILY_SCORES, color_assigner),
                         style={"width": "100%"})

attention_chart = dcc.Graph(figure=create_attention_heatmap(ATTENTION_WEIGHTS),
                            style={"width": "100%"})


def load_error_notice(prefix, message):
    """Red notice shown above a chart whose data failed to load."""
    if not message:
        return None
    return html.Div(f"{prefix}: {message}", className="text-danger small mb-2")


som_section = create_som_carousel(sources.som_titles)

# --------------- PAGE LAYOUT ------------------
layout = html.Div([
    html.Div([
        html.Span("Analysis results", className="heading"),
        html.Div([
            dcc.Link(dbc.Button("Back to Main", color="light"), href="/"),
            dbc.Button("Re-roll test point", id="reroll-button", color="secondary",
                       n_clicks=0, className="ms-2"),
        ])
    ], className="d-flex justify-content-between align-items-center mb-4"),

    dcc.Store(id="query-points"),

    section_card("Malware family", [
        html.Div(report_text.family_paragraph, className="paragraph left-align"),
        family_chart
    ]),

    section_card("Attention heatmap", [
        html.Div(report_text.attention_paragraph, className="paragraph left-align"),
        attention_chart
    ]),

    section_card("Self-Organizing Maps", [
        load_error_notice("SOM load error", sources.som_error),
        html.Div(report_text.som_paragraph, className="paragraph left-align"),
        som_section
    ]),

    section_card("t-SNE embedding", [
        load_error_notice("Load error", sources.load_error),
        html.Div(report_text.tsne_paragraph, className="paragraph left-align"),
        create_embedding_graph("tsne-graph"),
        html.Div(id="tsne-prediction", className="metric-summary")
    ]),

    section_card("JSON data of this file", create_summary_card(summary)),

], style={"maxWidth": "1100px", "margin": "auto"})

register_report_callbacks(
    sources.som_grids,
    sources.som_titles,
    embedding_df,
    reference_points,
    color_assigner,
    catalog,
    GeneratorSource(QUERY_SEED),
    GRID_K,
    POINT_K
)
