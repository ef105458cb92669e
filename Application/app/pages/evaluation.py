"""
Periodic evaluation page layout for the Dash application.
"""

import dash
import dash_bootstrap_components as dbc
from dash import html, dcc

from content import evaluation_text
from content.data_sources import get_sources

from components.data_tables import create_uncertain_samples_section
from components.embedding_plots import create_embedding_graph

from utils.data_processing import prepare_embedding_frame, time_bounds, uncertain_samples
from utils.label_colors import ColorAssigner

from callbacks.evaluation_callbacks import register_evaluation_callbacks

dash.register_page(__name__, path="/evaluation", name="Evaluation")

# --------------- LOAD AND PROCESS DATA ------------

sources = get_sources()
catalog = sources.labels
color_assigner = ColorAssigner(catalog)

embedding_df = prepare_embedding_frame(sources.embedding_records)
period_min, period_max = time_bounds(embedding_df)

# Show at most ~10 slider marks
mark_step = max(1, (period_max - period_min) // 10)
slider_marks = {period: str(period) for period in range(period_min, period_max + 1, mark_step)}

# --------------- PAGE LAYOUT ------------------
layout = html.Div([
    html.H5("Periodic Evaluation", className="heading"),
    html.Div(evaluation_text.intro_paragraph, className="paragraph left-align"),

    html.Div(f"Load error: {sources.load_error}", className="text-danger small mb-2")
    if sources.load_error else None,

    dcc.Store(id="evaluation-points", data=embedding_df.to_dict('records')),

    # Time filter
    html.Div([
        html.Div("Time period:", className="plot-label", style={'marginBottom': '0.25rem'}),
        dcc.RangeSlider(
            id="time-range",
            min=period_min,
            max=period_max,
            step=1,
            value=[period_min, period_max],
            marks=slider_marks,
            allowCross=False
        ),
        html.Div(id="range-info", className="metric-summary"),
    ], className="mb-4"),

    html.Hr(),

    dbc.Row([
        dbc.Col([
            html.H6("Embedding", className="subheading"),
            create_embedding_graph("evaluation-tsne")
        ], xs=12, md=7),
        dbc.Col([
            html.H6("Class proportions", className="subheading"),
            dcc.Graph(id="evaluation-counts", style={"width": "100%"})
        ], xs=12, md=5),
    ], className="mb-4"),

    html.Hr(),
    html.H5("Uncertain Samples", className="heading"),
    html.Div(evaluation_text.uncertain_paragraph, className="paragraph left-align"),
    create_uncertain_samples_section(uncertain_samples(embedding_df), catalog),

    html.Hr(),
    dbc.Button("View Table Data", id="evaluation-collapse-toggle", className="mb-2",
               color="secondary", n_clicks=0),
    dbc.Collapse(html.Div(id="filtered-table-container"),
                 id="evaluation-collapse-container", is_open=False),

], style={"maxWidth": "1100px", "margin": "auto"})


@dash.callback(
    dash.Output("evaluation-collapse-container", "is_open"),
    dash.Input("evaluation-collapse-toggle", "n_clicks"),
    dash.State("evaluation-collapse-container", "is_open"),
    prevent_initial_call=True
)
def toggle_table(n_clicks, is_open):
    """Toggle the filtered samples table."""
    if n_clicks:
        return not is_open
    return is_open


register_evaluation_callbacks(color_assigner, catalog)
