"""
Components for the analysis report cards.
"""

import json

import plotly.graph_objects as go
from dash import html, dcc
import dash_bootstrap_components as dbc

# Families other than this one are reported as malware
BENIGN_FAMILY = 'GOODWARE'


def section_card(title, children, title_id=None):
    """
    Wrap report content in a titled card.

    Args:
        title (str): Card heading
        children: Dash components placed in the card body
        title_id (str, optional): Id for the heading so callbacks can update it

    Returns:
        dbc.Card: Card component
    """
    header_kwargs = {'id': title_id} if title_id else {}
    return dbc.Card([
        dbc.CardHeader(html.H6(title, className="heading mb-0", **header_kwargs)),
        dbc.CardBody(children)
    ], className="mb-4")


def create_family_score_chart(family_scores, color_assigner):
    """
    Create a bar chart of malware family scores.

    Args:
        family_scores (list): Dicts with label and score
        color_assigner (ColorAssigner): Shared label colours

    Returns:
        go.Figure: Plotly bar chart
    """
    fig = go.Figure(go.Bar(
        x=[entry['label'] for entry in family_scores],
        y=[entry['score'] for entry in family_scores],
        marker=dict(color=[color_assigner.color_for(entry['label']) for entry in family_scores])
    ))

    fig.update_layout(
        margin=dict(l=40, r=16, t=24, b=48),
        yaxis=dict(range=[0, 1]),
        height=320
    )

    return fig


def create_attention_heatmap(weights):
    """
    Create the attention heatmap figure.

    Args:
        weights (list): 2D list of attention weights

    Returns:
        go.Figure: Plotly heatmap
    """
    fig = go.Figure(go.Heatmap(
        z=weights,
        colorscale='YlOrRd',
        hovertemplate="Row %{y}<br>Col %{x}<br>Weight: %{z}<extra></extra>"
    ))

    fig.update_layout(margin=dict(l=40, r=16, t=24, b=40), height=320)

    return fig


def build_summary(filename, family_scores, apt30_probability):
    """
    Build the JSON summary for an analyzed file.

    Args:
        filename (str): Uploaded file name
        family_scores (list): Dicts with label and score
        apt30_probability (float): APT30 attribution probability

    Returns:
        dict: Summary with top-1 family and APT30 verdict
    """
    top_family = None
    if family_scores:
        # First entry wins on equal scores
        top_family = max(family_scores, key=lambda entry: entry['score'])['label']

    return {
        'filename': filename,
        'is_malware': top_family is not None and top_family != BENIGN_FAMILY,
        'top1_family': top_family,
        'apt30': {
            'probability': apt30_probability,
            'is_APT30': apt30_probability >= 0.5,
        },
    }


def create_summary_card(summary):
    """
    Create the JSON summary block with a copy button.

    Args:
        summary (dict): Output of build_summary

    Returns:
        html.Div: Summary component
    """
    return html.Div([
        html.Pre(json.dumps(summary, indent=2), id='summary-json',
                 style={"fontSize": "0.8rem", "whiteSpace": "pre-wrap"}),
        dcc.Clipboard(target_id='summary-json', title="Copy JSON",
                      style={"display": "inline-block", "fontSize": "1.1rem"})
    ], style={"backgroundColor": "#f8fafc", "padding": "0.5rem", "borderRadius": "0.75rem"})
