"""
Components for visualizing self-organizing maps.

Each SOM cell is drawn as a small pie: one wedge for each of its largest
label proportions, with the remainder merged into an OTHER wedge.
"""

import math

import plotly.graph_objects as go
from dash import html, dcc
import dash_bootstrap_components as dbc

from components.embedding_plots import create_test_point_trace
from utils.label_colors import FALLBACK_COLOR
from utils.som_normalizer import (
    collect_som_labels, format_proportions_for_hover, grid_extent,
    proportion_value
)

OTHER_KEY = 'OTHER'
OTHER_COLOR = '#e5e7eb'


def cell_wedges(proportions, top_k=3, show_other=True):
    """
    Split a cell's proportions into pie wedges.

    Args:
        proportions (dict): Label to proportion mapping
        top_k (int): Largest labels drawn individually
        show_other (bool): Merge the remaining labels into an OTHER wedge

    Returns:
        list: (label, fraction) pairs summing to 1, empty if nothing to draw
    """
    values = sorted(
        ((label, proportion_value(value)) for label, value in proportions.items()),
        key=lambda item: item[1],
        reverse=True
    )
    top = values[:top_k]
    rest = values[top_k:]

    if show_other and rest:
        top.append((OTHER_KEY, sum(value for _, value in rest)))

    # Renormalize, proportions are not guaranteed to sum to 1
    total = sum(value for _, value in top) or 1
    return [(label, value / total) for label, value in top if value > 0]


def wedge_path(x, y, radius, start, end):
    """
    SVG path approximating a pie wedge centred on (x, y).

    Args:
        x (float): Centre x
        y (float): Centre y
        radius (float): Pie radius in axis units
        start (float): Start angle in radians
        end (float): End angle in radians

    Returns:
        str: SVG path string
    """
    segments = max(10, int((end - start) / (math.pi / 16)))
    parts = [f"M {x} {y}"]
    for step in range(segments + 1):
        angle = start + (end - start) * step / segments
        parts.append(f"L {x + radius * math.cos(angle)} {y + radius * math.sin(angle)}")
    parts.append("Z")
    return " ".join(parts)


def create_cell_shapes(cell, color_assigner, radius=0.35, top_k=3, show_other=True):
    """Outline circle plus wedge paths for one cell."""
    x, y = cell.col, cell.row
    shapes = [dict(
        type='circle', xref='x', yref='y',
        x0=x - radius, x1=x + radius, y0=y - radius, y1=y + radius,
        line=dict(width=0.6, color='#333'),
        fillcolor='#ffffff',
        layer='below'
    )]

    position = 0.0
    for label, fraction in cell_wedges(cell.proportions, top_k, show_other):
        start = position * 2 * math.pi
        end = (position + fraction) * 2 * math.pi
        position += fraction
        color = OTHER_COLOR if label == OTHER_KEY else color_assigner.color_for(label, FALLBACK_COLOR)
        shapes.append(dict(
            type='path',
            path=wedge_path(x, y, radius, start, end),
            line=dict(width=0),
            fillcolor=color,
            layer='below',
            opacity=0.98
        ))

    return shapes


def create_som_figure(cells, color_assigner, test_point=None, radius=0.35,
                      top_k=3, show_other=True):
    """
    Create a pie-per-cell SOM figure.

    Args:
        cells (list[GridCell]): Normalized SOM cells
        color_assigner (ColorAssigner): Shared label colours
        test_point (tuple, optional): Query point drawn in black
        radius (float): Pie radius in grid units
        top_k (int): Wedges per cell before merging into OTHER
        show_other (bool): Draw the merged OTHER wedge

    Returns:
        go.Figure: Plotly figure
    """
    if not cells:
        fig = go.Figure()
        fig.update_layout(title='Empty SOM')
        return fig

    max_row, max_col = grid_extent(cells)

    # Invisible markers carry the hover text for each cell
    fig = go.Figure(go.Scatter(
        x=[cell.col for cell in cells],
        y=[cell.row for cell in cells],
        mode='markers',
        marker=dict(size=0.1, opacity=0),
        text=[format_proportions_for_hover(cell.proportions, 3) for cell in cells],
        hoverinfo='text',
        hoverlabel=dict(align='left'),
        showlegend=False
    ))

    # Legend entries are single markers placed outside the visible range
    for label in collect_som_labels(cells, 30):
        fig.add_trace(go.Scatter(
            x=[max_col + 5],
            y=[max_row + 5],
            mode='markers',
            marker=dict(size=10, color=color_assigner.color_for(label, FALLBACK_COLOR)),
            name=label,
            showlegend=True,
            hoverinfo='skip'
        ))

    if test_point is not None:
        fig.add_trace(create_test_point_trace(test_point, gl=False))

    shapes = []
    for cell in cells:
        shapes.extend(create_cell_shapes(cell, color_assigner, radius, top_k, show_other))

    fig.update_layout(
        shapes=shapes,
        margin=dict(l=40, r=40, t=24, b=40),
        xaxis=dict(range=[-0.8, max_col + 0.8], dtick=1, title='col', domain=[0, 0.82]),
        yaxis=dict(range=[max_row + 0.8, -0.8], dtick=1, title='row'),
        hovermode='closest',
        showlegend=True,
        legend=dict(
            x=0.86, y=1, xanchor='left', yanchor='top',
            bgcolor='rgba(255,255,255,0.9)',
            bordercolor='rgba(0,0,0,0.1)',
            borderwidth=1
        ),
        height=360
    )

    return fig


def create_som_carousel(som_titles):
    """
    Create the SOM section with previous/next controls.

    Args:
        som_titles (list): Caption for each loaded SOM

    Returns:
        html.Div: Carousel component
    """
    return html.Div([
        dcc.Store(id='som-index', data=0),
        html.Div([
            dbc.Button("←", id='som-prev', color='light', n_clicks=0),
            html.Div(id='som-position', className='plot-label',
                     children=f"1 / {len(som_titles)}" if som_titles else ""),
            dbc.Button("→", id='som-next', color='light', n_clicks=0),
        ], className='d-flex justify-content-between align-items-center mb-2'),
        html.H6(id='som-title', className='subheading',
                children=som_titles[0] if som_titles else "Self-Organizing Map"),
        dcc.Graph(id='som-graph', config={'responsive': True, 'displayModeBar': True},
                  style={"width": "100%", "height": "360px"}),
        html.Div(id='som-prediction', className='metric-summary'),
    ])
