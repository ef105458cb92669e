"""
Components for visualizing t-SNE embeddings.
"""

import plotly.graph_objects as go
from dash import dcc

from utils.label_colors import FALLBACK_COLOR

TEST_POINT_COLOR = 'black'


def ordered_labels(labels_present, catalog):
    """
    Order labels by the catalog, with labels missing from it appended.

    Args:
        labels_present (list): Labels found in the data, first-seen order
        catalog (list): Label catalog order

    Returns:
        list: Ordered labels that actually occur in the data
    """
    present = list(dict.fromkeys(labels_present))
    in_catalog = [label for label in catalog if label in present]
    return in_catalog + [label for label in present if label not in in_catalog]


def create_test_point_trace(test_point, gl=True):
    """
    Create the black marker for a synthetic query point.

    Args:
        test_point (tuple): (x, y) query point
        gl (bool): Use WebGL scatter to match the embedding traces

    Returns:
        Scatter trace
    """
    trace_type = go.Scattergl if gl else go.Scatter
    return trace_type(
        x=[test_point[0]],
        y=[test_point[1]],
        mode='markers',
        marker=dict(size=5, color=TEST_POINT_COLOR),
        name='test point',
        showlegend=False,
        hoverinfo='skip'
    )


def create_embedding_figure(embedding_df, color_assigner, catalog, test_point=None):
    """
    Create a scatter plot of embedding points grouped by label.

    Args:
        embedding_df (DataFrame): Output of prepare_embedding_frame
        color_assigner (ColorAssigner): Shared label colours
        catalog (list): Label catalog, used for trace order
        test_point (tuple, optional): Query point drawn on top in black

    Returns:
        go.Figure: Plotly figure
    """
    fig = go.Figure()

    # One trace per label so the legend doubles as a filter
    groups = {label: group for label, group in embedding_df.groupby('label', sort=False)}
    for label in ordered_labels(list(groups), catalog):
        group = groups[label]
        hover = [
            f"true: {true}<br>pred: {pred}"
            for true, pred in zip(group['true_label'], group['pred_label'])
        ]
        fig.add_trace(go.Scattergl(
            x=group['x'],
            y=group['y'],
            mode='markers',
            name=label,
            marker=dict(size=4, color=color_assigner.color_for(label, FALLBACK_COLOR)),
            text=hover,
            hoverinfo='text'
        ))

    if test_point is not None:
        fig.add_trace(create_test_point_trace(test_point))

    fig.update_layout(
        margin=dict(l=40, r=16, t=24, b=40),
        legend=dict(orientation='h'),
        height=360
    )

    return fig


def create_class_count_chart(counts_df, color_assigner):
    """
    Create a bar chart of point counts per label.

    Args:
        counts_df (DataFrame): Columns label, count
        color_assigner (ColorAssigner): Shared label colours

    Returns:
        go.Figure: Plotly bar chart
    """
    fig = go.Figure(go.Bar(
        x=counts_df['label'],
        y=counts_df['count'],
        marker=dict(color=[color_assigner.color_for(label) for label in counts_df['label']])
    ))

    fig.update_layout(
        title='Class Distribution',
        xaxis_title='Label',
        yaxis_title='Samples',
        margin=dict(l=40, r=16, t=40, b=80),
        height=320
    )

    return fig


def create_embedding_graph(graph_id, figure=None):
    """Graph container for an embedding figure."""
    return dcc.Graph(
        id=graph_id,
        figure=figure if figure is not None else go.Figure(),
        config={'responsive': True, 'displayModeBar': True},
        style={"width": "100%", "height": "360px"}
    )
