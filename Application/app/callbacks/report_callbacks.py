"""
Callback functions for the report page.
"""

import logging

from dash import callback, ctx
from dash.dependencies import Input, Output, State

from components.embedding_plots import create_embedding_figure
from components.som_plots import create_som_figure
from utils.data_processing import random_grid_query, random_point_query
from utils.knn import classify_against_grid, classify_against_points

logger = logging.getLogger("ReportCallbacks")


def roll_query_points(som_grids, embedding_df, points, rng, grid_k, point_k):
    """
    Draw a fresh test point for every SOM and for the embedding, and classify each.

    Args:
        som_grids (list): Normalized cells for each SOM
        embedding_df (DataFrame): Embedding data, used for the bounding box
        points (list[EmbeddedPoint]): Reference points for the embedding
        rng (numpy.random.Generator): Random source for the test points
        grid_k (int): Neighbour count for SOM classification
        point_k (int): Neighbour count for embedding classification

    Returns:
        dict: {"som": [{x, y, label}, ...], "scatter": {x, y, label} or None}
    """
    som_queries = []
    for cells in som_grids:
        qx, qy = random_grid_query(cells, rng)
        prediction = classify_against_grid((qx, qy), cells, grid_k)
        som_queries.append({'x': qx, 'y': qy, 'label': prediction.label})

    scatter_query = None
    query = random_point_query(embedding_df, rng)
    if query is not None:
        prediction = classify_against_points(query, points, point_k)
        scatter_query = {'x': query[0], 'y': query[1], 'label': prediction.label}

    return {'som': som_queries, 'scatter': scatter_query}


def step_index(index, step, count):
    """Move through the SOM carousel, wrapping at both ends."""
    if count <= 0:
        return 0
    return (int(index or 0) + step) % count


def register_report_callbacks(som_grids, som_titles, embedding_df, points,
                              color_assigner, catalog, rng_source, grid_k, point_k):
    """
    Register all callbacks for the report page.

    Args:
        som_grids (list): Normalized cells for each SOM
        som_titles (list): Caption for each SOM
        embedding_df (DataFrame): Embedding data
        points (list[EmbeddedPoint]): Reference points for the embedding
        color_assigner (ColorAssigner): Shared label colours
        catalog (list): Label catalog order
        rng_source (GeneratorSource): Fresh random generator per re-roll
        grid_k (int): Neighbour count for SOM classification
        point_k (int): Neighbour count for embedding classification

    Returns:
        None
    """

    @callback(
        Output('query-points', 'data'),
        Input('reroll-button', 'n_clicks')
    )
    def reroll(n_clicks):
        """Generate and classify new test points."""
        queries = roll_query_points(som_grids, embedding_df, points,
                                    rng_source.spawn(), grid_k, point_k)
        logger.info(f"Re-rolled test points (clicks={n_clicks}): "
                    f"som={[q['label'] for q in queries['som']]}, "
                    f"scatter={queries['scatter'] and queries['scatter']['label']}")
        return queries

    @callback(
        Output('som-index', 'data'),
        Input('som-prev', 'n_clicks'),
        Input('som-next', 'n_clicks'),
        State('som-index', 'data'),
        prevent_initial_call=True
    )
    def switch_som(prev_clicks, next_clicks, index):
        """Step to the previous or next SOM."""
        step = -1 if ctx.triggered_id == 'som-prev' else 1
        return step_index(index, step, len(som_grids))

    @callback(
        Output('som-graph', 'figure'),
        Output('som-title', 'children'),
        Output('som-position', 'children'),
        Output('som-prediction', 'children'),
        Input('som-index', 'data'),
        Input('query-points', 'data')
    )
    def update_som(index, queries):
        """Draw the selected SOM with its test point."""
        if not som_grids:
            return create_som_figure([], color_assigner), "Self-Organizing Map", "", ""

        index = step_index(index, 0, len(som_grids))
        query = (queries or {}).get('som') or []
        query = query[index] if index < len(query) else None

        test_point = (query['x'], query['y']) if query else None
        fig = create_som_figure(som_grids[index], color_assigner, test_point)
        prediction = f"Predicted label (k={grid_k}): {query['label']}" if query else ""

        return fig, som_titles[index], f"{index + 1} / {len(som_grids)}", prediction

    @callback(
        Output('tsne-graph', 'figure'),
        Output('tsne-prediction', 'children'),
        Input('query-points', 'data')
    )
    def update_tsne(queries):
        """Draw the embedding with its test point."""
        query = (queries or {}).get('scatter')
        test_point = (query['x'], query['y']) if query else None
        fig = create_embedding_figure(embedding_df, color_assigner, catalog, test_point)
        prediction = f"Predicted label (k={point_k}): {query['label']}" if query else ""
        return fig, prediction
