"""
Callback functions for the evaluation page.
"""

import logging

import pandas as pd
from dash import callback
from dash.dependencies import Input, Output, State

from components.data_tables import create_data_table, uncertain_table_records
from components.embedding_plots import create_class_count_chart, create_embedding_figure
from utils.data_processing import (
    EMBEDDING_COLUMNS, apply_relabel, class_counts, filter_by_time_range,
    uncertain_samples
)

logger = logging.getLogger("EvaluationCallbacks")


def frame_from_records(records):
    """Rebuild the embedding dataframe kept in the browser store."""
    return pd.DataFrame(records or [], columns=EMBEDDING_COLUMNS)


def range_summary(selected, total):
    """Text describing how much of the data the time range covers."""
    percent = round(selected / total * 100) if total else 0
    return f"{selected} / {total} samples ({percent}%)"


def relabel_records(records, key, new_label):
    """
    Apply a reviewer's label to one stored sample.

    Args:
        records (list): Stored embedding rows
        key (str): Key of the sample to relabel
        new_label (str): Label chosen in the dropdown

    Returns:
        list: Updated rows
    """
    return apply_relabel(frame_from_records(records), key, new_label).to_dict('records')


def register_evaluation_callbacks(color_assigner, catalog):
    """
    Register all callbacks for the evaluation page.

    Args:
        color_assigner (ColorAssigner): Shared label colours
        catalog (list): Label catalog order

    Returns:
        None
    """

    @callback(
        Output('evaluation-tsne', 'figure'),
        Output('evaluation-counts', 'figure'),
        Output('uncertain-table', 'data'),
        Output('uncertain-table', 'selected_rows'),
        Output('range-info', 'children'),
        Output('filtered-table-container', 'children'),
        Input('time-range', 'value'),
        Input('evaluation-points', 'data')
    )
    def update_views(time_range, records):
        """Refresh every view for the selected time range."""
        embedding_df = frame_from_records(records)
        low, high = time_range
        filtered = filter_by_time_range(embedding_df, low, high)
        logger.debug(f"Time range {low}-{high}: {len(filtered)} of {len(embedding_df)} samples")

        return (
            create_embedding_figure(filtered, color_assigner, catalog),
            create_class_count_chart(class_counts(filtered), color_assigner),
            uncertain_table_records(uncertain_samples(filtered)),
            [],
            range_summary(len(filtered), len(embedding_df)),
            create_data_table(filtered[['filename', 'label', 'pred_label',
                                        'time_period', 'accuracy']])
        )

    @callback(
        Output('relabel-dropdown', 'value'),
        Input('time-range', 'value')
    )
    def clear_pending_label(time_range):
        """Drop an unsubmitted label whenever the time range changes."""
        return None

    @callback(
        Output('evaluation-points', 'data'),
        Output('relabel-status', 'children'),
        Input('relabel-submit', 'n_clicks'),
        State('uncertain-table', 'selected_rows'),
        State('uncertain-table', 'data'),
        State('relabel-dropdown', 'value'),
        State('evaluation-points', 'data'),
        prevent_initial_call=True
    )
    def submit_label(n_clicks, selected_rows, table_rows, new_label, records):
        """Write the chosen label back to the selected sample."""
        if not selected_rows or not new_label:
            return records, "Select a sample and a new label first."

        row = table_rows[selected_rows[0]]
        if row['true_label'] == new_label:
            return records, f"{row['filename']} is already labelled {new_label}."

        logger.info(f"Relabelled {row['filename']}: {row['true_label']} -> {new_label}")
        return (relabel_records(records, row['key'], new_label),
                f"{row['filename']} relabelled as {new_label}.")
