"""
Callback functions for the home (upload) page.
"""

import logging

from dash import callback
from dash.dependencies import Input, Output, State

from components.data_tables import create_queue_table
from utils.upload_queue import accept_uploads, build_queue_rows

logger = logging.getLogger("HomeCallbacks")


def enqueue_uploads(filenames, queue_rows, labels, rng):
    """
    Append accepted uploads to the queue.

    Args:
        filenames (list or str): Names reported by the upload component
        queue_rows (list): Current queue rows
        labels (list): Label catalog used for random predictions
        rng (numpy.random.Generator): Random source

    Returns:
        tuple: (updated rows, notice text)
    """
    if isinstance(filenames, str):
        filenames = [filenames]

    queue_rows = list(queue_rows or [])
    accepted = accept_uploads(filenames)
    if not accepted:
        return queue_rows, "No files to process (only .exe files are analyzed; desktop.ini and similar are ignored)."

    queue_rows.extend(build_queue_rows(accepted, labels, rng, start_id=len(queue_rows) + 1))
    skipped = len(filenames or []) - len(accepted)
    notice = f"Queued {len(accepted)} file(s)."
    if skipped:
        notice += f" Ignored {skipped} file(s)."
    return queue_rows, notice


def register_home_callbacks(labels, rng_source):
    """
    Register all callbacks for the home page.

    Args:
        labels (list): Label catalog
        rng_source (GeneratorSource): Fresh random generator per upload

    Returns:
        None
    """

    @callback(
        Output('queue-rows', 'data'),
        Output('upload-notice', 'children'),
        Input('upload-files', 'filename'),
        State('queue-rows', 'data'),
        prevent_initial_call=True
    )
    def handle_upload(filenames, queue_rows):
        """Queue uploaded executables with a random predicted label."""
        rows, notice = enqueue_uploads(filenames, queue_rows, labels, rng_source.spawn())
        logger.info(notice)
        return rows, notice

    @callback(
        Output('queue-container', 'children'),
        Input('queue-rows', 'data')
    )
    def update_queue(queue_rows):
        """Redraw the queue table."""
        return create_queue_table(queue_rows or [])
