"""
Data processing utilities for the report and evaluation pages.
Contains functions for turning embedding records into frames and points,
and for generating synthetic query points.
"""

import math
import threading

import numpy as np
import pandas as pd

from utils.knn import EmbeddedPoint, OTHER_LABEL
from utils.som_normalizer import grid_extent

EMBEDDING_COLUMNS = [
    'key', 'filename', 'x', 'y', 'label', 'true_label', 'pred_label',
    'time_period', 'accuracy', 'detail_url'
]

DEFAULT_DETAIL_URL = '/report'


def _finite_number(value):
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _accuracy(record):
    # Fall back to confidence, then treat the sample as certain
    for name in ('accuracy', 'confidence'):
        value = record.get(name)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    return 1.0


def prepare_embedding_frame(records):
    """
    Transform raw embedding records into a dataframe for plotting and lookup.

    Records that are not objects or lack numeric x/y are dropped. When the
    first record has no time_period, periods 1..N are assigned.

    Args:
        records (list): Parsed embedding points document

    Returns:
        DataFrame: One row per usable point with EMBEDDING_COLUMNS
    """
    if not isinstance(records, list):
        return pd.DataFrame(columns=EMBEDDING_COLUMNS)

    usable = []
    for record in records:
        if not isinstance(record, dict):
            continue
        x, y = _finite_number(record.get('x')), _finite_number(record.get('y'))
        if x is None or y is None:
            continue
        usable.append((record, x, y))

    if not usable:
        return pd.DataFrame(columns=EMBEDDING_COLUMNS)

    has_time = 'time_period' in usable[0][0]

    rows = []
    for position, (record, x, y) in enumerate(usable):
        point = EmbeddedPoint.from_record(dict(record, x=x, y=y))
        filename = record.get('filename') or f"sample_{position}.exe"
        period = _finite_number(record.get('time_period')) if has_time else position + 1

        rows.append({
            'key': str(record.get('_key') or f"{filename}#{position}"),
            'filename': filename,
            'x': x,
            'y': y,
            'label': point.label,
            'true_label': str(record.get('true_label') or OTHER_LABEL),
            'pred_label': str(record.get('pred_label') or OTHER_LABEL),
            'time_period': period if period is not None else 0,
            'accuracy': _accuracy(record),
            'detail_url': record.get('detail_url') or DEFAULT_DETAIL_URL,
        })

    return pd.DataFrame(rows, columns=EMBEDDING_COLUMNS)


def points_from_frame(embedding_df):
    """
    Convert an embedding dataframe to reference points for classification.

    Args:
        embedding_df (DataFrame): Output of prepare_embedding_frame

    Returns:
        list[EmbeddedPoint]: Points in frame order
    """
    return [
        EmbeddedPoint(x=float(row.x), y=float(row.y), label=str(row.label))
        for row in embedding_df.itertuples(index=False)
    ]


def time_bounds(embedding_df):
    """
    Range of time periods present, with the lower bound clamped to 1.

    Fractional periods widen the range outwards so the full range keeps
    every point.

    Returns:
        tuple: (min_period, max_period)
    """
    if embedding_df.empty:
        return 1, 1

    periods = embedding_df['time_period'].astype(float)
    periods = periods.where(periods != 0, 1)
    low = max(1, math.floor(periods.min()))
    high = max(low, math.ceil(periods.max()))
    return low, high


def filter_by_time_range(embedding_df, low, high):
    """
    Keep points whose time period lies inside [low, high].

    Args:
        embedding_df (DataFrame): Embedding data
        low (int): Lower bound (swapped with high if reversed)
        high (int): Upper bound

    Returns:
        DataFrame: Filtered copy
    """
    low, high = min(low, high), max(low, high)
    periods = embedding_df['time_period'].astype(float)
    return embedding_df[(periods >= low) & (periods <= high)].copy()


def class_counts(embedding_df):
    """
    Count points per label, in first-seen order.

    Returns:
        DataFrame: Columns label, count
    """
    counts = embedding_df.groupby('label', sort=False).size()
    return counts.reset_index(name='count')


def uncertain_samples(embedding_df, limit=50):
    """
    Samples the model was least sure about, lowest accuracy first.

    Args:
        embedding_df (DataFrame): Embedding data
        limit (int): Maximum number of rows

    Returns:
        DataFrame: key, filename, true_label, pred_label, accuracy, detail_url
    """
    ordered = embedding_df.sort_values('accuracy', kind='mergesort')
    return ordered[['key', 'filename', 'true_label', 'pred_label',
                    'accuracy', 'detail_url']].head(limit).reset_index(drop=True)


def apply_relabel(embedding_df, key, new_label):
    """
    Return a copy with one sample's true label replaced.

    Args:
        embedding_df (DataFrame): Embedding data
        key (str): Sample key
        new_label (str): Label chosen by the reviewer

    Returns:
        DataFrame: Updated copy (unchanged copy when nothing applies)
    """
    updated = embedding_df.copy()
    if not new_label:
        return updated

    mask = updated['key'] == key
    updated.loc[mask, 'true_label'] = new_label
    updated.loc[mask, 'label'] = new_label
    return updated


def random_grid_query(cells, rng):
    """
    Synthetic query point inside a SOM grid.

    Args:
        cells (list[GridCell]): Normalized SOM cells
        rng (numpy.random.Generator): Random source

    Returns:
        tuple: (x, y) with x along columns and y along rows
    """
    max_row, max_col = grid_extent(cells)
    return (float(rng.random() * (max_col or 1)),
            float(rng.random() * (max_row or 1)))


def random_point_query(embedding_df, rng):
    """
    Synthetic query point inside the bounding box of an embedding.

    Returns:
        tuple or None: (x, y), None for an empty embedding
    """
    if embedding_df.empty:
        return None

    min_x, max_x = embedding_df['x'].min(), embedding_df['x'].max()
    min_y, max_y = embedding_df['y'].min(), embedding_df['y'].max()
    return (float(min_x + rng.random() * (max_x - min_x)),
            float(min_y + rng.random() * (max_y - min_y)))


class GeneratorSource:
    """
    Hands out a fresh random generator for each callback invocation.

    Generators are not thread-safe, so callbacks running on different server
    threads never share one. Children are spawned from a single SeedSequence,
    which keeps the whole stream reproducible when a seed is configured.
    """

    def __init__(self, seed=None):
        self._sequence = np.random.SeedSequence(seed)
        self._lock = threading.Lock()

    def spawn(self):
        with self._lock:
            child = self._sequence.spawn(1)[0]
        return np.random.default_rng(child)
