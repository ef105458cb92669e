"""
Nearest-neighbour label inference for the report page.

A query point is classified either against a SOM grid (distance-weighted
vote over each neighbouring cell's label proportions) or against a t-SNE
point cloud (plain majority vote). Both modes share the neighbour search.
"""

import logging
from dataclasses import dataclass, field

import numpy as np

from utils.som_normalizer import proportion_value

logger = logging.getLogger("NeighborClassifier")

UNKNOWN_LABEL = "UNKNOWN"
OTHER_LABEL = "other"

DISTANCE_EPSILON = 1e-6

# Neighbour counts used by the report page
GRID_DEFAULT_K = 5
POINT_DEFAULT_K = 7

GRID_MODE = "grid"
POINT_MODE = "points"


@dataclass(frozen=True)
class EmbeddedPoint:
    """A single point of a 2D embedding."""
    x: float
    y: float
    label: str = OTHER_LABEL

    @classmethod
    def from_record(cls, record):
        """
        Build a point from an embedding record.

        The label comes from "true_label", then "pred_label", then "other".

        Args:
            record (dict): Record with numeric x and y

        Returns:
            EmbeddedPoint: The point
        """
        label = record.get("true_label")
        if label is None:
            label = record.get("pred_label")
        if label is None:
            label = OTHER_LABEL
        return cls(x=float(record["x"]), y=float(record["y"]), label=str(label))


@dataclass
class Prediction:
    """Predicted label plus the per-label tally that produced it."""
    label: str
    scores: dict = field(default_factory=dict)
    votes: dict = None

    def to_dict(self):
        if self.votes is not None:
            return {"label": self.label, "votes": dict(self.votes)}
        return {"label": self.label, "scores": dict(self.scores)}


def k_nearest(query, coords, k):
    """
    Find the k reference coordinates closest to a query point.

    Sorting is stable, so equal distances keep reference order.

    Args:
        query (tuple): (x, y) query point
        coords (array-like): Reference coordinates, shape (n, 2)
        k (int): Neighbour count, clamped to [1, n]

    Returns:
        list: (index, distance) pairs, nearest first
    """
    coords = np.asarray(coords, dtype=float).reshape(-1, 2)
    if coords.shape[0] == 0:
        return []

    qx, qy = float(query[0]), float(query[1])
    distances = np.hypot(coords[:, 0] - qx, coords[:, 1] - qy)
    order = np.argsort(distances, kind="stable")

    k = min(max(int(k), 1), coords.shape[0])
    return [(int(i), float(distances[i])) for i in order[:k]]


def weighted_proportion_vote(neighbours, cells):
    """Accumulate w * proportion per label with w = 1 / (distance + eps)."""
    scores = {}
    for index, distance in neighbours:
        weight = 1.0 / (distance + DISTANCE_EPSILON)
        for label, proportion in cells[index].proportions.items():
            scores[label] = scores.get(label, 0.0) + weight * proportion_value(proportion)
    return scores


def majority_vote(neighbours, points):
    """One unweighted vote per neighbouring point."""
    votes = {}
    for index, _ in neighbours:
        label = points[index].label
        votes[label] = votes.get(label, 0) + 1
    return votes


def pick_label(tally):
    """
    Label with the highest tally.

    Ties go to the label inserted into the tally first, i.e. the one met
    first while walking neighbours from nearest to farthest.
    """
    best_label, best_value = UNKNOWN_LABEL, None
    for label, value in tally.items():
        if best_value is None or value > best_value:
            best_label, best_value = label, value
    return best_label


def _nearest_then_aggregate(query, reference, coords, k, aggregate):
    if not reference:
        return UNKNOWN_LABEL, {}

    neighbours = k_nearest(query, coords, k)
    tally = aggregate(neighbours, reference)
    return pick_label(tally), tally


def classify_against_grid(query, cells, k=GRID_DEFAULT_K):
    """
    Classify a query point against SOM cells located at (col, row).

    Args:
        query (tuple): (x, y) query point in grid coordinates
        cells (list[GridCell]): Normalized SOM cells
        k (int): Number of neighbouring cells

    Returns:
        Prediction: Label and accumulated scores
    """
    coords = [(cell.col, cell.row) for cell in cells]
    label, scores = _nearest_then_aggregate(
        query, cells, coords, k, weighted_proportion_vote)

    logger.debug(f"Grid prediction at {query}: {label}")
    return Prediction(label=label, scores=scores)


def classify_against_points(query, points, k=POINT_DEFAULT_K):
    """
    Classify a query point against an embedded point cloud.

    Args:
        query (tuple): (x, y) query point in embedding coordinates
        points (list[EmbeddedPoint]): Reference points
        k (int): Number of neighbouring points

    Returns:
        Prediction: Label and vote counts
    """
    coords = [(point.x, point.y) for point in points]
    label, votes = _nearest_then_aggregate(
        query, points, coords, k, majority_vote)

    logger.debug(f"Point prediction at {query}: {label}")
    return Prediction(label=label, votes=votes)


def classify(query, reference, mode, k=None):
    """
    Classify a query point against a grid or a point cloud.

    Args:
        query (tuple): (x, y) query point
        reference (list): GridCell list for "grid", EmbeddedPoint list for "points"
        mode (str): "grid" or "points"
        k (int, optional): Neighbour count, the mode's default when None

    Returns:
        Prediction: Predicted label with its scores or votes
    """
    if mode == GRID_MODE:
        return classify_against_grid(query, reference, GRID_DEFAULT_K if k is None else k)
    elif mode == POINT_MODE:
        return classify_against_points(query, reference, POINT_DEFAULT_K if k is None else k)
    else:
        raise ValueError(
            f"Unsupported mode '{mode}'. Must be '{GRID_MODE}' or '{POINT_MODE}'.")
