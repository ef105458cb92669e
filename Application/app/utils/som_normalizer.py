"""
Normalization of self-organizing map (SOM) documents.
Turns arbitrarily shaped SOM JSON into a flat list of grid cells.
"""

import logging
import math
import re
from dataclasses import dataclass, field

logger = logging.getLogger("SomNormalizer")

# Maximum nesting depth searched for a cell list
SEARCH_DEPTH_LIMIT = 6

ROW_ALIASES = ("row", "r", "i", "y")
COL_ALIASES = ("col", "column", "c", "j", "x")

INDEX_KEY_PATTERN = re.compile(r"^\d+$")


@dataclass
class GridCell:
    """One SOM cell with its label distribution."""
    row: float
    col: float
    proportions: dict = field(default_factory=dict)
    counts: dict = field(default_factory=dict)


def _index_object_values(node):
    """
    Return the values of an index-keyed object ({"0": ..., "1": ...}).

    Args:
        node: Any parsed JSON value

    Returns:
        list or None: Values ordered by numeric key, None if node is not
        an index-keyed object
    """
    if not isinstance(node, dict) or not node:
        return None

    if not all(INDEX_KEY_PATTERN.match(str(key)) for key in node):
        return None

    return [node[key] for key in sorted(node, key=int)]


def _first_non_null(items):
    for item in items:
        if item is not None:
            return item
    return None


def _looks_like_cell_list(value):
    return isinstance(value, list) and isinstance(_first_non_null(value), dict)


def _search_properties(node, depth, max_depth):
    """Bounded search through nested properties for a list of objects."""
    if depth > max_depth or not isinstance(node, dict):
        return None

    # An index-keyed object found below the root counts as a cell list
    if depth > 0:
        indexed = _index_object_values(node)
        if indexed is not None:
            return indexed

    for value in node.values():
        if _looks_like_cell_list(value):
            return value

    for value in node.values():
        found = _search_properties(value, depth + 1, max_depth)
        if found is not None:
            return found

    return None


def find_cell_candidates(root, max_depth=SEARCH_DEPTH_LIMIT):
    """
    Locate the list of raw cells inside a SOM document.

    Candidate shapes are tried in priority order: a flat array, an
    index-keyed object, then a bounded search through nested properties.

    Args:
        root: Parsed JSON value of any shape
        max_depth (int): Maximum nesting depth for the property search

    Returns:
        list: Raw candidate cells, empty when nothing usable was found
    """
    if isinstance(root, list):
        return root

    indexed = _index_object_values(root)
    if indexed is not None:
        return indexed

    found = _search_properties(root, 0, max_depth)
    return found if found is not None else []


def coerce_coordinate(value):
    """
    Coerce a raw row/col value to a finite float, defaulting to 0.

    Args:
        value: Raw coordinate (number, numeric string, or anything else)

    Returns:
        float: Finite coordinate
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, str) and not value.strip():
        return 0.0

    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0

    return number if math.isfinite(number) else 0.0


def _resolve_alias(raw_cell, aliases):
    for alias in aliases:
        if raw_cell.get(alias) is not None:
            return raw_cell[alias]
    return None


def _mapping_or_empty(value):
    return dict(value) if isinstance(value, dict) else {}


def normalize_cell(raw_cell):
    """
    Normalize a single raw cell.

    Args:
        raw_cell: Raw cell value taken from the candidate list

    Returns:
        GridCell or None: Normalized cell, None if it carries no signal
    """
    if not isinstance(raw_cell, dict):
        return None

    row = coerce_coordinate(_resolve_alias(raw_cell, ROW_ALIASES))
    col = coerce_coordinate(_resolve_alias(raw_cell, COL_ALIASES))
    counts = _mapping_or_empty(raw_cell.get("counts"))
    proportions = _mapping_or_empty(raw_cell.get("proportions"))

    if not (math.isfinite(row) and math.isfinite(col)):
        return None

    if not proportions and not counts:
        return None

    return GridCell(row=row, col=col, proportions=proportions, counts=counts)


def normalize_som_document(raw, max_depth=SEARCH_DEPTH_LIMIT):
    """
    Convert a parsed SOM document into a flat list of grid cells.

    Malformed input never raises; it degrades to a partial or empty list.

    Args:
        raw: Parsed JSON value of any shape
        max_depth (int): Maximum nesting depth for the property search

    Returns:
        list[GridCell]: Cells in first-discovery order
    """
    candidates = find_cell_candidates(raw, max_depth)

    cells = []
    for raw_cell in candidates:
        cell = normalize_cell(raw_cell)
        if cell is not None:
            cells.append(cell)

    logger.debug(f"Normalized {len(cells)} of {len(candidates)} candidate cells")
    return cells


def extract_som_title(raw, max_depth=5):
    """
    Find the first non-blank "title" string in a SOM document.

    Args:
        raw: Parsed JSON value of any shape
        max_depth (int): Maximum nesting depth to search

    Returns:
        str or None: Stripped title, None if there is none
    """
    def search(node, depth):
        if depth > max_depth or not isinstance(node, (dict, list)):
            return None

        if isinstance(node, dict):
            title = node.get("title")
            if isinstance(title, str) and title.strip():
                return title.strip()
            children = node.values()
        else:
            children = node

        for child in children:
            found = search(child, depth + 1)
            if found:
                return found
        return None

    return search(raw, 0)


def collect_som_labels(cells, max_labels=20):
    """Distinct proportion labels in first-seen order."""
    labels = []
    for cell in cells:
        for label in cell.proportions:
            if label not in labels:
                labels.append(label)
        if len(labels) >= max_labels:
            break
    return labels[:max_labels]


def proportion_value(value):
    """Numeric view of a proportion, 0 when it cannot be read as a number."""
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def format_proportions_for_hover(proportions, digits=3, top_k=10):
    """
    Format a proportion map as hover text, largest first.

    Args:
        proportions (dict): Label to proportion mapping
        digits (int): Decimal places shown
        top_k (int): Maximum number of labels listed

    Returns:
        str: Lines joined with <br>
    """
    ranked = sorted(
        ((label, proportion_value(value)) for label, value in (proportions or {}).items()),
        key=lambda item: item[1],
        reverse=True
    )[:top_k]

    if not ranked:
        return "(no proportions)"

    return "<br>".join(f"{label}: {value:.{digits}f}" for label, value in ranked)


def grid_extent(cells):
    """
    Largest row and column present in a grid.

    Returns:
        tuple: (max_row, max_col), both at least 0
    """
    max_row = max((cell.row for cell in cells), default=0)
    max_col = max((cell.col for cell in cells), default=0)
    return max(max_row, 0), max(max_col, 0)
