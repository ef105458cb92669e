"""
Deterministic label-to-colour assignment shared by every chart.
"""

# Discrete palette assigned round-robin in catalog order
BASE_PALETTE = [
    '#1f77b4', '#f4b37a', '#63c063', '#d62728', '#9467bd',
    '#8c564b', '#e377c2', '#7f7f7f', '#bcbd22', '#17becf',
    '#393b79', '#637939', '#8c6d31', '#843c39', '#7b4173',
    '#3182bd', '#406d4d', '#756bb1', '#636363', '#b9450b',
    '#9c9ede', '#e7ba52', '#b5cf6b', '#cedb9c',
]

FALLBACK_COLOR = '#7f7f7f'


def _unique_labels(labels):
    seen = []
    for label in labels or []:
        if label is None:
            continue
        label = str(label)
        if label and label not in seen:
            seen.append(label)
    return seen


def parse_label_catalog(raw):
    """
    Read a label catalog document.

    Args:
        raw: Either a list of labels or an object with a "labels" list

    Returns:
        list: Distinct labels as strings, in catalog order
    """
    if isinstance(raw, list):
        return _unique_labels(raw)
    if isinstance(raw, dict) and isinstance(raw.get('labels'), list):
        return _unique_labels(raw['labels'])
    return []


def extend_catalog(labels, extra):
    """Append labels from extra that the catalog does not contain yet."""
    return _unique_labels(list(labels or []) + list(extra or []))


class ColorAssigner:
    """
    Maps each label of a catalog to a palette colour.

    Built once from the catalog and handed to every chart so the same label
    gets the same colour everywhere.
    """

    def __init__(self, labels, palette=None):
        self.palette = list(palette or BASE_PALETTE)
        self.labels = _unique_labels(labels)
        self._colors = {
            label: self.palette[i % len(self.palette)]
            for i, label in enumerate(self.labels)
        }

    def color_for(self, label, default=FALLBACK_COLOR):
        return self._colors.get(label, default)

    def as_dict(self):
        return dict(self._colors)

    def __contains__(self, label):
        return label in self._colors

    def __len__(self):
        return len(self._colors)
