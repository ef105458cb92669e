"""
Simulated intake of uploaded executables for the home page.
Nothing is analyzed: accepted files get a random label from the catalog.
"""

import re

# System files silently skipped when a folder is dropped
NOISE_NAMES = {"desktop.ini", ".ds_store", "thumbs.db"}

ALLOWED_EXTENSION = re.compile(r"\.exe$", re.IGNORECASE)

UNKNOWN_PREDICTION = "unknown"


def is_system_noise(filename):
    return (filename or "").lower() in NOISE_NAMES


def accept_uploads(filenames):
    """
    Keep the uploaded files that can be queued.

    Args:
        filenames (list): Names of the uploaded files

    Returns:
        list: Names of .exe files that are not system noise, in upload order
    """
    return [
        name for name in filenames or []
        if name and not is_system_noise(name) and ALLOWED_EXTENSION.search(name)
    ]


def random_prediction(labels, rng):
    """Random label from the catalog, "unknown" when the catalog is empty."""
    if not labels:
        return UNKNOWN_PREDICTION
    return labels[int(rng.integers(len(labels)))]


def build_queue_rows(filenames, labels, rng, start_id=1):
    """
    Build queue table rows for accepted uploads.

    Args:
        filenames (list): Accepted file names
        labels (list): Label catalog
        rng (numpy.random.Generator): Random source
        start_id (int): Id given to the first row

    Returns:
        list[dict]: Rows with id, filename, predicted_label
    """
    return [
        {
            "id": start_id + offset,
            "filename": name,
            "predicted_label": random_prediction(labels, rng),
        }
        for offset, name in enumerate(filenames)
    ]
