import logging
import os
from dataclasses import dataclass, field
from functools import partial

from load_data import fetch_all, fetch_json, load_json_from_bucket
from utils.knn import GRID_DEFAULT_K, POINT_DEFAULT_K
from utils.label_colors import parse_label_catalog
from utils.som_normalizer import extract_som_title, normalize_som_document

logger = logging.getLogger("DataSources")

# true for local testing, env variable set to false in yaml file
IS_LOCAL = os.getenv('IS_LOCAL', 'true').lower() == 'true'

RAW_BASE = 'https://raw.githubusercontent.com/syy88824/C_practice/refs/heads/main'

LABEL_LIST_URL = os.getenv('LABEL_LIST_URL', f'{RAW_BASE}/label_list.json')
EMBEDDING_URL = os.getenv('EMBEDDING_URL', f'{RAW_BASE}/tsne_extracols.json')


def _split_env(name, default):
    value = os.getenv(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(',') if item.strip()]


SOM_URLS = _split_env('SOM_URLS', [
    f'{RAW_BASE}/som_APT30.json',
    f'{RAW_BASE}/som_dropper.json',
])
SOM_TITLES = _split_env('SOM_TITLES', ['SOM-APT30', 'SOM-dropper'])

FETCH_TIMEOUT = float(os.getenv('FETCH_TIMEOUT', '15'))
QUERY_SEED = int(os.environ['QUERY_SEED']) if os.getenv('QUERY_SEED') else None

# neighbour counts for the report page classifiers
GRID_K = GRID_DEFAULT_K
POINT_K = POINT_DEFAULT_K

# demo values shown on the report page
FAMILY_SCORES = [
    {'label': 'TROJAN.GENERIC', 'score': 0.62},
    {'label': 'ADWARE.SCREENSAVER', 'score': 0.22},
    {'label': 'GOODWARE', 'score': 0.16},
]
APT30_PROBABILITY = 0.78
REPORT_FILENAME = 'sample.exe'
ATTENTION_WEIGHTS = [
    [0.1, 0.3, 0.5, 0.2, 0.1],
    [0.2, 0.4, 0.7, 0.4, 0.2],
    [0.05, 0.2, 0.35, 0.3, 0.1],
]


@dataclass
class DataSources:
    """Documents loaded for the dashboard plus display-ready load errors."""
    labels: list = field(default_factory=list)
    embedding_records: list = field(default_factory=list)
    som_grids: list = field(default_factory=list)
    som_titles: list = field(default_factory=list)
    load_error: str = ''
    som_error: str = ''


def _loader(url, name):
    if IS_LOCAL:
        return partial(fetch_json, url, name, FETCH_TIMEOUT)
    # -------  FOR DEPLOYMENT IN GOOGLE APP ENGINE ---------
    return partial(load_json_from_bucket, url.rsplit('/', 1)[-1], name)


def som_title(index, raw, configured_titles):
    """Configured caption, else a title found in the document, else SOM #n."""
    if index < len(configured_titles):
        return configured_titles[index]
    return extract_som_title(raw) or f'SOM #{index + 1}'


def load_sources(label_url=None, embedding_url=None, som_urls=None, som_titles=None):
    """
    Fetch the label catalog, embedding points and SOM documents in parallel.

    Transport and parse failures are reported as strings in load_error and
    som_error; the normalizer and classifiers only ever see documents that
    loaded.

    Returns:
        DataSources: Loaded and normalized data
    """
    label_url = label_url or LABEL_LIST_URL
    embedding_url = embedding_url or EMBEDDING_URL
    som_urls = SOM_URLS if som_urls is None else som_urls
    som_titles = SOM_TITLES if som_titles is None else som_titles

    som_names = [f'SOM[{i}]' for i in range(len(som_urls))]
    loaders = {
        'labelList': _loader(label_url, 'labelList'),
        'embeddingPoints': _loader(embedding_url, 'embeddingPoints'),
    }
    for name, url in zip(som_names, som_urls):
        loaders[name] = _loader(url, name)

    results, errors = fetch_all(loaders)
    sources = DataSources()

    sources.labels = parse_label_catalog(results.get('labelList'))
    points = results.get('embeddingPoints')
    sources.embedding_records = points if isinstance(points, list) else []
    sources.load_error = '; '.join(
        errors[name] for name in ('labelList', 'embeddingPoints') if name in errors)

    for index, name in enumerate(som_names):
        if name not in results:
            continue
        raw = results[name]
        cells = normalize_som_document(raw)
        keys = list(raw.keys()) if isinstance(raw, dict) else type(raw).__name__
        logger.info(f"[SOM] dataset #{index} raw keys: {keys}")
        logger.info(f"[SOM] dataset #{index} normalized length: {len(cells)}")
        if cells:
            logger.debug(f"[SOM] sample[{index}]: {cells[:2]}")
        sources.som_grids.append(cells)
        sources.som_titles.append(som_title(index, raw, som_titles))

    sources.som_error = '; '.join(errors[name] for name in som_names if name in errors)

    return sources


# Singleton instance shared by every page
_sources_instance = None


def get_sources():
    """
    Load the dashboard documents once and reuse them across pages.

    Returns:
        DataSources: Loaded data
    """
    global _sources_instance

    if _sources_instance is None:
        _sources_instance = load_sources()
        if _sources_instance.load_error:
            logger.error(f"Load error: {_sources_instance.load_error}")
        if _sources_instance.som_error:
            logger.error(f"SOM load error: {_sources_instance.som_error}")

    return _sources_instance
