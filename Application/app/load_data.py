import json
import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed

import requests
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import DefaultCredentialsError
from google.cloud import storage

logger = logging.getLogger("LoadData")


class LoadError(Exception):
    """A document could not be fetched or parsed."""


def load_data_from_bucket(file_name):
    """
    Load a JSON document from Google Cloud Storage.

    Args:
        file_name (str): Name of the file in the bucket.

    Returns:
        Parsed JSON value.
    """
    bucket_name = os.getenv('BUCKET_NAME')
    client = storage.Client()
    bucket = client.bucket(bucket_name)
    blob = bucket.blob(file_name)
    return json.loads(blob.download_as_text())


def fetch_json(url, name, timeout=15):
    """
    Fetch and parse a JSON document over HTTP.

    The body is read as text before parsing so servers sending an odd
    content type still work.

    Args:
        url (str): Document URL.
        name (str): Short name used in error messages.
        timeout (float): Request timeout in seconds.

    Returns:
        Parsed JSON value.

    Raises:
        LoadError: On network failure, non-2xx status or invalid JSON.
    """
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise LoadError(f"{name} request failed: {e}") from e

    if not response.ok:
        raise LoadError(f"{name} HTTP {response.status_code}")

    text = response.text
    try:
        return json.loads(text)
    except ValueError as e:
        logger.error(f"{name} JSON parse failed: {text[:200]!r}")
        raise LoadError(f"{name} JSON parse failed") from e


def load_json_from_bucket(file_name, name):
    """Bucket counterpart of fetch_json, with the same error contract."""
    try:
        return load_data_from_bucket(file_name)
    except ValueError as e:
        raise LoadError(f"{name} JSON parse failed") from e
    except (GoogleAPIError, DefaultCredentialsError) as e:
        raise LoadError(f"{name} bucket read failed: {e}") from e


def fetch_all(loaders, max_workers=4):
    """
    Run several document loaders in parallel.

    Args:
        loaders (dict): Name -> zero-argument callable returning parsed JSON.
        max_workers (int): Thread pool size.

    Returns:
        tuple: (results, errors) where results maps name -> value for the
        loaders that succeeded and errors maps name -> message.
    """
    results, errors = {}, {}
    if not loaders:
        return results, errors

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(loader): name for name, loader in loaders.items()}
        for future in as_completed(futures):
            name = futures[future]
            try:
                results[name] = future.result()
            except LoadError as e:
                logger.warning(f"Could not load {name}: {e}")
                errors[name] = str(e)

    return results, errors
