"""
CSV source - fetch raw daily price text from files, URLs or named datasets.
Network and file IO allowed here; parsing is delegated to the CSV parser.
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests
import yaml
from dotenv import load_dotenv

from analysis.models import DailyRecord
from ingestion.transforms.csv_parser import parse, CSVParseError

# Load environment variables
load_dotenv()

# Set up logger
logger = logging.getLogger(__name__)


class CSVSourceError(Exception):
    """Raised when raw CSV text cannot be obtained."""
    pass


@dataclass(frozen=True)
class DatasetLoad:
    """Result of loading a named dataset."""
    name: str
    symbol: Optional[str]
    records: List[DailyRecord]
    warning: Optional[str] = None


def fetch_csv_text(location: str, timeout: Optional[int] = None) -> str:
    """
    Fetch raw CSV text from an HTTP(S) URL or a local file.

    Relative file paths resolve against STOCK_DATA_DIR (default ./data)
    when they do not exist relative to the working directory.

    Args:
        location: URL or file path
        timeout: Request timeout in seconds (default REQUESTS_TIMEOUT_S or 30)

    Returns:
        CSV text

    Raises:
        CSVSourceError: If the fetch or read fails
    """
    if not location or not isinstance(location, str):
        raise CSVSourceError("Location must be non-empty string")

    if location.startswith(('http://', 'https://')):
        return _fetch_url(location, timeout)

    return _read_file(location)


def _fetch_url(url: str, timeout: Optional[int]) -> str:
    if timeout is None:
        timeout = int(os.getenv('REQUESTS_TIMEOUT_S', '30'))

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        raise CSVSourceError(f"Timed out fetching {url} after {timeout}s") from e
    except requests.exceptions.RequestException as e:
        raise CSVSourceError(f"Failed to fetch data from {url}: {e}") from e

    logger.info(f"Fetched {len(response.text)} characters from {url}")
    return response.text


def _read_file(location: str) -> str:
    path = Path(location)

    if not path.is_absolute() and not path.exists():
        path = Path(os.getenv('STOCK_DATA_DIR', './data')) / location

    if not path.exists():
        raise CSVSourceError(f"Data file not found: {location}")

    try:
        text = path.read_text(encoding='utf-8')
    except OSError as e:
        raise CSVSourceError(f"Failed to read {path}: {e}") from e

    logger.info(f"Read {len(text)} characters from {path}")
    return text


def load_dataset_catalog(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the dataset catalog from YAML.

    Expected layout:
        datasets:
          1980-1985:
            location: AAPL.csv
            symbol: AAPL

    Args:
        config_path: Catalog path (default STOCK_DATASETS_CONFIG or
            ./config/datasets.yml)

    Returns:
        Dictionary with a 'datasets' mapping

    Raises:
        CSVSourceError: If the catalog cannot be loaded
    """
    if config_path is None:
        config_path = os.getenv('STOCK_DATASETS_CONFIG', './config/datasets.yml')

    config_file = Path(config_path)
    if not config_file.exists():
        raise CSVSourceError(f"Dataset catalog not found: {config_path}")

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise CSVSourceError(f"Failed to load dataset catalog: {e}") from e

    if not isinstance(config, dict) or not isinstance(config.get('datasets'), dict):
        raise CSVSourceError("Dataset catalog missing 'datasets' section")

    for name, entry in config['datasets'].items():
        if not isinstance(entry, dict) or 'location' not in entry:
            raise CSVSourceError(f"Dataset '{name}' missing 'location'")

    return config


def fetch_dataset(name: str, catalog: Optional[Dict[str, Any]] = None) -> DatasetLoad:
    """
    Load and parse a named dataset, falling back when configured.

    When the dataset fails to load or parse and its entry names a
    'fallback' dataset, the fallback is loaded instead and the returned
    value carries a warning.

    Args:
        name: Dataset name in the catalog
        catalog: Loaded catalog (default: load_dataset_catalog())

    Returns:
        DatasetLoad with parsed records

    Raises:
        CSVSourceError: If neither the dataset nor its fallback can be loaded
    """
    if catalog is None:
        catalog = load_dataset_catalog()

    datasets = catalog['datasets']
    if name not in datasets:
        raise CSVSourceError(f"Unknown dataset '{name}', available: {sorted(datasets)}")

    entry = datasets[name]

    try:
        return _load_entry(name, entry)
    except (CSVSourceError, CSVParseError) as e:
        fallback = entry.get('fallback')
        if not fallback or fallback not in datasets:
            raise CSVSourceError(f"Failed to load dataset '{name}': {e}") from e

        logger.warning(f"Dataset '{name}' failed ({e}); using fallback '{fallback}'")

    try:
        loaded = _load_entry(fallback, datasets[fallback])
    except (CSVSourceError, CSVParseError) as e:
        raise CSVSourceError(f"Failed to load dataset '{name}' or fallback '{fallback}': {e}") from e

    return DatasetLoad(
        name=loaded.name,
        symbol=loaded.symbol,
        records=loaded.records,
        warning=f"Failed to load {name} data. Using {fallback} data instead.",
    )


def _load_entry(name: str, entry: Dict[str, Any]) -> DatasetLoad:
    text = fetch_csv_text(entry['location'])
    records = parse(text)
    logger.info(f"Loaded dataset '{name}' with {len(records)} records")
    return DatasetLoad(name=name, symbol=entry.get('symbol'), records=records)
