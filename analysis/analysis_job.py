"""
Orchestrated analysis job - CSV source to dashboard JSON.
Loads raw text, calls pure functions, optionally persists the result.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional, Sequence

from analysis.models import DailyRecord
from analysis.calculations.metrics import compute_metrics, EmptyInputError
from analysis.time_window import filter_by_period
from analysis.trend_analyzer import analyze_trends
from ingestion.providers.csv_source import fetch_csv_text, fetch_dataset
from ingestion.transforms.csv_parser import parse
from reports.insight_generator import generate_insights
from reports.atomic_writer import write_json_atomic

logger = logging.getLogger(__name__)


class AnalysisJobError(Exception):
    """Raised when an analysis job is configured incorrectly."""
    pass


def build_dashboard(
    records: Sequence[DailyRecord],
    period: str = 'all',
    symbol: Optional[str] = None
) -> Dict[str, Any]:
    """
    Build the full dashboard view for a record sequence.

    Metrics and insights cover the selected period; trend analysis always
    covers the full sequence.

    Args:
        records: Daily records in chronological order
        period: Time window ('all', '1y', '3y', '5y')
        symbol: Ticker for narrative text (optional)

    Returns:
        JSON-serialisable dashboard dictionary; 'metrics' is None when the
        filtered view is empty
    """
    filtered = filter_by_period(records, period)

    try:
        metrics = compute_metrics(filtered).to_dict()
    except EmptyInputError:
        logger.warning(f"No records in period '{period}'; metrics unavailable")
        metrics = None

    data_period = None
    if filtered:
        data_period = {
            'start_date': filtered[0].date,
            'end_date': filtered[-1].date,
            'trading_days': len(filtered),
        }

    return {
        'symbol': symbol,
        'period': period,
        'record_count': len(filtered),
        'data_period': data_period,
        'metrics': metrics,
        'insights': [i.to_dict() for i in generate_insights(filtered, symbol=symbol)],
        'trend_analysis': analyze_trends(records, symbol=symbol).to_dict(),
        'generated_at': datetime.now().isoformat(timespec='seconds'),
    }


def analyze_source(
    source: Optional[str] = None,
    dataset: Optional[str] = None,
    period: str = 'all',
    symbol: Optional[str] = None,
    output_path: Optional[Path] = None,
    catalog: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Run the complete analysis for a CSV source or named dataset.

    Args:
        source: File path or URL of CSV text
        dataset: Dataset name from the catalog (used when source is None)
        period: Time window for metrics and insights
        symbol: Ticker for narrative text (defaults to the dataset symbol)
        output_path: Optional path to save the dashboard JSON
        catalog: Preloaded dataset catalog (optional)

    Returns:
        Dictionary with job status, the dashboard and summary counts

    Raises:
        AnalysisJobError: If neither or both of source and dataset are given
    """
    if (source is None) == (dataset is None):
        raise AnalysisJobError("Provide exactly one of source or dataset")

    start_time = datetime.now()
    label = source or dataset
    warning = None

    try:
        if source is not None:
            records = parse(fetch_csv_text(source))
        else:
            loaded = fetch_dataset(dataset, catalog=catalog)
            records = loaded.records
            warning = loaded.warning
            symbol = symbol or loaded.symbol

        dashboard = build_dashboard(records, period=period, symbol=symbol)
        dashboard['warning'] = warning

        if output_path is not None:
            write_result = write_json_atomic(dashboard, output_path)
            if write_result['status'] != 'completed':
                raise AnalysisJobError(f"Write failed: {write_result['error']}")

        logger.info(
            f"Analyzed {label}: {len(records)} records, "
            f"{len(dashboard['insights'])} insights"
        )

        return {
            'source': label,
            'status': 'completed',
            'dashboard': dashboard,
            'output_path': str(output_path) if output_path is not None else None,
            'records_parsed': len(records),
            'warning': warning,
            'duration_seconds': (datetime.now() - start_time).total_seconds()
        }

    except Exception as e:
        logger.error(f"Analysis failed for {label}: {e}")
        return {
            'source': label,
            'status': 'failed',
            'error_message': str(e),
            'dashboard': None,
            'output_path': None,
            'records_parsed': 0,
            'warning': warning,
            'duration_seconds': (datetime.now() - start_time).total_seconds()
        }
