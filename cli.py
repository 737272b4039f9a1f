#!/usr/bin/env python3
"""
Main CLI for the historical stock analysis core.
Usage: python cli.py analyze SOURCE [options]
       python cli.py fetch TICKER --start DATE --end DATE --output PATH
"""

import sys
import json
import logging
import argparse
from datetime import date
from pathlib import Path

from analysis.analysis_job import analyze_source
from analysis.time_window import PERIOD_YEARS
from ingestion.providers.yfinance_adapter import fetch_history_csv, YFinanceError
from reports.atomic_writer import write_text_atomic
from reports.formatters import format_percent, format_price
from reports.markdown_template import render_dashboard_report


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Analyze historical daily stock prices',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli.py analyze data/AAPL.csv --symbol AAPL
  python cli.py analyze --dataset 2015-2020 --format markdown
  python cli.py analyze data/AAPL.csv --period 1y --format json --output out/aapl.json
  python cli.py fetch AAPL --start 2015-01-02 --end 2020-12-31 --output data/AAPL_2015_2020.csv
        """
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    analyze = subparsers.add_parser('analyze', help='Analyze a CSV file, URL or dataset')
    analyze.add_argument('source', nargs='?', help='CSV file path or URL')
    analyze.add_argument('--dataset', help='Dataset name from the catalog (config/datasets.yml)')
    analyze.add_argument('--period',
                         choices=list(PERIOD_YEARS),
                         default='all',
                         help='Time window for metrics and insights (default: all)')
    analyze.add_argument('--symbol', help='Ticker used in narrative text')
    analyze.add_argument('--format',
                         choices=['summary', 'json', 'markdown'],
                         default='summary',
                         help='Output format (default: summary)')
    analyze.add_argument('--output', type=Path, help='Also save the dashboard JSON to this path')
    analyze.add_argument('--verbose', '-v', action='store_true', help='Log progress')

    fetch = subparsers.add_parser('fetch', help='Download daily history from Yahoo Finance as CSV')
    fetch.add_argument('ticker', help='Stock ticker symbol (e.g., AAPL)')
    fetch.add_argument('--start', type=date.fromisoformat, required=True,
                       help='Start date (YYYY-MM-DD)')
    fetch.add_argument('--end', type=date.fromisoformat, required=True,
                       help='End date (YYYY-MM-DD)')
    fetch.add_argument('--output', type=Path, required=True, help='CSV file to write')
    fetch.add_argument('--verbose', '-v', action='store_true', help='Log progress')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    if args.command == 'fetch':
        return _fetch(args)

    if (args.source is None) == (args.dataset is None):
        parser.error("provide either SOURCE or --dataset")

    result = analyze_source(
        source=args.source,
        dataset=args.dataset,
        period=args.period,
        symbol=args.symbol,
        output_path=args.output
    )

    if result['status'] != 'completed':
        print(f"ERROR: Failed to load stock data: {result['error_message']}", file=sys.stderr)
        return 1

    dashboard = result['dashboard']

    if args.format == 'json':
        print(json.dumps(dashboard, indent=2, default=str))
    elif args.format == 'markdown':
        print(render_dashboard_report(dashboard))
    else:
        _print_summary(dashboard)

    if result['output_path']:
        print(f"Dashboard saved to: {result['output_path']}", file=sys.stderr)

    return 0


def _fetch(args) -> int:
    """Download history for a ticker and save it in the standard CSV layout."""
    try:
        text = fetch_history_csv(args.ticker.upper(), args.start, args.end)
    except YFinanceError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    result = write_text_atomic(text, args.output)
    if result['status'] != 'completed':
        print(f"ERROR: Failed to write {args.output}: {result['error']}", file=sys.stderr)
        return 1

    rows = max(text.count('\n') - 1, 0)
    print(f"Saved {rows} rows for {args.ticker.upper()} to {result['output_path']}")
    return 0


def _print_summary(dashboard: dict):
    """Print a concise text summary of the dashboard."""
    symbol = dashboard.get('symbol') or 'Stock'
    print(f"{symbol} ({dashboard['period']}, {dashboard['record_count']} trading days)")
    print("=" * 50)

    if dashboard.get('warning'):
        print(f"WARNING: {dashboard['warning']}")

    metrics = dashboard['metrics']
    if metrics:
        print(f"Highest Price:  {format_price(metrics['max_price'])}")
        print(f"Lowest Price:   {format_price(metrics['min_price'])}")
        print(f"Average Volume: {metrics['average_volume_display']}")
        print(f"Price Change:   {format_percent(metrics['price_increase_percent'], show_direction=True)}")
        print(f"Volatility:     {format_percent(metrics['volatility'])}")
    else:
        print("No metrics available for the selected period")

    if dashboard['insights']:
        print("\nInsights:")
        for insight in dashboard['insights']:
            print(f"  - {insight['title']}: {insight['text']}")

    trends = dashboard['trend_analysis']['trends']
    if trends:
        print("\nTrends:")
        for trend in trends:
            print(f"  - {trend['period']}: {trend['description']}")

    events = dashboard['trend_analysis']['key_events']
    if events:
        print("\nKey Events:")
        for event in events:
            print(f"  - {event['period_end']}: {event['description']}")


if __name__ == '__main__':
    sys.exit(main())
