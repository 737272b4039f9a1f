"""
Tests for the Markdown dashboard template - pure rendering, no IO.
"""

import pytest
from pathlib import Path

from analysis.analysis_job import build_dashboard
from ingestion.transforms.csv_parser import parse
from reports.markdown_template import render_dashboard_report, TemplateError


FIXTURE_PATH = Path(__file__).parent.parent.parent / 'tests' / 'fixtures' / 'steady_uptrend.csv'


@pytest.fixture
def dashboard():
    records = parse(FIXTURE_PATH.read_text())
    return build_dashboard(records, symbol='AAPL')


@pytest.fixture
def empty_dashboard():
    return {
        'symbol': None,
        'period': '1y',
        'record_count': 0,
        'data_period': None,
        'metrics': None,
        'insights': [],
        'trend_analysis': {'yearly_performance': [], 'trends': [], 'key_events': []},
    }


class TestRenderDashboardReport:
    """Tests for render_dashboard_report."""

    def test_header(self, dashboard):
        report = render_dashboard_report(dashboard)

        assert report.startswith("# Historical Performance: AAPL\n")
        assert "**Period:** all" in report
        assert "**Data:** 2019-12-02 to 2020-01-22 (35 trading days)" in report

    def test_metrics_table(self, dashboard):
        report = render_dashboard_report(dashboard)

        assert "## Key Metrics" in report
        assert "| Highest Price | $134.50 |" in report
        assert "| Lowest Price | $99.00 |" in report
        assert "| Average Volume | 1.1M |" in report
        assert "| Price Change | +34.00% |" in report

    def test_insights_section(self, dashboard):
        report = render_dashboard_report(dashboard)

        assert "### Unusual Trading Volume" in report
        assert "### Bullish Trend Detected" in report
        assert "### Overall Performance" in report

    def test_trend_sections(self, dashboard):
        report = render_dashboard_report(dashboard)

        assert "| 2019-12-02 to 2020-01-22 | bullish | +34.00% |" in report
        assert "| 2019 | $100.00 | $120.00 | +20.00% |" in report
        assert "- **2019-12-31**: 20.00% increase in stock price" in report

    def test_section_order(self, dashboard):
        report = render_dashboard_report(dashboard)

        positions = [
            report.index(heading)
            for heading in ("## Key Metrics", "## Insights", "## Trends",
                            "## Yearly Performance", "## Key Events")
        ]
        assert positions == sorted(positions)

    def test_warning_rendered(self, dashboard):
        dashboard['warning'] = "Failed to load 2015-2020 data. Using 1980-1985 data instead."

        report = render_dashboard_report(dashboard)

        assert "> **Warning:** Failed to load 2015-2020 data." in report

    def test_empty_sections_omitted(self, empty_dashboard):
        report = render_dashboard_report(empty_dashboard)

        assert report.startswith("# Historical Performance: Stock")
        assert "no records in the selected period" in report
        for heading in ("## Key Metrics", "## Insights", "## Trends", "## Key Events"):
            assert heading not in report

    def test_undefined_values(self, empty_dashboard):
        empty_dashboard['trend_analysis']['trends'] = [{
            'period': '2020-01-01 to 2020-01-02',
            'direction': None,
            'magnitude_percent': None,
            'description': 'The stock performance over the entire period is undefined',
        }]

        report = render_dashboard_report(empty_dashboard)

        assert "| 2020-01-01 to 2020-01-02 | n/a | Not available |" in report

    def test_missing_field(self, empty_dashboard):
        del empty_dashboard['insights']

        with pytest.raises(TemplateError, match="Missing required field: insights"):
            render_dashboard_report(empty_dashboard)

    def test_empty_input(self):
        with pytest.raises(TemplateError):
            render_dashboard_report({})
