"""
Markdown template for rendering dashboard output to a readable report.
Pure function - no I/O, just template rendering.
"""

from typing import Dict, Any, List, Optional

from reports.formatters import format_large_number, format_percent, format_price


class TemplateError(Exception):
    """Raised when template rendering fails."""
    pass


def render_dashboard_report(dashboard: Dict[str, Any]) -> str:
    """
    Render a dashboard dictionary to a Markdown report.

    Sections with no content (no metrics, no insights, no trends) are
    omitted.

    Args:
        dashboard: Output of analysis.analysis_job.build_dashboard

    Returns:
        Formatted Markdown string

    Raises:
        TemplateError: If required fields are missing
    """
    if not dashboard:
        raise TemplateError("Empty or invalid dashboard provided")

    for field in ('period', 'record_count', 'metrics', 'insights', 'trend_analysis'):
        if field not in dashboard:
            raise TemplateError(f"Missing required field: {field}")

    trend_analysis = dashboard['trend_analysis'] or {}

    sections = [
        _render_header(dashboard),
        _render_warning(dashboard.get('warning')),
        _render_metrics(dashboard['metrics']),
        _render_insights(dashboard['insights']),
        _render_trends(trend_analysis.get('trends', [])),
        _render_yearly(trend_analysis.get('yearly_performance', [])),
        _render_key_events(trend_analysis.get('key_events', [])),
    ]

    return '\n\n'.join(section for section in sections if section) + '\n'


def _render_header(dashboard: Dict[str, Any]) -> str:
    symbol = dashboard.get('symbol') or 'Stock'
    lines = [f"# Historical Performance: {symbol}", ""]
    lines.append(f"**Period:** {dashboard['period']}  ")

    data_period = dashboard.get('data_period')
    if data_period:
        lines.append(
            f"**Data:** {data_period['start_date']} to {data_period['end_date']} "
            f"({data_period['trading_days']} trading days)"
        )
    else:
        lines.append("**Data:** no records in the selected period")

    return '\n'.join(lines)


def _render_warning(warning: Optional[str]) -> Optional[str]:
    if not warning:
        return None
    return f"> **Warning:** {warning}"


def _render_metrics(metrics: Optional[Dict[str, Any]]) -> Optional[str]:
    if not metrics:
        return None

    rows = [
        ("Highest Price", format_price(metrics['max_price'])),
        ("Lowest Price", format_price(metrics['min_price'])),
        ("Average Volume", metrics['average_volume_display']),
        ("Price Change", format_percent(metrics['price_increase_percent'], show_direction=True)),
        ("Volatility", format_percent(metrics['volatility'])),
    ]

    lines = ["## Key Metrics", "", "| Metric | Value |", "|--------|-------|"]
    lines.extend(f"| {label} | {value} |" for label, value in rows)
    return '\n'.join(lines)


def _render_insights(insights: List[Dict[str, Any]]) -> Optional[str]:
    if not insights:
        return None

    lines = ["## Insights"]
    for insight in insights:
        lines.append("")
        lines.append(f"### {insight['title']}")
        lines.append(insight['text'])
    return '\n'.join(lines)


def _render_trends(trends: List[Dict[str, Any]]) -> Optional[str]:
    if not trends:
        return None

    lines = ["## Trends", "", "| Period | Trend | Return | Description |",
             "|--------|-------|--------|-------------|"]
    for trend in trends:
        lines.append(
            f"| {trend['period']} | {trend['direction'] or 'n/a'} | "
            f"{format_percent(trend['magnitude_percent'], show_direction=True)} | "
            f"{trend['description']} |"
        )
    return '\n'.join(lines)


def _render_yearly(yearly: List[Dict[str, Any]]) -> Optional[str]:
    if not yearly:
        return None

    lines = ["## Yearly Performance", "",
             "| Year | Start | End | Return | Avg Volume | Volatility |",
             "|------|-------|-----|--------|------------|------------|"]
    for year in yearly:
        lines.append(
            f"| {year['year']} | {format_price(year['start_price'])} | "
            f"{format_price(year['end_price'])} | "
            f"{format_percent(year['performance_percent'], show_direction=True)} | "
            f"{format_large_number(year['average_volume'])} | "
            f"{format_percent(year['volatility'])} |"
        )
    return '\n'.join(lines)


def _render_key_events(events: List[Dict[str, Any]]) -> Optional[str]:
    if not events:
        return None

    lines = ["## Key Events", ""]
    lines.extend(f"- **{event['period_end']}**: {event['description']}" for event in events)
    return '\n'.join(lines)
