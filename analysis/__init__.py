"""
Analysis Engine Module

Derives statistics from parsed daily price records:
- Metrics (price extremes, average volume, overall return, volatility)
- Trends (yearly performance, longest runs, significant moves)
- Time-window filtering
"""

__version__ = "0.1.0"
