"""
Data Ingestion Module

Handles obtaining and parsing daily price data:
- CSV text from files, URLs and named datasets
- yfinance downloads rendered as CSV
- Parsing and field validation
"""

__version__ = "0.1.0"
