"""
Test Suite for the Historical Stock Analysis Core

Includes:
- Unit tests for parsing and calculations (beside each package)
- Shared CSV fixtures (tests/fixtures)
"""
