"""
Test suite for Boat Price Sync.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_history_merge_service.py -v
"""
