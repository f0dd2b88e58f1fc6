"""
Test suite for the perfume catalog ingestion pipeline.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_upsert_service.py -v
"""
