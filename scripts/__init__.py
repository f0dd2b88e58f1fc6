"""Command-line ingestion jobs (run as python scripts/<name>.py)."""
