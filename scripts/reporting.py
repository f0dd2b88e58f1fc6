"""Console output shared by the ingestion scripts."""

import json

from models.ingest import ImportSummary, ImageRefreshSummary

SEPARATOR = "=" * 61
SAMPLE_SIZE = 3
MAX_REJECTIONS_SHOWN = 10


def print_header(title: str) -> None:
    print(SEPARATOR)
    print(f"  {title}")
    print(SEPARATOR)
    print()


def print_import_summary(summary: ImportSummary) -> None:
    """Counts, rejections, and in a dry run a sample of mapped candidates."""
    if summary.rejections:
        print(f"Rejected rows ({len(summary.rejections)}):")
        for record in summary.rejections[:MAX_REJECTIONS_SHOWN]:
            print(f"  row {record.row}: {record.name or '(no name)'} -> {record.reason}")
        hidden = len(summary.rejections) - MAX_REJECTIONS_SHOWN
        if hidden > 0:
            print(f"  ... and {hidden} more")
        print()

    if summary.dry_run and summary.candidates:
        print(f"Sample mapped rows (first {SAMPLE_SIZE}):")
        sample = [
            c.model_dump(mode="json", exclude_none=True)
            for c in summary.candidates[:SAMPLE_SIZE]
        ]
        print(json.dumps(sample, indent=2, ensure_ascii=False))
        print("Dry-run complete. No changes applied.")
        print()

    print(SEPARATOR)
    print(f"  {summary.summary_line()}")
    print(SEPARATOR)


def print_image_summary(summary: ImageRefreshSummary) -> None:
    print(SEPARATOR)
    print(f"  Done. {summary.summary_line()}")
    print(SEPARATOR)
