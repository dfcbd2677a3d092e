import csv
import logging
from pathlib import Path

from .models import BatchOutcome, Outcome


def log_summary(outcome: BatchOutcome):
    """Logs the final tally, one line per outcome kind."""
    counts = outcome.counts()
    logging.info(f"Finished. {len(outcome)} files processed.")
    for kind in Outcome:
        logging.info(f"  {kind.value:<16} {counts[kind]}")


def write_outcome_csv(outcome: BatchOutcome, output_csv: Path):
    """
    Writes one row per processed file. Failed rows carry the reason in
    the Notes column.
    """
    headers = [
        "Source Path",
        "Outcome",
        "Destination Path",
        "Resolved Date",
        "Date Source",
        "Notes",
    ]

    with open(output_csv, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(headers)

        for r in outcome.results:
            resolved_date = r.resolved.timestamp.isoformat() if r.resolved else ""
            date_source = r.resolved.source.value if r.resolved else ""
            writer.writerow([
                str(r.source),
                r.outcome.value,
                str(r.destination) if r.destination else "",
                resolved_date,
                date_source,
                r.reason or "",
            ])

    logging.info(f"Report written to {output_csv} ({len(outcome)} rows)")
