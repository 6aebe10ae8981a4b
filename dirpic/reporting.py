import csv
import logging
from pathlib import Path

from .models import FileReport, RunSummary

HEADERS = [
    "Source Path",
    "Outcome",
    "Date Source",
    "Captured",
    "Album Date",
    "Destination Path",
    "Notes",
]


class ReportGenerator:
    def __init__(self, summary: RunSummary):
        self.summary = summary

    def write_csv(self, output_csv: Path):
        """Writes one row per media file handled in the run."""
        logging.info(f"Writing report -> {output_csv}")
        with open(output_csv, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(HEADERS)
            for report in self.summary.reports:
                writer.writerow(self._row(report))
        logging.info(f"Report complete. {len(self.summary.reports)} rows.")

    def _row(self, report: FileReport) -> list:
        resolved = report.resolved
        return [
            str(report.source),
            report.result.outcome.value,
            resolved.source.value if resolved else "",
            resolved.captured.isoformat(sep=" ") if resolved else "",
            resolved.timestamp.strftime("%Y-%m-%d") if resolved else "",
            str(report.result.destination),
            report.result.reason or "",
        ]
