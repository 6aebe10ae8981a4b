import logging
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from .config import OrganizerConfig
from .exceptions import PlacementError
from .metadata.extract import MetadataExtractor
from .metadata.filename import parse_from_filename
from .models import FileReport, MediaFile, PlacementOutcome, PlacementResult, RunSummary
from .organization.fsops import LocalFileSystem
from .organization.placement import PlacementEngine
from .organization.rules import build_destination_dir, resolve_date
from .scanning.classifier import is_eligible
from .scanning.filesystem import MediaScanner


class DirpicApp:
    def __init__(self,
                 cfg: Optional[OrganizerConfig] = None,
                 extractor: Optional[MetadataExtractor] = None,
                 fs: Optional[LocalFileSystem] = None):
        self.cfg = cfg or OrganizerConfig()
        self.extractor = extractor or MetadataExtractor()
        self.engine = PlacementEngine(
            fs=fs,
            link_mode=self.cfg.link_mode,
            dry_run=self.cfg.dry_run,
            mtime_tolerance_ns=int(self.cfg.mtime_tolerance * 1_000_000_000),
        )

    def organize(self, src_root: Path, dest_root: Path, progress: bool = True) -> RunSummary:
        """
        Walks src_root and links (or copies) every media file into
        dest_root/YYYY/MM/YYYY-MM-DD_/.

        Files are handled one at a time. A failure on one file is logged and
        recorded; the walk continues unless fail_fast is set.
        """
        src_root = Path(src_root)
        dest_root = Path(dest_root)
        summary = RunSummary()

        # Never ingest our own output when dest lives inside src
        scanner = MediaScanner(skip_dirs={dest_root})

        logging.info(f"Organizing {src_root} -> {dest_root} (mode={self.cfg.link_mode}, dry_run={self.cfg.dry_run})")
        for media in tqdm(scanner.scan(src_root), desc="Organizing", unit="file", disable=not progress):
            if not is_eligible(media.ext, self.cfg):
                logging.debug(f"{media.path}: not a media file")
                summary.ineligible += 1
                continue
            summary.record(self.process_file(media, dest_root))

        self._log_summary(summary)
        return summary

    def process_file(self, media: MediaFile, dest_root: Path) -> FileReport:
        logging.debug(f"processing: {media.path}")

        metadata_dt = self.extractor.extract(media.path)
        filename_dt = parse_from_filename(media.name)
        if metadata_dt is None and filename_dt is None:
            logging.info(f"{media.path}: no date in metadata or file name; using default date")

        resolved = resolve_date(metadata_dt, filename_dt, self.cfg.boundary_hour)
        dest_dir = build_destination_dir(dest_root, resolved.timestamp)

        try:
            result = self.engine.place(media.path, dest_dir, media.name)
        except PlacementError as e:
            logging.error(f"Failed to place {e.source} -> {e.destination}: {e.cause}")
            if self.cfg.fail_fast:
                raise
            result = PlacementResult(PlacementOutcome.FAILED, dest_dir / media.name, str(e.cause))

        return FileReport(source=media.path, resolved=resolved, result=result)

    def _log_summary(self, summary: RunSummary):
        parts = ", ".join(f"{outcome.value}={summary.counts[outcome]}" for outcome in PlacementOutcome)
        logging.info(f"Run complete. {summary.processed} media files ({parts}); {summary.ineligible} other files ignored.")
        for report in summary.failures:
            logging.warning(f"FAILED: {report.source}: {report.result.reason}")
