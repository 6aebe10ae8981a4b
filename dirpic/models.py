from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class MediaFile:
    """
    Represents a file found during a scan. Never modified by the organizer.
    """
    path: Path
    name: str
    ext: str                # lowercased, with leading dot ('' if none)
    mtime_ns: int
    size_bytes: int

    @classmethod
    def from_path(cls, path: Path) -> "MediaFile":
        st = path.stat()
        return cls(
            path=path,
            name=path.name,
            ext=path.suffix.lower(),
            mtime_ns=st.st_mtime_ns,
            size_bytes=st.st_size,
        )


class DateSource(Enum):
    METADATA = "metadata"
    FILENAME = "filename"
    DEFAULT = "default"


@dataclass(frozen=True)
class ResolvedDate:
    captured: datetime      # winner of the fallback chain, before rollover
    timestamp: datetime     # value used for bucketing
    source: DateSource

    @property
    def rolled_over(self) -> bool:
        return self.timestamp != self.captured


class PlacementOutcome(Enum):
    ALREADY_LINKED = "already_linked"
    ALREADY_UP_TO_DATE = "already_up_to_date"
    LINKED = "linked"
    COPIED = "copied"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class PlacementResult:
    outcome: PlacementOutcome
    destination: Path
    reason: Optional[str] = None

    @property
    def changed_disk(self) -> bool:
        return self.outcome in (PlacementOutcome.LINKED, PlacementOutcome.COPIED)


@dataclass
class FileReport:
    """One row of the run report."""
    source: Path
    resolved: Optional[ResolvedDate]
    result: PlacementResult


@dataclass
class RunSummary:
    counts: Counter = field(default_factory=Counter)
    reports: List[FileReport] = field(default_factory=list)
    ineligible: int = 0

    def record(self, report: FileReport):
        self.counts[report.result.outcome] += 1
        self.reports.append(report)

    @property
    def processed(self) -> int:
        return len(self.reports)

    @property
    def failures(self) -> List[FileReport]:
        return [r for r in self.reports if r.result.outcome is PlacementOutcome.FAILED]

    @property
    def disk_operations(self) -> int:
        return self.counts[PlacementOutcome.LINKED] + self.counts[PlacementOutcome.COPIED]
