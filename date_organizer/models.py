from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


@dataclass(frozen=True)
class FileRecord:
    """
    Represents a file found during a scan.
    """
    path: Path
    name: str
    mtime: datetime         # UTC-aware modification time

    @property
    def ext(self) -> str:
        return self.path.suffix.lower()


class TimestampSource(Enum):
    METADATA = "metadata"
    MODIFICATION_TIME = "modification-time"


@dataclass(frozen=True)
class ResolvedTimestamp:
    timestamp: datetime     # UTC-aware
    source: TimestampSource


@dataclass(frozen=True)
class DestinationPlan:
    directory: Path
    file_path: Path


class Outcome(Enum):
    MOVED = "moved"
    SKIPPED_DRY_RUN = "skipped-dry-run"
    SKIPPED_EXISTS = "skipped-exists"
    FAILED = "failed"


@dataclass
class FileResult:
    source: Path
    outcome: Outcome
    destination: Optional[Path] = None
    resolved: Optional[ResolvedTimestamp] = None
    reason: Optional[str] = None


@dataclass
class BatchOutcome:
    """
    Per-file results of a single relocation run, in processing order.
    """
    results: List[FileResult] = field(default_factory=list)
    no_files_found: bool = False

    def record(self, result: FileResult) -> FileResult:
        self.results.append(result)
        return result

    def counts(self) -> Dict[Outcome, int]:
        tally = Counter(r.outcome for r in self.results)
        return {kind: tally.get(kind, 0) for kind in Outcome}

    @property
    def moved(self) -> List[FileResult]:
        return [r for r in self.results if r.outcome is Outcome.MOVED]

    @property
    def failed(self) -> List[FileResult]:
        return [r for r in self.results if r.outcome is Outcome.FAILED]

    def __len__(self) -> int:
        return len(self.results)
