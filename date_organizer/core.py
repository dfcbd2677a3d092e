import logging
import os
import time
from typing import Callable, List, Optional

from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from .exceptions import FileOperationError, TimestampResolutionError
from .metadata.extract import ExifDateExtractor, MediaInfoDateExtractor
from .metadata.resolver import TimestampResolver
from .models import BatchOutcome, FileRecord, FileResult, Outcome
from .organization.mover import FileMover
from .organization.rules import DestinationPlanner
from .reporting import log_summary
from .scanning.filesystem import DiskScanner
from .settings import Settings


class BatchRelocator:
    def __init__(self,
                 settings: Settings,
                 resolver: Optional[TimestampResolver] = None,
                 planner: Optional[DestinationPlanner] = None,
                 mover: Optional[FileMover] = None,
                 scanner: Optional[DiskScanner] = None,
                 sleep: Optional[Callable[[float], None]] = None):
        self.settings = settings
        if resolver is None:
            extractors = [ExifDateExtractor()]
            if settings.video_metadata:
                extractors.append(MediaInfoDateExtractor())
            resolver = TimestampResolver(extractors)
        self.resolver = resolver
        self.planner = planner or DestinationPlanner()
        self.mover = mover or FileMover()
        self.scanner = scanner or DiskScanner()
        self.sleep = sleep or time.sleep

    def run(self) -> BatchOutcome:
        """
        Executes one organization pass.
        1. Scan (filter by extension)
        2. Resolve capture time
        3. Plan destination folder
        4. Check collision / dry run
        5. Create folder & rename

        Raises SourceDirectoryError if the source cannot be enumerated; every
        per-file problem is recorded in the returned BatchOutcome instead.
        """
        src = self.settings.source
        outcome = BatchOutcome()

        logging.info(f"Scanning {src}...")
        records = self._collect()

        if not records:
            logging.info(f"No files found in {src}")
            outcome.no_files_found = True
            return outcome

        mode = "DRY RUN" if self.settings.dry_run else "MOVE"
        logging.info(f"Processing {len(records)} files (Mode={mode}) -> {self.settings.destination}")

        moved = 0
        with logging_redirect_tqdm():
            for record in tqdm(records, desc="Organizing", unit="file",
                               disable=not self.settings.show_progress):
                try:
                    result = self._process(record)
                except Exception as e:
                    logging.exception(f"Unexpected error processing {record.path}")
                    result = FileResult(record.path, Outcome.FAILED, reason=str(e))
                outcome.record(result)

                if result.outcome is Outcome.MOVED:
                    moved += 1
                    self._throttle(moved)

        log_summary(outcome)
        return outcome

    def _collect(self) -> List[FileRecord]:
        # Enumerate everything up front so freshly moved files are never revisited.
        src = self.settings.source
        dest = self.settings.destination
        skip_dirs = {dest} if src in dest.parents else set()
        return list(self.scanner.scan(src, self.settings.allowed_extensions, skip_dirs))

    def _process(self, record: FileRecord) -> FileResult:
        try:
            resolved = self.resolver.resolve(record.path, record.mtime)
        except TimestampResolutionError as e:
            logging.error(f"Failed to read {record.path}: {e}")
            return FileResult(record.path, Outcome.FAILED, reason=str(e))

        plan = self.planner.plan_file(self.settings.destination, resolved.timestamp, record.name)

        if os.path.lexists(plan.file_path):
            logging.error(f"Destination exists, skipping {record.path} -> {plan.file_path}")
            return FileResult(record.path, Outcome.SKIPPED_EXISTS, plan.file_path, resolved)

        if self.settings.dry_run:
            logging.info(
                f"[DRY RUN] Move {record.path} -> {plan.file_path} "
                f"(date {resolved.timestamp:%Y-%m-%d %H:%M:%S} from {resolved.source.value})"
            )
            return FileResult(record.path, Outcome.SKIPPED_DRY_RUN, plan.file_path, resolved)

        try:
            self.mover.ensure_directory(plan.directory)
            self.mover.move(record.path, plan.file_path)
        except FileOperationError as e:
            logging.error(f"Failed to process {record.path}: {e}")
            return FileResult(record.path, Outcome.FAILED, plan.file_path, resolved, reason=str(e))

        logging.info(f"{record.path} -> {plan.file_path}")
        return FileResult(record.path, Outcome.MOVED, plan.file_path, resolved)

    def _throttle(self, moved: int):
        every = self.settings.throttle_every
        if every and moved % every == 0:
            self.sleep(self.settings.throttle_seconds)
