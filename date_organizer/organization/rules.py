from datetime import datetime
from pathlib import Path

from .. import config
from ..models import DestinationPlan


class DestinationPlanner:
    """
    Maps a capture time to its folder: <root>/YYYY/YYYY-MM-DD.

    Pure path arithmetic; nothing here touches the filesystem, so the same
    timestamp always lands in the same folder and re-runs are safe.
    """

    def plan(self, dest_root: Path, timestamp: datetime) -> Path:
        return Path(dest_root) / config.FOLDER_PATTERN.format(
            year=timestamp.year, month=timestamp.month, day=timestamp.day
        )

    def plan_file(self, dest_root: Path, timestamp: datetime, name: str) -> DestinationPlan:
        # The file keeps its own name; collisions are the caller's problem.
        folder = self.plan(dest_root, timestamp)
        return DestinationPlan(directory=folder, file_path=folder / name)
