"""
In-memory bookkeeping of one run: course/video outcomes for the final report,
and the optional flat debug log of dispatched videos.
"""
import asyncio
from datetime import datetime
from enum import Enum
from pathlib import Path

from rich import box
from rich.table import Table

from .helpers import write_json
from .logger import Logger


class DownloadStatus(Enum):
    """Status of a course in the current run."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class ProgressTracker:
    """Tracks what happened to every course and video during a run."""

    def __init__(self):
        self.started_at = datetime.now()
        # keyed by course link, titles repeat across lists
        self.courses: dict[str, dict] = {}
        self.failed_videos: list[dict] = []

    def _course(self, link: str) -> dict:
        return self.courses.setdefault(
            link,
            {
                "title": link,
                "status": DownloadStatus.PENDING,
                "units": 0,
                "videos": 0,
                "downloaded": 0,
                "failed": 0,
                "error": None,
            },
        )

    def start_course(self, link: str, title: str):
        self._course(link).update(title=title, status=DownloadStatus.IN_PROGRESS)

    def complete_course(self, link: str, units: int, videos: int):
        course = self._course(link)
        course.update(status=DownloadStatus.COMPLETED, units=units, videos=videos)

    def fail_course(self, link: str, error: str):
        course = self._course(link)
        course.update(status=DownloadStatus.FAILED, error=error)

    def video_downloaded(self, link: str):
        self._course(link)["downloaded"] += 1

    def video_failed(self, link: str, output: str, error: str):
        course = self._course(link)
        course["failed"] += 1
        self.failed_videos.append({"course": course["title"], "output": output, "error": error})

    def count(self, status: DownloadStatus) -> int:
        return sum(1 for c in self.courses.values() if c["status"] == status)

    def generate_report(self) -> Table:
        """Summary table of the run, one row per course."""
        elapsed = datetime.now() - self.started_at
        table = Table(
            title="📊 DOWNLOAD REPORT",
            caption=(
                f"{self.count(DownloadStatus.COMPLETED)}/{len(self.courses)} courses completed, "
                f"{self.count(DownloadStatus.FAILED)} failed in {str(elapsed).split('.')[0]}"
            ),
            caption_style="green",
            title_style="green",
            header_style="green",
            box=box.SQUARE_DOUBLE_HEAD,
        )
        table.add_column("Course", style="green", no_wrap=True)
        table.add_column("Status", justify="center")
        table.add_column("Units", justify="center")
        table.add_column("Videos", justify="center")
        table.add_column("Failed", justify="center", style="red")

        for course in self.courses.values():
            status = course["status"]
            label = status.value if status != DownloadStatus.FAILED else f"failed: {course['error']}"
            table.add_row(
                course["title"],
                label,
                str(course["units"]),
                str(course["videos"]),
                str(course["failed"]),
            )

        return table


class DebugLog:
    """Flat ``[{videoURL, output}]`` list, rewritten to a fixed file after each course."""

    def __init__(self, path: Path, enabled: bool = False):
        self.path = Path(path)
        self.enabled = enabled
        self.records: list[dict] = []
        self._lock = asyncio.Lock()

    def record(self, video_url: str, output: str):
        if self.enabled:
            self.records.append({"videoURL": video_url, "output": output})

    async def flush(self):
        if not self.enabled:
            return
        async with self._lock:
            await write_json(self.path, list(self.records))
        Logger.debug(f"Debug log written to {self.path} ({len(self.records)} records)")
