from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

from .constants import DOMESTIKA_DOMAIN
from .utils import last_path_segment, sanitize_filename


@dataclass
class SessionCredential:
    name: str
    value: str = ""
    domain: str = DOMESTIKA_DOMAIN
    path: str = "/"
    secure: bool = True
    http_only: bool = False
    expires: float = -1

    @property
    def is_empty(self) -> bool:
        return not self.value

    def as_cookie(self) -> dict:
        """Cookie dict in the shape ``BrowserContext.add_cookies`` expects."""
        return {
            "name": self.name,
            "value": self.value,
            "domain": self.domain,
            "path": self.path,
            "expires": self.expires,
            "httpOnly": self.http_only,
            "secure": self.secure,
        }


@dataclass(frozen=True)
class CourseRef:
    title: str
    link: str


@dataclass(frozen=True)
class UnitRef:
    link: str
    title: str = ""

    @property
    def display_title(self) -> str:
        return self.title or last_path_segment(self.link)


@dataclass(frozen=True)
class VideoDescriptor:
    playback_url: str
    title: str
    section: str


@dataclass(frozen=True)
class EmbeddedVideo:
    playback_url: str
    title: str = ""


@dataclass
class EmbeddedData:
    """Typed view of the object the unit page scripts expose as ``__INITIAL_PROPS__``."""

    videos: list[EmbeddedVideo] = field(default_factory=list)

    @classmethod
    def parse(cls, payload: Any) -> "EmbeddedData":
        if not isinstance(payload, dict):
            return cls()

        entries = payload.get("videos")
        if not isinstance(entries, list):
            return cls()

        videos = []
        for entry in entries:
            video = entry.get("video") if isinstance(entry, dict) else None
            if not isinstance(video, dict):
                continue
            url = video.get("playbackURL")
            if not isinstance(url, str) or not url:
                continue
            title = video.get("title")
            videos.append(EmbeddedVideo(url, title if isinstance(title, str) else ""))

        return cls(videos)


@dataclass
class DownloadJob:
    video: VideoDescriptor
    course_title: str
    unit_title: str
    index: int

    @property
    def output_name(self) -> str:
        return f"{self.index}_{self.video.title}"

    def directory(self, root: Path) -> Path:
        return Path(root) / self.course_title / self.video.section / self.unit_title


@dataclass
class UnitBundle:
    unit: UnitRef
    videos: list[VideoDescriptor] = field(default_factory=list)

    @property
    def title(self) -> str:
        return sanitize_filename(self.unit.display_title)


@dataclass
class CourseBundle:
    course: CourseRef
    units: list[UnitBundle] = field(default_factory=list)

    @property
    def course_title(self) -> str:
        return sanitize_filename(self.course.title)

    @property
    def total_videos(self) -> int:
        return sum(len(unit.videos) for unit in self.units)

    def jobs(self) -> Iterator[DownloadJob]:
        for unit in self.units:
            for index, video in enumerate(unit.videos):
                yield DownloadJob(video, self.course_title, unit.title, index)
