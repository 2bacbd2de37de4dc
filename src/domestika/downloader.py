"""
Hands finished course bundles to the external downloaders (yt-dlp or N_m3u8DL-RE).
"""

import asyncio
import functools
import shutil
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from .config import Config, OSVariant
from .constants import N_M3U8DL_RE, YT_DLP
from .errors import DownloadError
from .logger import Logger
from .models import CourseBundle, DownloadJob
from .progress_tracker import DebugLog, ProgressTracker


def binary_required(func):
    """Decorator to check that the downloader binary of the job is installed."""
    @functools.wraps(func)
    async def wrapper(self, job, *args, **kwargs):
        binary = self.binary
        if not shutil.which(binary):
            raise DownloadError(f"{binary} is required but not found in PATH")
        return await func(self, job, *args, **kwargs)
    return wrapper


class Downloader:
    def __init__(
        self,
        config: Config,
        progress: Optional[ProgressTracker] = None,
        debug_log: Optional[DebugLog] = None,
    ):
        self.config = config
        self.progress = progress or ProgressTracker()
        self.debug_log = debug_log or DebugLog(config.debug_log_path, enabled=config.debug)

    @property
    def binary(self) -> str:
        return N_M3U8DL_RE if self.config.os_variant == OSVariant.WIN else YT_DLP

    def build_commands(self, job: DownloadJob, directory: Path) -> list[list[str]]:
        url = job.video.playback_url
        name = job.output_name

        if self.config.os_variant == OSVariant.WIN:
            return [
                [
                    N_M3U8DL_RE, url,
                    "--save-dir", str(directory),
                    "--save-name", name,
                    "--select-video", "best",
                    "--select-audio", "best",
                    "--drop-subtitle", ".*",
                ],
                [
                    N_M3U8DL_RE, url,
                    "--save-dir", str(directory),
                    "--save-name", name,
                    "--sub-only",
                    "--select-subtitle", f"lang=en|{self.config.subtitle_lang}:for=all",
                    "--sub-format", "SRT",
                    "--auto-subtitle-fix",
                ],
            ]

        return [
            [
                YT_DLP,
                "--output", name,
                "--paths", str(directory),
                "--sub-langs", f"en,{self.config.subtitle_lang}",
                "--embed-subs",
                url,
            ]
        ]

    async def _run(self, cmd: list[str]) -> None:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()

        if stdout:
            Logger.debug(stdout.decode(errors="replace").strip())

        if process.returncode != 0:
            error_msg = stderr.decode(errors="replace").strip() if stderr else "Unknown error"
            Logger.debug(f"{cmd[0]} return code: {process.returncode}")
            raise DownloadError(f"{cmd[0]} exited with {process.returncode}: {error_msg[:500]}")

    @binary_required
    async def download(self, job: DownloadJob) -> Path:
        """
        Download a single video into ``<root>/<course>/<section>/<unit>/``.

        :param job(DownloadJob): the video and where it belongs
        :return Path: the output directory
        :raises DownloadError: if the downloader is missing or exits with an error
        """
        directory = job.directory(self.config.output_root)
        directory.mkdir(parents=True, exist_ok=True)

        for cmd in self.build_commands(job, directory):
            await self._run(cmd)

        return directory

    async def download_bundle(self, bundle: CourseBundle) -> None:
        """Download every video of a course. Failures are logged per video."""
        jobs = list(bundle.jobs())
        semaphore = asyncio.Semaphore(self.config.max_downloads)
        bar_format = "{desc} |{bar}| {n_fmt}/{total_fmt}"

        with tqdm(desc=bundle.course_title[:40], colour="green", bar_format=bar_format, ascii="░█", total=len(jobs)) as progress_bar:

            async def worker(job: DownloadJob):
                output = str(job.directory(self.config.output_root) / job.output_name)
                async with semaphore:
                    Logger.info(f"Downloading {job.output_name}")
                    try:
                        await self.download(job)
                    except (DownloadError, OSError) as e:
                        Logger.error(f"Error downloading video: {job.video.title} | {e}", exception=e)
                        self.progress.video_failed(bundle.course.link, output, str(e))
                    else:
                        self.progress.video_downloaded(bundle.course.link)
                    finally:
                        self.debug_log.record(job.video.playback_url, output)
                        progress_bar.update(1)

            await asyncio.gather(*(worker(job) for job in jobs))

        await self.debug_log.flush()
        Logger.info(f"Course downloaded: {bundle.course_title}")
