"""
Walks a catalogue three levels deep: list page -> course pages -> unit pages.
"""
import asyncio
from typing import Any, AsyncContextManager, Awaitable, Callable, Optional, Protocol

from .collectors import extract_course_refs, extract_unit_refs, extract_video_descriptors
from .config import Config, Strategy
from .errors import TraversalCancelled
from .logger import Logger
from .models import CourseBundle, CourseRef, UnitBundle
from .progress_tracker import ProgressTracker
from .utils import course_page_url


class PageLike(Protocol):
    async def navigate(self, url: str) -> str: ...

    async def embedded_data(self) -> Any: ...


PageOpener = Callable[[], AsyncContextManager[PageLike]]
BundleCallback = Callable[[CourseBundle], Awaitable[None]]


class Orchestrator:
    def __init__(
        self,
        config: Config,
        opener: PageOpener,
        on_bundle: Optional[BundleCallback] = None,
        progress: Optional[ProgressTracker] = None,
    ):
        self.config = config
        self.opener = opener
        self.on_bundle = on_bundle
        self.progress = progress or ProgressTracker()
        self.cancelled = asyncio.Event()

    def cancel(self):
        """Stop the run at the next navigation boundary."""
        self.cancelled.set()

    def _check_cancelled(self, where: str):
        if self.cancelled.is_set():
            raise TraversalCancelled(f"Cancelled before {where}")

    async def collect_catalogue(self, page: PageLike) -> list[CourseRef]:
        self._check_cancelled(self.config.catalogue_url)
        content = await page.navigate(self.config.catalogue_url)
        courses = extract_course_refs(content)
        Logger.info(f"{len(courses)} Courses Detected")
        return courses

    async def collect_course(self, course: CourseRef, page: PageLike) -> CourseBundle:
        """Visit every unit of ``course`` in order and gather its videos."""
        url = course_page_url(course.link)
        self._check_cancelled(url)
        content = await page.navigate(url)

        units = extract_unit_refs(content, exclude_final_project=not self.config.include_final_projects)
        Logger.info(f"{course.title}: {len(units)} Units Detected")

        bundle = CourseBundle(course)
        for unit in units:
            self._check_cancelled(unit.link)
            content = await page.navigate(unit.link)
            embedded = await page.embedded_data()
            videos = extract_video_descriptors(content, embedded)
            if not videos:
                Logger.warning(f"No videos found in unit: {unit.display_title}")
            bundle.units.append(UnitBundle(unit, videos))

        Logger.info(f"{course.title}: {bundle.total_videos} Videos Found")
        return bundle

    async def _process_course(self, course: CourseRef, page: PageLike) -> Optional[CourseBundle]:
        self.progress.start_course(course.link, course.title)
        try:
            bundle = await self.collect_course(course, page)
        except TraversalCancelled:
            raise
        except Exception as e:
            # one broken course never stops its siblings
            Logger.error(f"Skipping course '{course.title}': {e}", exception=e)
            self.progress.fail_course(course.link, str(e))
            return None

        self.progress.complete_course(course.link, len(bundle.units), bundle.total_videos)
        if self.on_bundle is not None:
            try:
                await self.on_bundle(bundle)
            except TraversalCancelled:
                raise
            except Exception as e:
                Logger.error(f"Download failed for course '{course.title}': {e}", exception=e)
        return bundle

    async def _run_sequential(self, page: PageLike, courses: list[CourseRef]) -> list[CourseBundle]:
        bundles = []
        for idx, course in enumerate(courses, 1):
            Logger.info(f"Scraping Course {idx}/{len(courses)}: {course.title}")
            bundle = await self._process_course(course, page)
            if bundle is not None:
                bundles.append(bundle)
        return bundles

    async def _run_parallel(self, courses: list[CourseRef]) -> list[CourseBundle]:
        semaphore = asyncio.Semaphore(self.config.max_parallel)

        async def worker(course: CourseRef) -> Optional[CourseBundle]:
            async with semaphore:
                self._check_cancelled(course.link)
                Logger.info(f"Scraping Course: {course.title}")
                try:
                    async with self.opener() as page:
                        return await self._process_course(course, page)
                except TraversalCancelled:
                    raise
                except Exception as e:
                    Logger.error(f"Could not open a browser session for '{course.title}': {e}", exception=e)
                    self.progress.start_course(course.link, course.title)
                    self.progress.fail_course(course.link, str(e))
                    return None

        tasks = [asyncio.create_task(worker(course)) for course in courses]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            # no course task may outlive the run
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return [bundle for bundle in results if bundle is not None]

    async def run(self) -> list[CourseBundle]:
        """
        Traverse the whole catalogue.

        :return list[CourseBundle]: completed bundles in catalogue order; failed
            courses are logged and left out
        :raises NavigationError: if the catalogue page itself cannot be loaded
        :raises TraversalCancelled: if ``cancel()`` was called mid-run
        """
        async with self.opener() as page:
            courses = await self.collect_catalogue(page)
            if self.config.strategy == Strategy.SEQUENTIAL:
                bundles = await self._run_sequential(page, courses)

        if self.config.strategy == Strategy.PARALLEL:
            bundles = await self._run_parallel(courses)

        Logger.info(f"{len(bundles)}/{len(courses)} Courses Scraped")
        return bundles
