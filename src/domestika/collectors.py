import re
from typing import Any

from bs4 import BeautifulSoup

from .constants import (
    COURSE_CARD_SELECTOR,
    FINAL_PROJECT_PATTERN,
    SECTION_TITLE_SELECTORS,
    UNIT_ITEM_SELECTOR,
)
from .models import CourseRef, EmbeddedData, UnitRef, VideoDescriptor
from .utils import sanitize_filename


def _soup(content: str) -> BeautifulSoup:
    return BeautifulSoup(content or "", "html.parser")


def _href(anchor) -> str:
    href = anchor.get("href")
    return href if isinstance(href, str) else ""


def is_final_project(link: str) -> bool:
    return re.search(FINAL_PROJECT_PATTERN, link) is not None


def extract_course_refs(content: str) -> list[CourseRef]:
    """Course title/link pairs from the course cards of a list page, in document order."""
    soup = _soup(content)
    return [
        CourseRef(title=anchor.get_text().strip(), link=_href(anchor))
        for anchor in soup.select(COURSE_CARD_SELECTOR)
    ]


def extract_unit_refs(content: str, exclude_final_project: bool = True) -> list[UnitRef]:
    """Unit links of a course page. Final project units are dropped unless asked for."""
    soup = _soup(content)
    units: list[UnitRef] = []

    for anchor in soup.select(UNIT_ITEM_SELECTOR):
        link = _href(anchor)
        if exclude_final_project and is_final_project(link):
            continue
        units.append(UnitRef(link=link, title=anchor.get_text().strip()))

    return units


def extract_section_title(content: str) -> str:
    soup = _soup(content)
    for selector in SECTION_TITLE_SELECTORS:
        heading = soup.select_one(selector)
        if heading is None:
            continue
        title = sanitize_filename(heading.get_text())
        if title:
            return title
    return ""


def extract_video_descriptors(content: str, embedded: Any) -> list[VideoDescriptor]:
    """
    Build the video descriptors of a unit page.

    :param content(str): rendered html of the unit page
    :param embedded: the raw ``__INITIAL_PROPS__`` payload, or an already parsed EmbeddedData
    :return list[VideoDescriptor]: one per playable video, in page order; empty when
        the page exposes no videos
    """
    data = embedded if isinstance(embedded, EmbeddedData) else EmbeddedData.parse(embedded)
    if not data.videos:
        return []

    section = extract_section_title(content)
    return [
        VideoDescriptor(
            playback_url=video.playback_url,
            title=sanitize_filename(video.title),
            section=section,
        )
        for video in data.videos
    ]
