import asyncio
from contextlib import asynccontextmanager

import pytest

BASE = "https://www.domestika.org/en/courses"


def list_page(courses):
    cards = "".join(
        f'<div class="o-course-card"><h3 class="o-course-card__title">'
        f'<a href="{link}">\n  {title}  \n</a></h3></div>'
        for title, link in courses
    )
    return f"<html><body><main>{cards}</main></body></html>"


def course_page(unit_links):
    items = "".join(
        f'<li class="unit-item"><h4 class="h2 unit-item__title"><a href="{link}">{title}</a></h4></li>'
        for title, link in unit_links
    )
    return f"<html><body><ul>{items}</ul></body></html>"


def unit_page(section):
    return (
        '<html><body><header><h2 class="h3 course-header-new__subtitle">'
        f"{section}</h2></header></body></html>"
    )


def embedded(*titles):
    return {
        "videos": [
            {"video": {"playbackURL": f"https://cdn.example.com/{i}.m3u8", "title": title}}
            for i, title in enumerate(titles)
        ]
    }


class FakePage:
    """Serves canned html and embedded data per url."""

    def __init__(self, site, delays=None):
        self.site = site
        self.delays = delays or {}
        self.visited = []
        self._current = None

    async def navigate(self, url):
        self.visited.append(url)
        await asyncio.sleep(self.delays.get(url, 0))
        entry = self.site[url]
        if isinstance(entry, Exception):
            raise entry
        self._current = entry
        return entry[0]

    async def embedded_data(self):
        return self._current[1] if self._current else None


class FakeBrowser:
    def __init__(self, site, delays=None):
        self.site = site
        self.delays = delays
        self.pages = []

    @asynccontextmanager
    async def open_page(self):
        page = FakePage(self.site, self.delays)
        self.pages.append(page)
        yield page


def build_catalogue(n_courses, units_per_course=2, videos_per_unit=2):
    """A site with ``n_courses`` courses; returns (site, list url, course links)."""
    list_url = "https://www.domestika.org/en/user/courses_lists/1-favourites"
    links = [f"{BASE}/{i}-course-{i}" for i in range(1, n_courses + 1)]
    site = {list_url: (list_page([(f"Course {i}", link) for i, link in enumerate(links, 1)]), None)}

    for i, link in enumerate(links, 1):
        units = [(f"Unit {u}", f"{link}/units/{i}{u}-unit-{u}") for u in range(1, units_per_course + 1)]
        site[f"{link}/course"] = (course_page(units), None)
        for title, unit_link in units:
            site[unit_link] = (
                unit_page(f"Section of {title}"),
                embedded(*[f"{title} video {v}" for v in range(videos_per_unit)]),
            )

    return site, list_url, links


@pytest.fixture
def catalogue():
    return build_catalogue
