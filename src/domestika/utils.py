import re
from urllib.parse import urlparse

INVALID_FILENAME_CHARS = re.compile(r'[/\\?%*:|"<>]')


def sanitize_filename(name: str) -> str:
    """
    Replace characters that are invalid in file names with a hyphen and strip
    surrounding whitespace. Periods are kept, except that a bare ``.`` or
    ``..`` becomes a hyphen so it never names the current or parent directory.

    :param name(str): the raw title
    :return str: a title usable as a file or directory name

    Example
    -------
    >>> sanitize_filename("  Intro: Part 1/2 ")
    "Intro- Part 1-2"
    """
    result = INVALID_FILENAME_CHARS.sub("-", name or "").strip()
    return "-" if result in (".", "..") else result


def last_path_segment(url: str) -> str:
    """
    >>> last_path_segment("https://www.domestika.org/en/courses/12-x/units/34-intro")
    "34-intro"
    """
    path = urlparse(url).path.rstrip("/")
    return path.rsplit("/", 1)[-1] if path else ""


def course_page_url(link: str) -> str:
    """The unit listing of a course lives under ``<course link>/course``."""
    return f"{link.rstrip('/')}/course"
