from pathlib import Path

DOMESTIKA_DOMAIN = "www.domestika.org"
SESSION_COOKIE_NAME = "_domestika_session"

COOKIES_FILE = Path("cookies.json")
DOWNLOAD_ROOT = Path("domestika_courses")
DEBUG_LOG_FILE = Path("debug_log.json")

# requests of these types are aborted before they reach the network
BLOCKED_RESOURCE_TYPES = frozenset({"stylesheet", "font", "image"})

EMBEDDED_DATA_EXPRESSION = "() => window.__INITIAL_PROPS__"

COURSE_CARD_SELECTOR = "h3.o-course-card__title a"
UNIT_ITEM_SELECTOR = "h4.h2.unit-item__title a"
SECTION_TITLE_SELECTORS = [
    "h2.h3.course-header-new__subtitle",
    ".course-header-new__subtitle",
    "h1",
]

FINAL_PROJECT_PATTERN = r"-[^?#]*final_project"

YT_DLP = "yt-dlp"
N_M3U8DL_RE = "N_m3u8DL-RE"
