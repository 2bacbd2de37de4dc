class DomestikaError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(DomestikaError):
    """Bad or missing configuration (cookie file, options). Aborts the run."""


class NavigationError(DomestikaError):
    """A page could not be loaded. Skips the current course only."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Could not load {url}: {reason}")
        self.url = url
        self.reason = reason


class DownloadError(DomestikaError):
    """The external downloader failed for a single video."""


class TraversalCancelled(DomestikaError):
    """The run was cancelled at a navigation boundary."""
