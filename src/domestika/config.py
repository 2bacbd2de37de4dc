from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .constants import COOKIES_FILE, DEBUG_LOG_FILE, DOWNLOAD_ROOT
from .errors import ConfigError


class OSVariant(str, Enum):
    MAC = "mac"
    WIN = "win"


class Strategy(str, Enum):
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"


@dataclass
class Config:
    catalogue_url: str
    subtitle_lang: str = "it"
    os_variant: OSVariant = OSVariant.MAC
    debug: bool = False
    strategy: Strategy = Strategy.SEQUENTIAL
    max_parallel: int = 3
    max_downloads: int = 1
    output_root: Path = DOWNLOAD_ROOT
    cookies_path: Path = COOKIES_FILE
    debug_log_path: Path = DEBUG_LOG_FILE
    headless: bool = True
    strict_session: bool = False
    dry_run: bool = False
    include_final_projects: bool = False

    def __post_init__(self):
        self.output_root = Path(self.output_root)
        self.cookies_path = Path(self.cookies_path)
        self.debug_log_path = Path(self.debug_log_path)

    def validate(self) -> "Config":
        """
        Normalize enum fields given as plain strings and check the bounds.

        :raises ConfigError: if any option is out of range
        """
        try:
            self.os_variant = OSVariant(self.os_variant)
        except ValueError:
            raise ConfigError(f"Unknown OS variant: {self.os_variant!r} (expected mac or win)")

        try:
            self.strategy = Strategy(self.strategy)
        except ValueError:
            raise ConfigError(f"Unknown strategy: {self.strategy!r} (expected sequential or parallel)")

        if not self.catalogue_url or not self.catalogue_url.startswith(("http://", "https://")):
            raise ConfigError(f"Invalid catalogue url: {self.catalogue_url!r}")

        if self.max_parallel < 1 or self.max_downloads < 1:
            raise ConfigError("max_parallel and max_downloads must be at least 1")

        if not self.subtitle_lang:
            raise ConfigError("subtitle_lang must not be empty")

        return self
