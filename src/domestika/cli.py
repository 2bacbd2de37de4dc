import asyncio
from pathlib import Path

import typer
from rich import box, print
from rich.table import Table
from typing_extensions import Annotated

from domestika import AsyncDomestika, Config
from domestika.config import OSVariant, Strategy
from domestika.constants import COOKIES_FILE, DOWNLOAD_ROOT
from domestika.errors import ConfigError, NavigationError, TraversalCancelled
from domestika.logger import Logger

app = typer.Typer(rich_markup_mode="rich")

CookiesOption = Annotated[
    Path,
    typer.Option(
        "--cookies",
        "-c",
        help="JSON file with the exported browser cookies.",
        show_default=True,
    ),
]
HeadlessOption = Annotated[
    bool,
    typer.Option(
        "--headless/--no-headless",
        help="Hide the browser window.",
        show_default=True,
    ),
]
DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        "-d",
        help="Show downloader output and tracebacks, and write debug_log.json.",
        show_default=True,
    ),
]


@app.command()
def download(
    url: Annotated[
        str,
        typer.Argument(
            help="The URL of the course list to download",
            show_default=False,
        ),
    ],
    cookies: CookiesOption = COOKIES_FILE,
    subtitle_lang: Annotated[
        str,
        typer.Option(
            "--subtitle-lang",
            "-s",
            help="Subtitle language downloaded along with English.",
            show_default=True,
        ),
    ] = "it",
    os_variant: Annotated[
        OSVariant,
        typer.Option(
            "--os",
            help="mac uses yt-dlp, win uses N_m3u8DL-RE.",
            show_default=True,
        ),
    ] = OSVariant.MAC,
    strategy: Annotated[
        Strategy,
        typer.Option(
            "--strategy",
            help="Scrape courses one after another or in parallel browser sessions.",
            show_default=True,
        ),
    ] = Strategy.SEQUENTIAL,
    max_parallel: Annotated[
        int,
        typer.Option(
            "--max-parallel",
            "-p",
            help="Maximum courses scraped at the same time (parallel strategy).",
            show_default=True,
        ),
    ] = 3,
    max_downloads: Annotated[
        int,
        typer.Option(
            "--max-downloads",
            "-j",
            help="Maximum downloader processes per course.",
            show_default=True,
        ),
    ] = 1,
    output: Annotated[
        Path,
        typer.Option(
            "--output",
            "-o",
            help="Root directory of the downloaded courses.",
            show_default=True,
        ),
    ] = DOWNLOAD_ROOT,
    headless: HeadlessOption = True,
    debug: DebugOption = False,
    strict_session: Annotated[
        bool,
        typer.Option(
            "--strict-session",
            help="Fail when the cookies file has no session value.",
            show_default=True,
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Scrape the catalogue without downloading anything.",
            show_default=True,
        ),
    ] = False,
    include_final_projects: Annotated[
        bool,
        typer.Option(
            "--include-final-projects",
            help="Also visit final project units.",
            show_default=True,
        ),
    ] = False,
):
    """
    Download every course of a Domestika course list.

    Usage:
        domestika download <url>
        domestika download <url> --os win --subtitle-lang es
        domestika download <url> --strategy parallel --max-parallel 4

    Example:
        domestika download https://www.domestika.org/en/user/courses_lists/123-favourites
    """
    config = Config(
        catalogue_url=url,
        subtitle_lang=subtitle_lang,
        os_variant=os_variant,
        debug=debug,
        strategy=strategy,
        max_parallel=max_parallel,
        max_downloads=max_downloads,
        output_root=output,
        cookies_path=cookies,
        headless=headless,
        strict_session=strict_session,
        dry_run=dry_run,
        include_final_projects=include_final_projects,
    )
    _run(_download(config))


@app.command()
def courses(
    url: Annotated[
        str,
        typer.Argument(
            help="The URL of the course list",
            show_default=False,
        ),
    ],
    cookies: CookiesOption = COOKIES_FILE,
    headless: HeadlessOption = True,
    debug: DebugOption = False,
):
    """
    List the courses of a Domestika course list.

    Usage:
        domestika courses <url>
    """
    config = Config(catalogue_url=url, cookies_path=cookies, headless=headless, debug=debug, dry_run=True)
    _run(_courses(config))


def _run(coro):
    try:
        asyncio.run(coro)
    except ConfigError as e:
        Logger.error(str(e))
        raise typer.Exit(code=1)
    except NavigationError as e:
        Logger.error(str(e), exception=e)
        raise typer.Exit(code=1)
    except (TraversalCancelled, KeyboardInterrupt):
        Logger.warning("Run cancelled")
        raise typer.Exit(code=130)


async def _download(config: Config):
    async with AsyncDomestika(config) as domestika:
        await domestika.download()


async def _courses(config: Config):
    async with AsyncDomestika(config) as domestika:
        refs = await domestika.list_courses()

    table = Table(title="Courses", title_style="green", header_style="green", box=box.SQUARE_DOUBLE_HEAD)
    table.add_column("#", justify="right", style="green")
    table.add_column("Title", style="green")
    table.add_column("Link")
    for idx, ref in enumerate(refs, 1):
        table.add_row(str(idx), ref.title, ref.link)
    print(table)


if __name__ == "__main__":
    app()
