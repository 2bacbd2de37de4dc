import importlib

from rich.table import Table
from typer.testing import CliRunner

from domestika.cli import app
from domestika.progress_tracker import DownloadStatus, ProgressTracker

runner = CliRunner()


def test_import_package():
    """Basic smoke test: package imports and version present."""
    m = importlib.import_module("domestika")
    assert hasattr(m, "__version__")
    assert isinstance(m.__version__, str)


def test_report_lists_every_course():
    progress = ProgressTracker()
    progress.start_course("https://www.domestika.org/en/courses/1-a", "A")
    progress.complete_course("https://www.domestika.org/en/courses/1-a", units=2, videos=5)
    progress.start_course("https://www.domestika.org/en/courses/2-b", "B")
    progress.fail_course("https://www.domestika.org/en/courses/2-b", "HTTP 500")

    table = progress.generate_report()

    assert isinstance(table, Table)
    assert table.row_count == 2
    assert progress.count(DownloadStatus.COMPLETED) == 1
    assert progress.count(DownloadStatus.FAILED) == 1


def test_courses_with_the_same_title_are_tracked_apart():
    progress = ProgressTracker()
    progress.start_course("https://www.domestika.org/en/courses/1-intro", "Intro")
    progress.start_course("https://www.domestika.org/en/courses/2-intro", "Intro")
    progress.complete_course("https://www.domestika.org/en/courses/1-intro", units=1, videos=1)
    progress.fail_course("https://www.domestika.org/en/courses/2-intro", "HTTP 500")

    assert len(progress.courses) == 2
    assert progress.count(DownloadStatus.COMPLETED) == 1
    assert progress.count(DownloadStatus.FAILED) == 1
    assert progress.generate_report().row_count == 2


def test_cli_missing_cookies_exits_with_error(tmp_path):
    result = runner.invoke(
        app,
        ["download", "https://www.domestika.org/en/user/courses_lists/1-x", "--cookies", str(tmp_path / "none.json")],
    )

    assert result.exit_code == 1


def test_cli_rejects_unknown_os():
    result = runner.invoke(app, ["download", "https://www.domestika.org/x", "--os", "linux"])

    assert result.exit_code != 0
