import sys

from rich import print
from rich.console import Console
from rich.traceback import Traceback


class Logger:
    show_warnings = True
    debug_mode = False
    console = Console()

    @classmethod
    def error(cls, text, exception=None):
        """Log an error. In debug mode the exception traceback is printed as well."""
        cls.print(text, "ERROR:", "red")

        if cls.debug_mode and exception is not None:
            cls.debug_exception(exception)

    @classmethod
    def warning(cls, text):
        if cls.show_warnings:
            cls.print(text, "WARNING:", "yellow")

    @classmethod
    def info(cls, text):
        cls.print(text, "INFO:", "green")

    @classmethod
    def debug(cls, text):
        """Log a debug message (only shown when debug_mode is enabled)."""
        if cls.debug_mode:
            cls.print(text, "DEBUG:", "blue")

    @classmethod
    def print(cls, text, head, color="green", end="\n"):
        sys.stdout.write("\r" + " " * 100 + "\r")
        print(f"[{color}]{head} {text}[/{color}]", end=end, flush=True)

    @classmethod
    def debug_exception(cls, exception):
        if not cls.debug_mode:
            return

        print(f"\n[yellow]Exception Type:[/yellow] [red]{type(exception).__name__}[/red]")
        print(f"[yellow]Exception Message:[/yellow] [red]{exception}[/red]\n")
        cls.console.print(
            Traceback.from_exception(
                type(exception),
                exception,
                exception.__traceback__,
                show_locals=False,
            )
        )

    @classmethod
    def set_debug_mode(cls, enabled: bool):
        cls.debug_mode = enabled
        if enabled:
            cls.info("🐛 Debug mode ENABLED - subprocess output and tracebacks will be shown")
