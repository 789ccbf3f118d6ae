"""Colourised progress output."""

from rich.console import Console


class Reporter:
    """Prints status lines to a rich console.

    Messages are printed verbatim: rich markup and wrapping are disabled so
    bracketed text and long file paths come through unchanged. A quiet
    reporter prints nothing.
    """

    def __init__(self, console: Console | None = None, quiet: bool = False):
        self.console = console or Console()
        self.quiet = quiet

    def _print(self, message: str, style: str) -> None:
        if self.quiet:
            return
        self.console.print(message, style=style, markup=False, highlight=False, soft_wrap=True)

    def info(self, message: str) -> None:
        self._print(message, "white")

    def warn(self, message: str) -> None:
        self._print(message, "yellow")

    def success(self, message: str) -> None:
        self._print(message, "green")

    def failure(self, message: str) -> None:
        self._print(message, "red")
