"""Progress logs receiving structured reports from a sync.

A sync only reports to its progress log when listing the repository tree
fails, passing the ``report`` attached to the error.
"""

import logging
from typing import Any, Optional, Protocol

from rich.console import Console
from rich.panel import Panel
from rich.table import Table


class ProgressLog(Protocol):
    """Anything with a ``log(entry)`` method."""

    def log(self, entry: Any) -> None: ...


class LoggingProgressLog:
    """Forwards report entries to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("pybitsync.progress")

    def log(self, entry: Any) -> None:
        self.logger.warning("Sync report: %s", entry)


class RichProgressLog:
    """Rich-based display of sync reports.

    Each entry is kept in ``entries`` and rendered on the console; mapping
    entries are shown as a key/value table.
    """

    def __init__(self, console: Optional[Console] = None):
        """Initialize the progress log.

        Args:
            console: Console to render on (defaults to stderr)
        """
        self.console = console or Console(stderr=True)
        self.entries: list[Any] = []

    def _render(self, entry: Any) -> Any:
        if not isinstance(entry, dict):
            return str(entry)

        table = Table(show_header=False, box=None)
        table.add_column(style="bold")
        table.add_column()
        for key, value in entry.items():
            if value is not None:
                table.add_row(str(key), str(value))
        return table

    def log(self, entry: Any) -> None:
        self.entries.append(entry)
        self.console.print(
            Panel(self._render(entry), title="Sync report", border_style="red")
        )
