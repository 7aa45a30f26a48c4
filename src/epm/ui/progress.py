"""terminal progress display for registry downloads."""

import sys
from contextlib import contextmanager
from typing import Optional
from rich.console import Console
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    DownloadColumn,
    TransferSpeedColumn,
    TaskID,
)


class ProgressManager:
    """shows spinners and download bars when attached to a terminal, stays quiet otherwise."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self._enabled = self._should_show_progress()

    def _should_show_progress(self) -> bool:
        # no bars when piped or running under ci
        return sys.stdout.isatty() and not sys.stdout.closed

    @contextmanager
    def spinner(self, description: str, transient: bool = True):
        """
        show a spinner while a registry request is pending.

        yields:
            task id of the spinner, or None when progress is disabled
        """
        if not self._enabled:
            yield None
            return

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            transient=transient,
        ) as progress:
            yield progress.add_task(description, total=None)

    @contextmanager
    def download_progress(self):
        """
        show archive download progress.

        yields:
            a Progress, or a no-op stand-in when progress is disabled
        """
        if not self._enabled:
            yield _DummyProgress()
            return

        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            yield progress


class _DummyProgress:
    """stand-in used when output is not a terminal."""

    def add_task(self, description: str, total: Optional[int] = None, **kwargs) -> TaskID:
        return TaskID(0)

    def update(self, task_id: TaskID, **kwargs):
        pass
