from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm

"""Progress display with tqdm (TTY only).

In non-TTY environments (CI, pipes) the bar is disabled so that log output
is not interleaved with ANSI control sequences.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Check whether the progress bar should be shown.

    Returns:
        True if stdout is a TTY, False otherwise (CI, pipes, redirected output)
    """
    return sys.stdout.isatty()


class ProgressTracker:
    """File-level progress bar for a command-line run.

    Disabled outside a TTY; every method is then a no-op, so callers never
    need to check ``enabled`` themselves.
    """

    def __init__(self, total_files: int, *, description: str = "Classificando planilhas") -> None:
        """Initialize the tracker.

        Args:
            total_files: Number of input files in the run
            description: Base label of the progress bar
        """
        self.total_files = total_files
        self.description = description
        self.current_file = 0
        self.enabled = is_tty_enabled()
        self.pbar: Any | None = None
        if self.enabled:
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="file",
                leave=True,
                ncols=80,
                ascii=True,
            )

    def start_file(self, file_path: Path) -> None:
        """Mark the start of a file and show its name next to the label.

        Args:
            file_path: Spreadsheet about to be read
        """
        self.current_file += 1
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({file_path.name})")

    def finish_file(self, **stats: Any) -> None:
        """Advance the bar by one file and restore the base label.

        Args:
            **stats: Per-file counters (employees, problems) shown as postfix
        """
        if self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_description(self.description)
            if stats:
                self.pbar.set_postfix(**stats)

    def close(self) -> None:
        """Close the progress bar; safe to call more than once."""
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
