from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.problem import DataQualityProblem

"""Data-quality problem log.

- JSON Lines with a fixed key set (see DataQualityProblem and the bundled
  problem_log_schema.json)
- one ``logs/problems-YYYYMMDD-HHMMSS.log`` (UTC) per run, created on the
  first flush
- records are buffered in memory and appended on flush
"""

__all__ = [
    "DataQualityProblem",
    "ProblemLogBuffer",
    "SCHEMA_PATH",
]

SCHEMA_PATH = Path(__file__).with_name("problem_log_schema.json")
LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ProblemLogBuffer:
    """In-memory buffer for problems. Flush writes JSON Lines.

    Single-threaded use only (runs are sequential).
    """

    def __init__(self, logs_dir: Path = LOGS_DIR) -> None:
        self._records: list[DataQualityProblem] = []
        self._logs_dir = logs_dir
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"problems-{stamp}.log"
        return self._file_path

    def append(self, problem: DataQualityProblem) -> None:
        self._records.append(problem)

    def extend(self, problems: list[DataQualityProblem]) -> None:
        self._records.extend(problems)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path:
        """Append buffered problems to the log file as JSON lines.

        The file is only written when at least one problem is buffered.

        Returns:
            Path of the log file (created lazily)
        """
        fp = self.file_path
        if not self._records:
            return fp
        with fp.open("a", encoding="utf-8") as f:
            for problem in self._records:
                f.write(problem.to_json_line() + "\n")
        self._records.clear()
        return fp
