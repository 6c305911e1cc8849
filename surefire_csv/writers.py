"""CSV output writers: one CSV per report, or all reports in one CSV."""

import csv
import logging
from enum import Enum
from pathlib import Path
from typing import Optional, TextIO, Union

from .errors import WriteError
from .junit_parser import SurefireParser
from .records import csv_filename, header, records

logger = logging.getLogger(__name__)

CONCAT_FILENAME = "surefire.csv"


def _csv_writer(stream: TextIO):
    return csv.writer(stream, lineterminator="\n")


class WriterState(Enum):
    """Lifecycle of the concatenated output file."""
    UNINITIALIZED = "uninitialized"
    OPEN = "open"
    FAILED = "failed"
    CLOSED = "closed"


class _BaseWriter:
    def __init__(self, dest: Union[str, Path], parser: Optional[SurefireParser] = None):
        self.dest = Path(dest)
        self.parser = parser or SurefireParser()

    def convert(self, source: Union[str, Path]) -> int:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class SeparateWriter(_BaseWriter):
    """Writes <dest>/<name>.csv for every <name>.xml report."""

    def __init__(self, dest: Union[str, Path], parser: Optional[SurefireParser] = None):
        super().__init__(dest, parser)
        self._written: dict[str, str] = {}

    def convert(self, source: Union[str, Path]) -> int:
        """Convert one report into its own CSV file.

        The report is parsed before the CSV is created, so a malformed
        report leaves nothing behind.

        Returns:
            Number of data rows written
        """
        rows = records(self.parser.parse_file(source))

        filename = csv_filename(source)
        previous = self._written.get(filename)
        if previous is not None and previous != str(source):
            logger.warning(f"{source} overwrites {filename} written from {previous}")

        target = self.dest / filename
        try:
            with open(target, "w", newline="", encoding="utf-8") as f:
                w = _csv_writer(f)
                w.writerow(header())
                w.writerows(rows)
        except OSError as e:
            raise WriteError(f"cannot write {target}: {e}", path=str(source)) from e

        self._written[filename] = str(source)
        return len(rows)


class ConcatWriter(_BaseWriter):
    """Appends the rows of every report to a single <dest>/surefire.csv.

    The file is opened on the first report that parses. If opening fails
    the writer stays UNINITIALIZED and the next report tries again. A
    failed write leaves the file in an unknown state, so the writer moves
    to FAILED and refuses every later report.
    """

    def __init__(self, dest: Union[str, Path], parser: Optional[SurefireParser] = None):
        super().__init__(dest, parser)
        self.path = self.dest / CONCAT_FILENAME
        self.state = WriterState.UNINITIALIZED
        self._file: Optional[TextIO] = None
        self._csv = None

    def _open(self, source) -> None:
        try:
            self._file = open(self.path, "w", newline="", encoding="utf-8")
        except OSError as e:
            raise WriteError(f"cannot create {self.path}: {e}", path=str(source)) from e
        self._csv = _csv_writer(self._file)
        self.state = WriterState.OPEN
        logger.debug(f"Opened {self.path}")
        self._write([header()], source)

    def _write(self, rows: list[list[str]], source) -> None:
        try:
            self._csv.writerows(rows)
            self._file.flush()
        except OSError as e:
            self.state = WriterState.FAILED
            raise WriteError(f"cannot write {self.path}: {e}", path=str(source)) from e

    def convert(self, source: Union[str, Path]) -> int:
        """Append the rows of one report.

        Returns:
            Number of data rows written
        """
        if self.state is WriterState.CLOSED:
            raise WriteError(f"{self.path} is already closed", path=str(source))
        if self.state is WriterState.FAILED:
            raise WriteError(f"{self.path} is unusable after an earlier write failure",
                             path=str(source))

        rows = records(self.parser.parse_file(source))

        if self.state is WriterState.UNINITIALIZED:
            self._open(source)
        self._write(rows, source)
        return len(rows)

    def close(self) -> None:
        if self.state is WriterState.CLOSED:
            return
        previous = self.state
        self.state = WriterState.CLOSED
        if self._file is None:
            return
        f, self._file, self._csv = self._file, None, None
        try:
            f.close()
        except OSError as e:
            if previous is WriterState.FAILED:
                logger.debug(f"Ignoring close error on failed {self.path}: {e}")
                return
            raise WriteError(f"cannot close: {e}", path=str(self.path)) from e
        logger.debug(f"Closed {self.path}")


def new_writer(dest: Union[str, Path], concat: bool = False,
               parser: Optional[SurefireParser] = None) -> _BaseWriter:
    """Pick the output writer for a run."""
    if concat:
        return ConcatWriter(dest, parser)
    return SeparateWriter(dest, parser)
