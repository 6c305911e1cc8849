"""Converts a tree of Surefire reports into CSV files."""

import logging
import os
import stat
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, TextIO, Union

from .errors import (
    ConfigurationError,
    ConversionError,
    EntryUnreadableError,
    RootUnreadableError,
    WriteError,
)
from .junit_parser import SurefireParser
from .writers import new_writer

logger = logging.getLogger(__name__)

REPORT_EXTENSION = ".xml"
DEST_MODE = 0o750
TRUTHY = {"1", "true", "yes", "on"}


def load_config() -> dict:
    """Load config from environment variables and .env file.

    Environment variables take precedence over .env file values.
    """
    paths = [
        os.environ.get('SUREFIRE_TO_CSV_CONFIG'),
        Path.cwd() / '.env',
    ]
    config = {}
    for p in paths:
        if p and Path(p).is_file():
            try:
                for line in Path(p).read_text().splitlines():
                    line = line.strip()
                    if line and not line.startswith('#') and '=' in line:
                        key, value = line.split('=', 1)
                        config[key.strip()] = value.strip()
                break
            except OSError as e:
                logger.warning(f"Ignoring unreadable config file {p}: {e}")

    for key in ['SUREFIRE_CONCAT', 'SUREFIRE_DEBUG']:
        env_value = os.environ.get(key)
        if env_value is not None:
            config[key] = env_value

    return config


def config_flag(config: dict, key: str) -> bool:
    return config.get(key, '').strip().lower() in TRUTHY


def prepare_destination(dest: Union[str, Path]) -> Path:
    """Make sure dest is a directory, creating it (but not its parents) if missing.

    Raises:
        ConfigurationError: If dest exists and is not a directory, or cannot be created
    """
    dest = Path(dest)
    try:
        st = dest.stat()
    except FileNotFoundError:
        try:
            os.mkdir(dest, DEST_MODE)
        except OSError as e:
            raise ConfigurationError(f"cannot create dest directory \"{dest}\": {e}",
                                     path=str(dest)) from e
        logger.debug(f"Created destination directory {dest}")
        return dest
    except OSError as e:
        raise ConfigurationError(f"cannot access dest \"{dest}\": {e}", path=str(dest)) from e

    if not stat.S_ISDIR(st.st_mode):
        raise ConfigurationError(f"dest path exists but is not a directory \"{dest}\"",
                                 path=str(dest))
    return dest


def is_report(name: str) -> bool:
    dot = name.rfind('.')
    return dot >= 0 and name[dot:].lower() == REPORT_EXTENSION


@dataclass
class ConversionSummary:
    """Per-file outcomes of one run."""
    converted: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)
    rows: int = 0

    @property
    def ok(self) -> bool:
        return not self.failed


class CsvConverter:
    """Walks a source tree and converts every Surefire report found.

    Per-file problems are written to the log stream and the walk goes on.
    Only an unusable destination or an unreadable source root stop a run.
    """

    def __init__(self, source: Union[str, Path], concat: bool = False,
                 log: Optional[TextIO] = None, debug: bool = False,
                 parser: Optional[SurefireParser] = None):
        self.source = Path(source)
        self.concat = concat
        self.log = log if log is not None else sys.stdout
        self.debug = debug
        self.parser = parser or SurefireParser()

    def to(self, dest: Union[str, Path]) -> ConversionSummary:
        """Convert all reports below the source into dest.

        Raises:
            ConfigurationError: If dest is unusable
            RootUnreadableError: If the source root cannot be read
        """
        dest = prepare_destination(dest)

        summary = ConversionSummary()
        writer = new_writer(dest, concat=self.concat, parser=self.parser)
        try:
            summary = self._walk_root(writer, summary)
        finally:
            summary = self._close(writer, summary)

        logger.debug(f"Converted {len(summary.converted)} reports ({summary.rows} rows), "
                     f"{len(summary.failed)} failures")
        return summary

    def _close(self, writer, summary: ConversionSummary) -> ConversionSummary:
        try:
            writer.close()
        except WriteError as e:
            self._print(f"Failed to close \"{e.path}\" due to {e}")
            summary.failed.append((str(e.path), str(e)))
        return summary

    def _walk_root(self, writer, summary: ConversionSummary) -> ConversionSummary:
        root = self.source
        try:
            root.stat()
        except OSError as e:
            raise RootUnreadableError(f"failed to walk \"{root}\": {e}", path=str(root)) from e

        if not root.is_dir():
            if is_report(root.name):
                return self._convert(writer, root, summary)
            return summary

        try:
            entries = self._list(root)
        except OSError as e:
            raise RootUnreadableError(f"failed to walk \"{root}\": {e}", path=str(root)) from e
        return self._walk_entries(writer, entries, summary)

    def _list(self, directory: Path) -> list[os.DirEntry]:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda entry: entry.name)

    def _walk_entries(self, writer, entries: list[os.DirEntry],
                      summary: ConversionSummary) -> ConversionSummary:
        # One iterator per open directory, deepest last.
        stack = [iter(entries)]
        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue

            path = Path(entry.path)
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False

            if is_dir:
                try:
                    stack.append(iter(self._list(path)))
                except OSError as e:
                    err = EntryUnreadableError(str(e), path=str(path))
                    self._print(f"Failed to process \"{path}\" due to {err}")
                    summary.failed.append((str(path), str(err)))
                continue

            if not is_report(entry.name):
                logger.debug(f"Skipping {path}")
                continue
            summary = self._convert(writer, path, summary)
        return summary

    def _convert(self, writer, path: Path, summary: ConversionSummary) -> ConversionSummary:
        try:
            rows = writer.convert(path)
        except (ConversionError, OSError) as e:
            self._print(f"Failed to convert \"{path}\" due to {e}")
            summary.failed.append((str(path), str(e)))
            return summary

        if self.debug:
            self._print(f"Converted \"{path}\"")
        summary.converted.append(str(path))
        summary.rows += rows
        return summary

    def _print(self, message: str) -> None:
        print(message, file=self.log)
