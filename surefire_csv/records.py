"""Maps parsed Surefire reports to CSV rows."""

import os

from .models import TestSuite

HEADER = (
    "module",
    "class",
    "test",
    "test duration [seconds]",
    "test suite duration [seconds]",
    "test suite tests [number]",
    "test suite errors [number]",
    "test suite skipped [number]",
    "test suite failures [number]",
    "basedir",
)


def header() -> list[str]:
    return list(HEADER)


def module_name(basedir: str) -> str:
    """Final path segment of a module's basedir.

    "/a/b/my-module/" -> "my-module". An empty basedir gives an empty name.
    """
    if not basedir:
        return ""
    separators = "/" + os.sep
    stripped = basedir.rstrip(separators)
    if not stripped:
        return basedir[0]
    for sep in separators:
        stripped = stripped.rsplit(sep, 1)[-1]
    return stripped


def records(suite: TestSuite) -> list[list[str]]:
    """One row per test case, in document order."""
    basedir = suite.basedir
    module = module_name(basedir)
    return [
        [
            module,
            case.classname,
            case.name,
            case.time,
            suite.time,
            suite.tests,
            suite.errors,
            suite.skipped,
            suite.failures,
            basedir,
        ]
        for case in suite.test_cases
    ]


def csv_filename(path) -> str:
    """CSV file name for a report: "dir/TEST-Foo.xml" -> "TEST-Foo.csv"."""
    base = os.path.basename(os.fspath(path))
    dot = base.rfind(".")
    stem = base[:dot] if dot >= 0 else base
    return stem + ".csv"
