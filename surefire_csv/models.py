"""
Data models for Maven Surefire test reports.

Attribute values are kept as the raw strings found in the report so that
numbers like "0.003" reach the CSV exactly as Surefire wrote them.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Property:
    """A name/value pair from the suite's <properties> block."""
    name: str
    value: str


@dataclass(frozen=True)
class TestCase:
    """Represents a single <testcase> entry."""
    name: str
    classname: str
    time: str = ""


@dataclass(frozen=True)
class TestSuite:
    """Represents one Surefire report (a <testsuite> document)."""
    name: str
    time: str = ""
    tests: str = ""
    errors: str = ""
    skipped: str = ""
    failures: str = ""
    properties: tuple[Property, ...] = field(default_factory=tuple)
    test_cases: tuple[TestCase, ...] = field(default_factory=tuple)

    def get_property(self, name: str) -> Optional[str]:
        """Value of the last property called ``name``, or None."""
        value = None
        for prop in self.properties:
            if prop.name == name:
                value = prop.value
        return value

    @property
    def basedir(self) -> str:
        return self.get_property("basedir") or ""
