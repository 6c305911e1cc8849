"""Parser for Maven Surefire XML test reports."""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Union

from .errors import EntryUnreadableError, ParseError
from .models import Property, TestCase, TestSuite

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    # "{namespace}testcase" -> "testcase"
    return tag.rsplit('}', 1)[-1]


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element if _local_name(child.tag) == name]


class SurefireParser:
    """Decodes Surefire reports into TestSuite objects.

    The root element is treated as the suite whatever its tag. Only the
    name, classname and time attributes of each <testcase> are read; the
    output captured in <system-out>, <system-err> and friends is ignored.
    """

    def parse(self, data: Union[bytes, str], source: str = "<report>") -> TestSuite:
        """Parse a report document.

        Args:
            data: Raw XML content
            source: Name used in error messages

        Raises:
            ParseError: If the document is not well-formed XML
        """
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise ParseError(f"invalid XML: {e}", path=source) from e

        properties = []
        for block in _children(root, 'properties'):
            for prop in _children(block, 'property'):
                properties.append(Property(
                    name=prop.get('name', ''),
                    value=prop.get('value', ''),
                ))

        cases = [
            TestCase(
                name=case.get('name', ''),
                classname=case.get('classname', ''),
                time=case.get('time', ''),
            )
            for case in _children(root, 'testcase')
        ]

        suite = TestSuite(
            name=root.get('name', ''),
            time=root.get('time', ''),
            tests=root.get('tests', ''),
            errors=root.get('errors', ''),
            skipped=root.get('skipped', ''),
            failures=root.get('failures', ''),
            properties=tuple(properties),
            test_cases=tuple(cases),
        )
        logger.debug(f"Parsed {source}: suite {suite.name!r} with {len(cases)} test cases")
        return suite

    def parse_file(self, path: Union[str, Path]) -> TestSuite:
        """Read and parse a report file.

        Raises:
            EntryUnreadableError: If the file cannot be read
            ParseError: If the file is not well-formed XML
        """
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise EntryUnreadableError(f"cannot read {path}: {e}", path=str(path)) from e
        return self.parse(data, source=str(path))
