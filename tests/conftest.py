import os
from pathlib import Path

import pytest

TESTDATA = Path(__file__).parent / "testdata"
INPUT_DIR = TESTDATA / "input"

HARD_DELETE_XML = INPUT_DIR / "TEST-org.hisp.dhis.maintenance.HardDeleteAuditTest.xml"
ANALYTICS_XML = INPUT_DIR / "nested" / "TEST-org.hisp.dhis.analytics.data.AnalyticsServiceTest.xml"

HEADER_LINE = (
    "module,class,test,test duration [seconds],test suite duration [seconds],"
    "test suite tests [number],test suite errors [number],test suite skipped [number],"
    "test suite failures [number],basedir\n"
)

ADMIN_BASEDIR = "/home/runner/work/dhis2-core/dhis2-core/dhis-2/dhis-services/dhis-service-administration"
ANALYTICS_BASEDIR = "/home/runner/work/dhis2-core/dhis2-core/dhis-2/dhis-services/dhis-service-analytics"
ANALYTICS_CLASS = "org.hisp.dhis.analytics.data.AnalyticsServiceTest"

HARD_DELETE_ROWS = (
    f"dhis-service-administration,org.hisp.dhis.maintenance.HardDeleteAuditTest,,0,0.003,1,0,1,0,{ADMIN_BASEDIR}\n"
)
ANALYTICS_ROWS = "".join(
    f"dhis-service-analytics,{ANALYTICS_CLASS},{name},{time},171.217,4,1,0,1,{ANALYTICS_BASEDIR}\n"
    for name, time in [
        ("testMappingAggregation", "46.089"),
        ("queryValidationResultTable", "41.134"),
        ("testGridAggregation", "42.103"),
        ("testSetAggregation", "41.879"),
    ]
)

SKIPPED_REPORT = (
    '<testsuite name="X" time="0.003" tests="1" errors="0" skipped="1" failures="0">'
    '<properties><property name="basedir" value="/a/b/my-module"/></properties>'
    '<testcase name="" classname="X" time="0"><skipped/></testcase>'
    '</testsuite>'
)

INVALID_REPORT = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<testsuite name="org.hisp.dhis.maintenance.HardDeleteAuditTest" time="0.003">\n'
    '</tes>'
)


def running_as_root() -> bool:
    return hasattr(os, "geteuid") and os.geteuid() == 0


needs_permissions = pytest.mark.skipif(
    running_as_root(), reason="file permissions are not enforced for root")


@pytest.fixture
def src(tmp_path):
    """An empty source directory."""
    path = tmp_path / "src"
    path.mkdir()
    return path


@pytest.fixture
def dest(tmp_path):
    """A destination directory that does not exist yet."""
    return tmp_path / "dest"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep .env files and SUREFIRE_* variables of the host out of the tests."""
    for key in ("SUREFIRE_TO_CSV_CONFIG", "SUREFIRE_CONCAT", "SUREFIRE_DEBUG"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
