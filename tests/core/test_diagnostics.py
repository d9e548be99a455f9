"""
Tests for the diagnostics log.
"""

from msgshape.core.diagnostics import Diagnostic, DiagnosticLog
from msgshape.enums import Severity


def test_log_preserves_emission_order():
  log = DiagnosticLog()
  log.notice("parsing User", declaration="User")
  log.warning("field 'x' skipped, unsupported type", declaration="User", field="x")

  assert list(log) == [
    Diagnostic(Severity.NOTICE, "parsing User", "User", None),
    Diagnostic(Severity.WARNING, "field 'x' skipped, unsupported type", "User", "x"),
  ]
  assert len(log.warnings) == 1


def test_entries_are_a_copy():
  log = DiagnosticLog()
  log.notice("a")
  log.entries.clear()
  assert len(log) == 1


def test_export_is_json_ready():
  log = DiagnosticLog()
  log.warning("Empty has no eligible fields", declaration="Empty")
  assert log.export() == [
    {"severity": "warning", "message": "Empty has no eligible fields", "declaration": "Empty", "field": None, "path": None}
  ]


def test_entries_carry_path_of_the_log():
  log = DiagnosticLog("models.py")
  log.warning("field 'id' skipped, unsupported type", declaration="User", field="id")
  log.notice("parsing Other", declaration="Other", path="other.py")

  first, second = log
  assert first.path == "models.py"
  assert first.location == "models.py:User"
  assert second.location == "other.py:Other"


def test_location_without_path_or_declaration():
  assert Diagnostic(Severity.NOTICE, "a").location == ""
  assert Diagnostic(Severity.NOTICE, "a", "User").location == "User"
