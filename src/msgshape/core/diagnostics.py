"""
Extraction Diagnostics.

This module provides the structured record of decisions taken during an
extraction pass. It captures:
1. Notices (declaration accepted, field deliberately excluded).
2. Warnings (field skipped for an unsupported type, declaration without fields).

The log is owned by a single extraction pass and returned alongside its
result, so the transformation itself never writes to the console.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterator, List, Optional

from msgshape.enums import Severity


@dataclass(frozen=True)
class Diagnostic:
  severity: Severity
  message: str
  declaration: Optional[str] = None
  field: Optional[str] = None
  path: Optional[str] = None

  @property
  def location(self) -> str:
    """``path:Declaration`` prefix of the entry, or "" when neither is known."""
    return ":".join(part for part in (self.path, self.declaration) if part)


class DiagnosticLog:
  """
  Append-only collection of diagnostics for one extraction pass.

  Attributes:
      path (Optional[str]): Source file the pass reads; stamped on every entry.
  """

  def __init__(self, path: Optional[str] = None) -> None:
    self.path = path
    self._entries: List[Diagnostic] = []

  def notice(
    self,
    message: str,
    declaration: Optional[str] = None,
    field: Optional[str] = None,
    path: Optional[str] = None,
  ) -> None:
    self._entries.append(Diagnostic(Severity.NOTICE, message, declaration, field, path or self.path))

  def warning(
    self,
    message: str,
    declaration: Optional[str] = None,
    field: Optional[str] = None,
    path: Optional[str] = None,
  ) -> None:
    self._entries.append(Diagnostic(Severity.WARNING, message, declaration, field, path or self.path))

  @property
  def entries(self) -> List[Diagnostic]:
    return list(self._entries)

  @property
  def warnings(self) -> List[Diagnostic]:
    return [d for d in self._entries if d.severity == Severity.WARNING]

  def export(self) -> List[Dict[str, Any]]:
    """Returns list of dicts for JSON serialization."""
    return [{**asdict(d), "severity": d.severity.value} for d in self._entries]

  def __iter__(self) -> Iterator[Diagnostic]:
    return iter(list(self._entries))

  def __len__(self) -> int:
    return len(self._entries)
