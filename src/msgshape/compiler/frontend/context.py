"""
Read-only context threaded through recursive extraction calls.
"""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class ExtractionContext:
  """
  Identifies where in the source an element is being built.
  """

  path: str = "<string>"
  """Source file the declaration comes from."""

  declaration: str = "<anonymous>"
  """Dotted path of the aggregate being extracted (e.g. ``User.address``)."""

  def nested(self, field_name: str) -> "ExtractionContext":
    return replace(self, declaration=f"{self.declaration}.{field_name}")
