"""
Declaration Filter.

Selects the top-level class declarations that describe an aggregate shape.
Protocol classes (interfaces) and enum classes (scalars) are skipped, as are
private classes. Functions, constants and type aliases are never candidates.
"""

from typing import FrozenSet, List

import libcst as cst

from msgshape.compiler.frontend.loader import ExportTable
from msgshape.utils.cst_utils import last_component

INTERFACE_BASES: FrozenSet[str] = frozenset({"Protocol"})
SCALAR_BASES: FrozenSet[str] = frozenset({"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag"})


def _base_name(arg: cst.Arg) -> str:
  value = arg.value
  if isinstance(value, cst.Subscript):
    value = value.value
  return last_component(value)


def is_aggregate_declaration(node: cst.ClassDef) -> bool:
  """
  Determines whether a class defines a record-like shape.

  Args:
      node: The class declaration.

  Returns:
      bool: False for protocols and enums, True otherwise.
  """
  for arg in node.bases:
    name = _base_name(arg)
    if name in INTERFACE_BASES or name in SCALAR_BASES:
      return False
  return True


class DeclarationFilter:
  """
  Collects aggregate class declarations from a module, in source order.
  """

  def collect(self, module: cst.Module) -> List[cst.ClassDef]:
    exports = ExportTable.from_module(module)
    out: List[cst.ClassDef] = []
    for stmt in module.body:
      if not isinstance(stmt, cst.ClassDef):
        continue
      if not exports.is_exported(stmt.name.value):
        continue
      if is_aggregate_declaration(stmt):
        out.append(stmt)
    return out
