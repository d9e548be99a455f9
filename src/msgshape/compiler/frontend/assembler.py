"""
Model Assembler.

Turns a declaration name and its extracted field list into a top-level
``TypeModel``. Declarations without eligible fields are discarded.
"""

from typing import List, Optional

from msgshape.compiler.ir import AggregateElement, Field, OptionalElement, TypeModel
from msgshape.core.diagnostics import DiagnosticLog


class ModelAssembler:
  def __init__(self, diagnostics: DiagnosticLog) -> None:
    self.diagnostics = diagnostics

  def assemble(self, name: str, fields: List[Field]) -> Optional[TypeModel]:
    """
    Wraps fields into ``OptionalElement(AggregateElement(fields))``.

    Args:
        name: The declaration name.
        fields: Fields in declaration order.

    Returns:
        Optional[TypeModel]: The model, or None if ``fields`` is empty.
    """
    if not fields:
      self.diagnostics.warning(f"{name} has no eligible fields", declaration=name)
      return None
    self.diagnostics.notice(f"parsing {name}", declaration=name)
    return TypeModel(name=name, root=OptionalElement(AggregateElement(tuple(fields))))
