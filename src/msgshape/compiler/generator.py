"""
Generator Protocol.

Defines the abstract interface for backends that consume the type-model IR
and emit serialization code or other artifacts.
"""

from abc import ABC, abstractmethod
from typing import Any, List

from msgshape.compiler.ir import TypeModel


class ModelGenerator(ABC):
  """
  Abstract base class for type-model consumers.
  """

  @abstractmethod
  def generate(self, models: List[TypeModel]) -> Any:
    """
    Produces an artifact from extracted type-models.

    Args:
        models (List[TypeModel]): Models in declaration order.

    Returns:
        Any: The generated output (e.g., source code string or document).
    """
    pass
