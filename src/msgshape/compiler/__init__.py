"""
Compiler Package.

Defines the type-model Intermediate Representation (IR), the Python frontend
that extracts it, and the Generator interface that consumes it.
"""

from msgshape.compiler.generator import ModelGenerator
from msgshape.compiler.ir import (
  AggregateElement,
  BaseElement,
  DeferredElement,
  Element,
  Field,
  OptionalElement,
  SequenceElement,
  TypeModel,
)

__all__ = [
  "ModelGenerator",
  "AggregateElement",
  "BaseElement",
  "DeferredElement",
  "Element",
  "Field",
  "OptionalElement",
  "SequenceElement",
  "TypeModel",
]
