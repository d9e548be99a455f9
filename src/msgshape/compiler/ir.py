"""
Intermediate Representation (IR).

This module defines the recursive type-model extracted from source declarations.
It acts as the contract between the Frontend (declaration extraction) and the
code-emission Generator.

An ``Element`` is one of five immutable variants. Unsupported types have no
variant: builders return ``None`` and the enclosing field is dropped.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Tuple, Union

from msgshape.enums import BaseKind, ElementKind


@dataclass(frozen=True)
class BaseElement:
  """
  A scalar (or fixed-shape map) value.
  """

  kind: BaseKind
  """The base kind (e.g. ``BaseKind.INT64``)."""

  tag: ClassVar[ElementKind] = ElementKind.BASE

  def to_dict(self) -> Dict[str, Any]:
    return {"tag": self.tag.value, "kind": self.kind.value}


@dataclass(frozen=True)
class SequenceElement:
  """
  A variable-length ordered collection of a uniform element type.
  """

  of: "Element"
  """The element type."""

  tag: ClassVar[ElementKind] = ElementKind.SEQUENCE

  def to_dict(self) -> Dict[str, Any]:
    return {"tag": self.tag.value, "of": self.of.to_dict()}


@dataclass(frozen=True)
class OptionalElement:
  """
  A possibly-absent single value.
  """

  of: "Element"
  """The wrapped type."""

  tag: ClassVar[ElementKind] = ElementKind.OPTIONAL

  def to_dict(self) -> Dict[str, Any]:
    return {"tag": self.tag.value, "of": self.of.to_dict()}


@dataclass(frozen=True)
class AggregateElement:
  """
  A record with named fields, in declaration order.
  """

  fields: Tuple["Field", ...] = ()
  """Ordered fields."""

  tag: ClassVar[ElementKind] = ElementKind.AGGREGATE

  def to_dict(self) -> Dict[str, Any]:
    return {"tag": self.tag.value, "fields": [f.to_dict() for f in self.fields]}


@dataclass(frozen=True)
class DeferredElement:
  """
  A named type left for the generator to resolve.
  """

  name: str
  """The referenced name, possibly dotted (e.g. ``models.User``)."""

  tag: ClassVar[ElementKind] = ElementKind.DEFERRED

  def to_dict(self) -> Dict[str, Any]:
    return {"tag": self.tag.value, "name": self.name}


Element = Union[BaseElement, SequenceElement, OptionalElement, AggregateElement, DeferredElement]


@dataclass(frozen=True)
class Field:
  """
  One serializable member of an aggregate.
  """

  source_name: str
  """How the value is accessed on the instance."""

  output_key: str
  """The key used in the serialized form."""

  element: Element
  """The shape of the value."""

  def to_dict(self) -> Dict[str, Any]:
    return {"source_name": self.source_name, "output_key": self.output_key, "element": self.element.to_dict()}


@dataclass(frozen=True)
class TypeModel:
  """
  Top-level description of one accepted declaration.
  """

  name: str
  """Name of the declared class."""

  root: OptionalElement
  """Always ``OptionalElement(AggregateElement(fields))``."""

  @property
  def aggregate(self) -> AggregateElement:
    return self.root.of

  @property
  def fields(self) -> Tuple[Field, ...]:
    """Ordered fields of the root aggregate."""
    return self.root.of.fields

  def to_dict(self) -> Dict[str, Any]:
    return {"name": self.name, "root": self.root.to_dict()}


_BASE_SPELLING = {
  BaseKind.STRING: "str",
  BaseKind.MAP_STR_STR: "dict[str, str]",
  BaseKind.MAP_STR_ANY: "dict[str, Any]",
}


def format_element(element: Element) -> str:
  """
  Renders an Element in annotation-like notation (e.g. ``list[Optional[User]]``).
  """
  if isinstance(element, BaseElement):
    return _BASE_SPELLING.get(element.kind, element.kind.value)
  if isinstance(element, SequenceElement):
    return f"list[{format_element(element.of)}]"
  if isinstance(element, OptionalElement):
    return f"Optional[{format_element(element.of)}]"
  if isinstance(element, AggregateElement):
    inner = ", ".join(f"{f.output_key!r}: {format_element(f.element)}" for f in element.fields)
    return "{" + inner + "}"
  return element.name
