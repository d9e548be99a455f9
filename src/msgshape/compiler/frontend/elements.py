"""
Element Builder.

The recursive core of the frontend: maps a type annotation expression to an
IR ``Element``. The set of supported expression shapes is closed; every
expression is first classified into an ``ExprShape`` and then dispatched to
exactly one handler. ``None`` means the type is unsupported and the
enclosing field must be dropped.

Supported shapes:

1.  **Identifiers**: ``int``, ``str``, ``uint16``... map to base kinds. Other
    names (including dotted ones) become deferred references.
2.  **Sequences**: ``list[T]``, ``Sequence[T]``, ``tuple[T, ...]``. A sequence of
    ``uint8`` is the ``bytes`` base kind.
3.  **Optionals**: ``Optional[T]``, ``Union[T, None]``, ``T | None``.
4.  **Mappings**: ``dict[str, str]`` and ``dict[str, Any]`` only.
5.  **Inline aggregates**: ``{"x": int}`` and ``TypedDict("P", {"x": int})``.
6.  **Annotated** and string forward references are unwrapped.
"""

from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Dict, FrozenSet, List, Mapping, Optional

import libcst as cst

from msgshape.compiler.frontend.context import ExtractionContext
from msgshape.compiler.ir import (
  AggregateElement,
  BaseElement,
  DeferredElement,
  Element,
  OptionalElement,
  SequenceElement,
)
from msgshape.enums import BaseKind
from msgshape.utils.cst_utils import get_full_name, last_component, string_value

if TYPE_CHECKING:
  from msgshape.compiler.frontend.fields import FieldExtractor

BASE_KINDS: Mapping[str, BaseKind] = MappingProxyType(
  {
    "int": BaseKind.INT,
    "int8": BaseKind.INT8,
    "int16": BaseKind.INT16,
    "int32": BaseKind.INT32,
    "int64": BaseKind.INT64,
    "uint": BaseKind.UINT,
    "uint8": BaseKind.UINT8,
    "uint16": BaseKind.UINT16,
    "uint32": BaseKind.UINT32,
    "uint64": BaseKind.UINT64,
    "float": BaseKind.FLOAT64,
    "float32": BaseKind.FLOAT32,
    "float64": BaseKind.FLOAT64,
    "complex": BaseKind.COMPLEX128,
    "complex64": BaseKind.COMPLEX64,
    "complex128": BaseKind.COMPLEX128,
    "str": BaseKind.STRING,
    "bool": BaseKind.BOOL,
    "bytes": BaseKind.BYTES,
    "bytearray": BaseKind.BYTES,
  }
)

DYNAMIC_NAMES: FrozenSet[str] = frozenset({"Any", "object"})
BYTE_NAMES: FrozenSet[str] = frozenset({"uint8", "byte"})

SEQUENCE_CONSTRUCTORS: FrozenSet[str] = frozenset({"list", "List", "Sequence", "MutableSequence"})
TUPLE_CONSTRUCTORS: FrozenSet[str] = frozenset({"tuple", "Tuple"})
MAPPING_CONSTRUCTORS: FrozenSet[str] = frozenset({"dict", "Dict", "Mapping", "MutableMapping"})
UNION_CONSTRUCTORS: FrozenSet[str] = frozenset({"Optional", "Union"})
AGGREGATE_CONSTRUCTORS: FrozenSet[str] = frozenset({"TypedDict"})


class ExprShape(str, Enum):
  """
  Closed set of annotation shapes the builder distinguishes.
  """

  IDENTIFIER = "identifier"
  SEQUENCE = "sequence"
  TUPLE = "tuple"
  UNION = "union"
  MAPPING = "mapping"
  AGGREGATE = "aggregate"
  ANNOTATED = "annotated"
  FORWARD_REF = "forward_ref"
  UNSUPPORTED = "unsupported"


_SUBSCRIPT_SHAPES: Mapping[str, ExprShape] = MappingProxyType(
  {
    **{name: ExprShape.SEQUENCE for name in SEQUENCE_CONSTRUCTORS},
    **{name: ExprShape.TUPLE for name in TUPLE_CONSTRUCTORS},
    **{name: ExprShape.MAPPING for name in MAPPING_CONSTRUCTORS},
    **{name: ExprShape.UNION for name in UNION_CONSTRUCTORS},
    "Annotated": ExprShape.ANNOTATED,
  }
)


def classify(expr: cst.BaseExpression) -> ExprShape:
  """
  Determines which handler is responsible for an annotation expression.

  Args:
      expr: The annotation expression.

  Returns:
      ExprShape: The shape; ``UNSUPPORTED`` for anything outside the grammar.
  """
  if isinstance(expr, (cst.SimpleString, cst.ConcatenatedString)):
    return ExprShape.FORWARD_REF
  if isinstance(expr, (cst.Name, cst.Attribute)):
    return ExprShape.IDENTIFIER if get_full_name(expr) else ExprShape.UNSUPPORTED
  if isinstance(expr, cst.Subscript):
    return _SUBSCRIPT_SHAPES.get(last_component(expr.value), ExprShape.UNSUPPORTED)
  if isinstance(expr, cst.BinaryOperation) and isinstance(expr.operator, cst.BitOr):
    return ExprShape.UNION
  if isinstance(expr, cst.Dict):
    return ExprShape.AGGREGATE
  if isinstance(expr, cst.Call) and last_component(expr.func) in AGGREGATE_CONSTRUCTORS:
    return ExprShape.AGGREGATE
  return ExprShape.UNSUPPORTED


def subscript_args(node: cst.Subscript) -> Optional[List[cst.BaseExpression]]:
  """
  Returns the positional type arguments of a subscript, or None if any is a slice.
  """
  args = []
  for element in node.slice:
    if not isinstance(element.slice, cst.Index):
      return None
    args.append(element.slice.value)
  return args


def union_members(expr: cst.BaseExpression) -> List[cst.BaseExpression]:
  """
  Flattens ``Optional[T]``, ``Union[A, B]`` and ``A | B | C`` into their members.
  """
  if isinstance(expr, cst.BinaryOperation) and isinstance(expr.operator, cst.BitOr):
    return union_members(expr.left) + union_members(expr.right)
  if isinstance(expr, cst.Subscript) and last_component(expr.value) in UNION_CONSTRUCTORS:
    args = subscript_args(expr) or []
    if last_component(expr.value) == "Optional":
      return args + [cst.Name("None")]
    return args
  return [expr]


def is_none(expr: cst.BaseExpression) -> bool:
  return isinstance(expr, cst.Name) and expr.value == "None"


def is_dynamic(expr: cst.BaseExpression) -> bool:
  return isinstance(expr, (cst.Name, cst.Attribute)) and last_component(expr) in DYNAMIC_NAMES


class ElementBuilder:
  """
  Builds IR Elements from annotation expressions.

  The builder holds no mutable state: each call returns a freshly constructed
  subtree, even for structurally identical inputs. Inline aggregates are
  delegated back to the owning ``FieldExtractor``.

  Attributes:
      fields (FieldExtractor): Extractor used for inline aggregate entries.
  """

  def __init__(self, fields: "FieldExtractor") -> None:
    self.fields = fields
    self._handlers: Dict[ExprShape, Callable[[cst.BaseExpression, ExtractionContext], Optional[Element]]] = {
      ExprShape.IDENTIFIER: self._build_identifier,
      ExprShape.SEQUENCE: self._build_sequence,
      ExprShape.TUPLE: self._build_tuple,
      ExprShape.UNION: self._build_union,
      ExprShape.MAPPING: self._build_mapping,
      ExprShape.AGGREGATE: self._build_aggregate,
      ExprShape.ANNOTATED: self._build_annotated,
      ExprShape.FORWARD_REF: self._build_forward_ref,
      ExprShape.UNSUPPORTED: lambda expr, context: None,
    }

  def build(self, expr: cst.BaseExpression, context: Optional[ExtractionContext] = None) -> Optional[Element]:
    """
    Maps an annotation expression to an Element.

    Args:
        expr: The annotation expression.
        context: Location of the expression, used for nested diagnostics.

    Returns:
        Optional[Element]: The element, or None if the type is unsupported.
    """
    return self._handlers[classify(expr)](expr, context or ExtractionContext())

  def _build_identifier(self, expr: cst.BaseExpression, context: ExtractionContext) -> Optional[Element]:
    if isinstance(expr, cst.Name):
      if expr.value in BASE_KINDS:
        return BaseElement(BASE_KINDS[expr.value])
      if is_none(expr):
        return None
    if is_dynamic(expr):
      return None
    return DeferredElement(get_full_name(expr))

  def _sequence_of(self, item: cst.BaseExpression, context: ExtractionContext) -> Optional[Element]:
    if isinstance(item, cst.Name) and item.value in BYTE_NAMES:
      return BaseElement(BaseKind.BYTES)
    inner = self.build(item, context)
    if inner is None:
      return None
    return SequenceElement(inner)

  def _build_sequence(self, expr: cst.Subscript, context: ExtractionContext) -> Optional[Element]:
    args = subscript_args(expr)
    if not args or len(args) != 1:
      return None
    return self._sequence_of(args[0], context)

  def _build_tuple(self, expr: cst.Subscript, context: ExtractionContext) -> Optional[Element]:
    # Only the homogeneous, variable-length form tuple[T, ...]
    args = subscript_args(expr)
    if not args or len(args) != 2 or not isinstance(args[1], cst.Ellipsis):
      return None
    return self._sequence_of(args[0], context)

  def _build_union(self, expr: cst.BaseExpression, context: ExtractionContext) -> Optional[Element]:
    members = union_members(expr)
    others = [m for m in members if not is_none(m)]
    if len(others) != 1:
      return None
    inner = self.build(others[0], context)
    if inner is None:
      return None
    if len(others) == len(members):
      return inner
    return OptionalElement(inner)

  def _build_mapping(self, expr: cst.Subscript, context: ExtractionContext) -> Optional[Element]:
    args = subscript_args(expr)
    if not args or len(args) != 2:
      return None
    key, value = args
    if not (isinstance(key, cst.Name) and key.value == "str"):
      return None
    if isinstance(value, cst.Name) and value.value == "str":
      return BaseElement(BaseKind.MAP_STR_STR)
    if is_dynamic(value):
      return BaseElement(BaseKind.MAP_STR_ANY)
    return None

  def _build_aggregate(self, expr: cst.BaseExpression, context: ExtractionContext) -> Optional[Element]:
    body = expr
    if isinstance(expr, cst.Call):
      body = _typeddict_body(expr)
      if body is None:
        return None
    return AggregateElement(tuple(self.fields.extract_inline(body, context)))

  def _build_annotated(self, expr: cst.Subscript, context: ExtractionContext) -> Optional[Element]:
    args = subscript_args(expr)
    if not args:
      return None
    return self.build(args[0], context)

  def _build_forward_ref(self, expr: cst.BaseExpression, context: ExtractionContext) -> Optional[Element]:
    text = string_value(expr)
    if text is None:
      return None
    try:
      parsed = cst.parse_expression(text.strip())
    except cst.ParserSyntaxError:
      return None
    return self.build(parsed, context)


def _typeddict_body(call: cst.Call) -> Optional[cst.Dict]:
  """
  Finds the field mapping of ``TypedDict("Name", {...})`` (positional or ``fields=``).
  """
  positional = [a for a in call.args if a.keyword is None and not a.star]
  for arg in call.args:
    if arg.keyword is not None and arg.keyword.value == "fields" and isinstance(arg.value, cst.Dict):
      return arg.value
  if len(positional) >= 2 and isinstance(positional[1].value, cst.Dict):
    return positional[1].value
  return None
