"""
Tests for the Element Builder.

Verifies the mapping of every supported annotation shape, the byte-sequence
special case, and that unsupported shapes yield None.
"""

import libcst as cst
import pytest

from msgshape.compiler.frontend.elements import ExprShape, classify
from msgshape.compiler.frontend.fields import FieldExtractor
from msgshape.compiler.ir import (
  AggregateElement,
  BaseElement,
  DeferredElement,
  Field,
  OptionalElement,
  SequenceElement,
)
from msgshape.enums import BaseKind


def build(annotation: str):
  return FieldExtractor().builder.build(cst.parse_expression(annotation))


@pytest.mark.parametrize(
  "annotation, kind",
  [
    ("int", BaseKind.INT),
    ("int8", BaseKind.INT8),
    ("int64", BaseKind.INT64),
    ("uint", BaseKind.UINT),
    ("uint32", BaseKind.UINT32),
    ("float", BaseKind.FLOAT64),
    ("float32", BaseKind.FLOAT32),
    ("complex", BaseKind.COMPLEX128),
    ("complex64", BaseKind.COMPLEX64),
    ("str", BaseKind.STRING),
    ("bool", BaseKind.BOOL),
    ("bytes", BaseKind.BYTES),
    ("bytearray", BaseKind.BYTES),
  ],
)
def test_base_kinds(annotation, kind):
  assert build(annotation) == BaseElement(kind)


def test_unknown_names_are_deferred():
  assert build("User") == DeferredElement("User")
  assert build("models.User") == DeferredElement("models.User")


@pytest.mark.parametrize("annotation", ["Any", "typing.Any", "object", "None"])
def test_dynamic_alone_is_unsupported(annotation):
  assert build(annotation) is None


@pytest.mark.parametrize("annotation", ["list[uint8]", "List[uint8]", "Sequence[byte]", "tuple[uint8, ...]"])
def test_byte_sequence_is_bytes(annotation):
  assert build(annotation) == BaseElement(BaseKind.BYTES)


@pytest.mark.parametrize("annotation", ["list[str]", "typing.List[str]", "Sequence[str]", "tuple[str, ...]"])
def test_sequences(annotation):
  assert build(annotation) == SequenceElement(BaseElement(BaseKind.STRING))


def test_nested_sequence():
  assert build("list[list[User]]") == SequenceElement(SequenceElement(DeferredElement("User")))


def test_sequence_of_unsupported_is_unsupported():
  assert build("list[Callable[[], int]]") is None
  assert build("list[dict[str, int]]") is None


@pytest.mark.parametrize("annotation", ["tuple[int, str]", "tuple[int]", "set[int]", "list[int, str]"])
def test_unsupported_collections(annotation):
  assert build(annotation) is None


def test_bare_generic_name_is_deferred():
  assert build("list") == DeferredElement("list")


@pytest.mark.parametrize(
  "annotation",
  ["Optional[User]", "typing.Optional[User]", "Union[User, None]", "Union[None, User]", "User | None", "None | User"],
)
def test_optionals(annotation):
  assert build(annotation) == OptionalElement(DeferredElement("User"))


def test_optional_is_single_level():
  assert build("Optional[Optional[int]]") == OptionalElement(OptionalElement(BaseElement(BaseKind.INT)))


@pytest.mark.parametrize("annotation", ["Union[int, str]", "int | str | None", "Optional[Any]", "Optional[None]"])
def test_unsupported_unions(annotation):
  assert build(annotation) is None


def test_single_member_union_is_the_member():
  assert build("Union[int]") == BaseElement(BaseKind.INT)


@pytest.mark.parametrize(
  "annotation, kind",
  [
    ("dict[str, str]", BaseKind.MAP_STR_STR),
    ("Dict[str, str]", BaseKind.MAP_STR_STR),
    ("Mapping[str, Any]", BaseKind.MAP_STR_ANY),
    ("dict[str, typing.Any]", BaseKind.MAP_STR_ANY),
    ("dict[str, object]", BaseKind.MAP_STR_ANY),
  ],
)
def test_supported_mappings(annotation, kind):
  assert build(annotation) == BaseElement(kind)


@pytest.mark.parametrize("annotation", ["dict[int, str]", "dict[str, int]", "dict[str, list[str]]", "dict[str]"])
def test_unsupported_mappings(annotation):
  assert build(annotation) is None


def test_inline_aggregate():
  result = build('{"x": int, "label": Optional[str]}')
  assert result == AggregateElement(
    (
      Field("x", "x", BaseElement(BaseKind.INT)),
      Field("label", "label", OptionalElement(BaseElement(BaseKind.STRING))),
    )
  )


def test_typeddict_call_aggregate():
  result = build('TypedDict("Point", {"x": float, "y": float})')
  assert isinstance(result, AggregateElement)
  assert [f.source_name for f in result.fields] == ["x", "y"]


def test_typeddict_call_without_mapping_is_unsupported():
  assert build('TypedDict("Point")') is None


def test_inline_aggregate_drops_unsupported_entries():
  result = build('{"ok": int, "bad": dict[int, int]}')
  assert [f.source_name for f in result.fields] == ["ok"]


def test_annotated_is_unwrapped():
  assert build('Annotated[int, {"msg": "n"}]') == BaseElement(BaseKind.INT)


def test_forward_references():
  assert build('"User"') == DeferredElement("User")
  assert build('"list[int]"') == SequenceElement(BaseElement(BaseKind.INT))
  assert build('"list["') is None


@pytest.mark.parametrize("annotation", ["Callable[[int], int]", "ClassVar[int]", "Foo[int]", "lambda: 1", "1"])
def test_other_shapes_are_unsupported(annotation):
  assert build(annotation) is None


def test_classify():
  assert classify(cst.parse_expression("int")) == ExprShape.IDENTIFIER
  assert classify(cst.parse_expression("a.b")) == ExprShape.IDENTIFIER
  assert classify(cst.parse_expression("list[int]")) == ExprShape.SEQUENCE
  assert classify(cst.parse_expression("int | None")) == ExprShape.UNION
  assert classify(cst.parse_expression("{}")) == ExprShape.AGGREGATE
  assert classify(cst.parse_expression("x + 1")) == ExprShape.UNSUPPORTED


def test_each_build_is_a_fresh_subtree():
  first = build("list[Optional[User]]")
  second = build("list[Optional[User]]")
  assert first == second
  assert first is not second
  assert first.of is not second.of
