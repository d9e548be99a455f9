"""
Tests for the Declaration Filter.
"""

import textwrap

import libcst as cst

from msgshape.compiler.frontend.declarations import DeclarationFilter, is_aggregate_declaration


def collect(code: str):
  module = cst.parse_module(textwrap.dedent(code))
  return [c.name.value for c in DeclarationFilter().collect(module)]


def test_collects_classes_in_source_order():
  names = collect(
    """
    class B:
      x: int

    def helper():
      pass

    LIMIT = 3
    Alias = dict[str, str]

    class A:
      y: int
    """
  )
  assert names == ["B", "A"]


def test_skips_private_and_unlisted_classes():
  assert collect("class _Hidden:\n  x: int\nclass Shown:\n  x: int\n") == ["Shown"]
  assert collect("__all__ = ['Listed']\nclass Listed: ...\nclass Unlisted: ...\n") == ["Listed"]


def test_skips_protocols_and_enums():
  names = collect(
    """
    class Readable(Protocol):
      def read(self) -> bytes: ...

    class Color(enum.Enum):
      RED = 1

    class Level(IntEnum):
      LOW = 1

    class Box(Generic[T]):
      item: T
    """
  )
  assert names == ["Box"]


def test_nested_classes_are_not_top_level_subjects():
  assert collect("class Outer:\n  class Inner:\n    x: int\n  y: int\n") == ["Outer"]


def test_is_aggregate_declaration_with_subscripted_protocol():
  node = cst.parse_statement("class P(Protocol[T]):\n  pass\n")
  assert is_aggregate_declaration(node) is False
