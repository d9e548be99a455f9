"""
Structured Field Metadata.

Resolves the serialized key of a field from its metadata. Two sources are
read, in this order:

1.  Dict literals in ``Annotated`` metadata: ``Annotated[int, {"msg": "n"}]``.
2.  The ``metadata=`` dict literal of a field specifier call assigned to the
    field: ``field(metadata={"msg": "n"})``, ``attr.ib(...)``, ``Field(...)``.

The first source defining the key wins. The value ``"-"`` excludes the field.
"""

from typing import Iterator, Optional

import libcst as cst

from msgshape.utils.cst_utils import last_component, string_value

EXCLUDE_MARKER = "-"
FIELD_SPECIFIERS = frozenset({"field", "Field", "ib", "attrib"})

_MISSING = object()


def annotated_metadata(annotation: Optional[cst.BaseExpression]) -> Iterator[cst.Dict]:
  if not isinstance(annotation, cst.Subscript) or last_component(annotation.value) != "Annotated":
    return
  for element in annotation.slice[1:]:
    if isinstance(element.slice, cst.Index) and isinstance(element.slice.value, cst.Dict):
      yield element.slice.value


def specifier_metadata(value: Optional[cst.BaseExpression]) -> Iterator[cst.Dict]:
  if not isinstance(value, cst.Call) or last_component(value.func) not in FIELD_SPECIFIERS:
    return
  for arg in value.args:
    if arg.keyword is not None and arg.keyword.value == "metadata" and isinstance(arg.value, cst.Dict):
      yield arg.value


def lookup(metadata: cst.Dict, key: str) -> object:
  """
  Finds the value stored under a string key in a dict literal.

  Returns:
      The string value, None for non-string values, or ``_MISSING`` if the key is absent.
  """
  for element in metadata.elements:
    if isinstance(element, cst.DictElement) and string_value(element.key) == key:
      return string_value(element.value)
  return _MISSING


def resolve_tag(
  annotation: Optional[cst.BaseExpression], value: Optional[cst.BaseExpression], key: str
) -> Optional[str]:
  """
  Returns the raw tag value for a field, or None when no source defines a string for it.
  """
  for metadata in (*annotated_metadata(annotation), *specifier_metadata(value)):
    found = lookup(metadata, key)
    if found is not _MISSING:
      return found
  return None


def resolve_output_key(
  name: str, annotation: Optional[cst.BaseExpression], value: Optional[cst.BaseExpression], key: str
) -> Optional[str]:
  """
  Computes the serialized key of a named field.

  Args:
      name: The declared field name.
      annotation: The field's annotation expression, if any.
      value: The assigned default value, if any.
      key: The recognized metadata key (e.g. "msg").

  Returns:
      Optional[str]: The output key, or None if the field is excluded.
  """
  tag = resolve_tag(annotation, value, key)
  if tag == EXCLUDE_MARKER:
    return None
  return tag or name
