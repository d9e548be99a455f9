"""
LibCST helpers shared by the extraction frontend.
"""

from typing import Optional, Union

import libcst as cst


def get_full_name(node: Union[cst.Name, cst.Attribute, cst.BaseExpression]) -> str:
  """
  Recursively resolves a CST Name or Attribute chain to a dot-separated string.

  Args:
    node: The CST node representing the identifier.

  Returns:
    str: The dotted representation (e.g., "typing.Optional").
    Returns an empty string if the node is not a Name/Attribute chain.

  Example:
    >>> get_full_name(cst.Attribute(value=cst.Name("typing"), attr=cst.Name("List")))
    'typing.List'
  """
  if isinstance(node, cst.Name):
    return node.value
  elif isinstance(node, cst.Attribute):
    prefix = get_full_name(node.value)
    if not prefix:
      return ""
    return f"{prefix}.{node.attr.value}"
  return ""


def last_component(node: cst.BaseExpression) -> str:
  """
  Returns the final segment of a dotted name ("typing.List" -> "List").
  """
  return get_full_name(node).rsplit(".", 1)[-1]


def string_value(node: Optional[cst.BaseExpression]) -> Optional[str]:
  """
  Evaluates a plain or implicitly concatenated string literal.

  Returns None for f-strings, byte strings and any non-literal expression.
  """
  if isinstance(node, (cst.SimpleString, cst.ConcatenatedString)):
    value = node.evaluated_value
    if isinstance(value, str):
      return value
  return None


def is_private(name: str) -> bool:
  return name.startswith("_")
