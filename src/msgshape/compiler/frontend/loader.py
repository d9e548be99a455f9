"""
Source Loader.

Parses one Python source file into a LibCST Module and enforces the
whole-file export gate: a file declaring nothing externally visible is
rejected before any declaration is examined.

A top-level name is exported when it does not start with an underscore,
unless the module assigns a literal ``__all__``, in which case exactly the
names listed there are exported.
"""

from pathlib import Path
from typing import FrozenSet, List, Optional, Union

import libcst as cst

from msgshape.errors import NoExportsError, ParseError
from msgshape.utils.cst_utils import is_private, string_value


class ExportTable:
  """
  Visibility of the top-level names of one module.

  Attributes:
      declared (List[str]): Top-level declared names, in source order.
      explicit (Optional[FrozenSet[str]]): Names listed in a literal ``__all__``, if any.
  """

  def __init__(self, declared: List[str], explicit: Optional[FrozenSet[str]] = None) -> None:
    self.declared = declared
    self.explicit = explicit

  @classmethod
  def from_module(cls, module: cst.Module) -> "ExportTable":
    declared: List[str] = []
    explicit: Optional[FrozenSet[str]] = None

    for stmt in module.body:
      if isinstance(stmt, (cst.ClassDef, cst.FunctionDef)):
        declared.append(stmt.name.value)
      elif isinstance(stmt, cst.SimpleStatementLine):
        for small in stmt.body:
          if isinstance(small, cst.Assign):
            for target in small.targets:
              declared.extend(_target_names(target.target))
            if _assigns_dunder_all(small):
              explicit = _literal_names(small.value)
          elif isinstance(small, cst.AnnAssign):
            declared.extend(_target_names(small.target))
            if isinstance(small.target, cst.Name) and small.target.value == "__all__":
              explicit = _literal_names(small.value)
          elif isinstance(small, cst.TypeAlias):
            declared.append(small.name.value)

    return cls(declared, explicit)

  def is_exported(self, name: str) -> bool:
    if self.explicit is not None:
      return name in self.explicit
    return not is_private(name)

  def has_exports(self) -> bool:
    if self.explicit is not None:
      # Names listed in __all__ may be re-exports of imports.
      return len(self.explicit) > 0
    return any(self.is_exported(n) for n in self.declared)


def _target_names(target: cst.BaseExpression) -> List[str]:
  if isinstance(target, cst.Name):
    return [target.value]
  if isinstance(target, (cst.Tuple, cst.List)):
    names: List[str] = []
    for el in target.elements:
      names.extend(_target_names(el.value))
    return names
  return []


def _assigns_dunder_all(node: cst.Assign) -> bool:
  return any(isinstance(t.target, cst.Name) and t.target.value == "__all__" for t in node.targets)


def _literal_names(value: Optional[cst.BaseExpression]) -> Optional[FrozenSet[str]]:
  if not isinstance(value, (cst.List, cst.Tuple)):
    return None
  names = []
  for el in value.elements:
    name = string_value(el.value)
    if name is None:
      return None
    names.append(name)
  return frozenset(names)


class SourceLoader:
  """
  Loads and gates source files for extraction.
  """

  def load(self, path: Union[str, Path]) -> cst.Module:
    """
    Reads and parses a file from disk.

    The file is read as bytes so that a PEP 263 coding declaration selects
    the decoding.

    Args:
        path: Location of the Python source file.

    Returns:
        cst.Module: The parsed tree.

    Raises:
        ParseError: If the file cannot be decoded or is not valid Python.
        NoExportsError: If the file has no exported top-level declarations.
        OSError: If the file cannot be read.
    """
    code = Path(path).read_bytes()
    return self.parse(code, str(path))

  def parse(self, code: Union[str, bytes], path: str = "<string>") -> cst.Module:
    """
    Parses an in-memory buffer.

    Args:
        code: Python source code, as text or as undecoded bytes.
        path: Name used to attribute errors.

    Returns:
        cst.Module: The parsed tree.
    """
    try:
      module = cst.parse_module(code)
    except cst.ParserSyntaxError as e:
      raise ParseError(path, e.message, line=e.editor_line, column=e.editor_column) from e
    except UnicodeDecodeError as e:
      raise ParseError(path, f"cannot decode source: {e.reason} at byte {e.start}") from e
    except (SyntaxError, LookupError) as e:
      # Raised while detecting the encoding (bad or unknown coding declaration)
      raise ParseError(path, f"cannot decode source: {e}") from e

    if not ExportTable.from_module(module).has_exports():
      raise NoExportsError(path)
    return module
