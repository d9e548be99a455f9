"""
Exception classes for msgshape.

Every fatal condition is attributable to a single source file. Non-fatal
conditions (unsupported field types, declarations without eligible fields)
are never raised; they are recorded as diagnostics instead.
"""

from typing import Optional


class MsgshapeError(Exception):
  """Base exception class for all msgshape exceptions."""

  def __init__(self, path: str, message: str):
    self.path = path
    self.message = message
    super().__init__(f"{path}: {message}")


class ParseError(MsgshapeError):
  """
  Raised when a source file is not valid Python.

  Example:
      >>> raise ParseError("models.py", "Syntax Error", line=3, column=7)
  """

  def __init__(self, path: str, message: str, line: Optional[int] = None, column: Optional[int] = None):
    self.line = line
    self.column = column
    location = f" (line {line}, column {column})" if line is not None else ""
    super().__init__(path, f"{message}{location}")


class NoExportsError(MsgshapeError):
  """Raised when a file declares nothing externally visible."""

  def __init__(self, path: str):
    super().__init__(path, "no exports in file")


class DuplicateOutputKeyError(MsgshapeError):
  """
  Raised when two fields of the same aggregate serialize under one key.
  """

  def __init__(self, path: str, declaration: str, key: str):
    self.declaration = declaration
    self.key = key
    super().__init__(path, f"duplicate output key {key!r} in {declaration}")
