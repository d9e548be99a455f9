"""
Enumerations for msgshape.

This module defines the closed value sets shared across the extraction
pipeline: base scalar kinds, IR node kinds, diagnostic severities and
configuration policies.
"""

from enum import Enum


class BaseKind(str, Enum):
  """
  Scalar (and fixed map) kinds understood by the serialization generator.
  """

  INT = "int"
  INT8 = "int8"
  INT16 = "int16"
  INT32 = "int32"
  INT64 = "int64"
  UINT = "uint"
  UINT8 = "uint8"
  UINT16 = "uint16"
  UINT32 = "uint32"
  UINT64 = "uint64"
  FLOAT32 = "float32"
  FLOAT64 = "float64"
  COMPLEX64 = "complex64"
  COMPLEX128 = "complex128"
  STRING = "string"
  BOOL = "bool"
  BYTES = "bytes"
  MAP_STR_STR = "map_str_str"  # dict[str, str]
  MAP_STR_ANY = "map_str_any"  # dict[str, Any]


class ElementKind(str, Enum):
  """
  Tag of each variant in the Element union.
  """

  BASE = "base"
  SEQUENCE = "sequence"
  OPTIONAL = "optional"
  AGGREGATE = "aggregate"
  DEFERRED = "deferred"


class Severity(str, Enum):
  """
  Diagnostic severity levels.
  """

  NOTICE = "notice"
  WARNING = "warning"


class DuplicateKeyPolicy(str, Enum):
  """
  Behaviour when two fields of one aggregate resolve to the same output key.
  """

  ERROR = "error"
  LAST_WINS = "last_wins"
