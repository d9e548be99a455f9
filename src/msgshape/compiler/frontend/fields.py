"""
Field Extractor.

Applies per-field policy to a class declaration (or an inline aggregate) and
builds one ``Field`` per surviving member, in declaration order.

Class bases are read first, as embedded fields, followed by the class body:

1.  **Named fields**: ``name: T`` or ``name = value  # type: T``. The output key
    comes from structured metadata (see ``metadata``), defaulting to the name.
2.  **Embedded fields**: each base class except framework markers. The field
    name is the base's bare name, after unwrapping one level of ``Optional``.
    Embedded fields never consult metadata.
3.  **Multi-name fields**: ``a = b = 0  # type: T`` or ``a, b = 0, 0  # type: T``.
    Each name becomes an independent field with its own Element, keyed by its
    own name; metadata is not consulted. A starred name (``a, *rest = ...``) is
    skipped with a warning.

Private names are dropped. A field whose type is unsupported is dropped with
a warning; extraction of the enclosing aggregate continues.
"""

import re
from typing import Dict, Iterator, List, Optional, Tuple

import libcst as cst

from msgshape.compiler.frontend.context import ExtractionContext
from msgshape.compiler.frontend.elements import ElementBuilder, is_none, union_members
from msgshape.compiler.frontend.metadata import resolve_output_key
from msgshape.compiler.ir import Field
from msgshape.config import ExtractorConfig
from msgshape.core.diagnostics import DiagnosticLog
from msgshape.enums import DuplicateKeyPolicy
from msgshape.errors import DuplicateOutputKeyError
from msgshape.utils.cst_utils import is_private, last_component, string_value

MARKER_BASES = frozenset({"object", "BaseModel", "TypedDict", "NamedTuple", "Generic", "ABC", "Struct", "Protocol"})

TYPE_COMMENT_RE = re.compile(r"^#\s*type:\s*(?P<type>.+?)\s*$")

_EMPTY_MODULE = cst.Module(body=[])


def render(node: cst.CSTNode) -> str:
  return _EMPTY_MODULE.code_for_node(node)


def parse_type_comment(comment: Optional[cst.Comment]) -> Optional[cst.BaseExpression]:
  """
  Extracts the annotation from a PEP 484 ``# type: T`` comment.

  A comment that does not parse is returned as a string forward reference,
  which the builder then reports as unsupported.

  Returns:
      The annotation expression, or None if the line carries no type comment.
  """
  if comment is None:
    return None
  match = TYPE_COMMENT_RE.match(comment.value)
  if not match or match.group("type").startswith("ignore"):
    return None
  text = match.group("type")
  try:
    return cst.parse_expression(text)
  except cst.ParserSyntaxError:
    return cst.SimpleString(repr(text))


def embedded_name(expr: cst.BaseExpression) -> str:
  """
  Derives the field name of an embedded base.

  Unwraps at most one level of optional to reach a bare identifier.

  Returns:
      str: The bare name, or "" if none can be derived.
  """
  if isinstance(expr, cst.Name):
    return expr.value
  members = union_members(expr)
  others = [m for m in members if not is_none(m)]
  if len(members) > 1 and len(others) == 1 and isinstance(others[0], cst.Name):
    return others[0].value
  return ""


def is_marker_base(expr: cst.BaseExpression) -> bool:
  if isinstance(expr, cst.Subscript):
    expr = expr.value
  return last_component(expr) in MARKER_BASES


def _statement_lines(
  body: cst.BaseSuite,
) -> Iterator[Tuple[cst.BaseSmallStatement, Optional[cst.Comment]]]:
  """
  Yields the small statements of a class body with their line's trailing comment.

  A trailing comment is only attached when the line holds a single statement.
  """
  if isinstance(body, cst.SimpleStatementSuite):
    lines = [(body.body, body.trailing_whitespace.comment)]
  else:
    lines = [
      (stmt.body, stmt.trailing_whitespace.comment)
      for stmt in body.body
      if isinstance(stmt, cst.SimpleStatementLine)
    ]
  for smalls, comment in lines:
    for small in smalls:
      yield small, comment if len(smalls) == 1 else None


def _assigned_names(target: cst.BaseExpression, starred: bool = False) -> List[Tuple[str, bool]]:
  """
  Flattens an assignment target into its names, flagging those bound by ``*rest``.
  """
  if isinstance(target, cst.Name):
    return [(target.value, starred)]
  if isinstance(target, (cst.Tuple, cst.List)):
    names: List[Tuple[str, bool]] = []
    for el in target.elements:
      names.extend(_assigned_names(el.value, starred or isinstance(el, cst.StarredElement)))
    return names
  return []


class FieldExtractor:
  """
  Extracts the ordered field list of aggregates.

  Attributes:
      config (ExtractorConfig): Tag key and duplicate key policy.
      diagnostics (DiagnosticLog): Sink for notices and warnings of this pass.
      builder (ElementBuilder): Builder for field types.
  """

  def __init__(self, config: Optional[ExtractorConfig] = None, diagnostics: Optional[DiagnosticLog] = None) -> None:
    self.config = config or ExtractorConfig()
    self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
    self.builder = ElementBuilder(self)

  def extract_class(self, node: cst.ClassDef, context: ExtractionContext) -> List[Field]:
    """
    Extracts the fields of a class declaration.

    Args:
        node: The class declaration.
        context: Location of the declaration.

    Returns:
        List[Field]: Surviving fields, bases first, then body order.

    Raises:
        DuplicateOutputKeyError: If two fields share an output key under the "error" policy.
    """
    out: List[Field] = []

    for arg in node.bases:
      field = self._embedded_field(arg, context)
      if field is not None:
        out.append(field)

    for small, comment in _statement_lines(node.body):
      if isinstance(small, cst.AnnAssign):
        if isinstance(small.target, cst.Name):
          field = self._named_field(small.target.value, small.annotation.annotation, small.value, context)
          if field is not None:
            out.append(field)
      elif isinstance(small, cst.Assign):
        out.extend(self._assigned_fields(small, parse_type_comment(comment), context))

    return self._resolve_duplicates(out, context)

  def extract_inline(self, node: cst.Dict, context: ExtractionContext) -> List[Field]:
    """
    Extracts the fields of an inline aggregate (``{"x": int}``).

    Keys must be string literals; the name is used as-is, including a leading underscore.
    """
    out: List[Field] = []
    for element in node.elements:
      if not isinstance(element, cst.DictElement):
        self.diagnostics.warning(
          f"entry {render(element)!r} skipped, unpacking not supported",
          declaration=context.declaration,
          path=context.path,
        )
        continue
      name = string_value(element.key)
      if name is None:
        self.diagnostics.warning(
          f"entry {render(element.key)!r} skipped, key is not a string literal",
          declaration=context.declaration,
          path=context.path,
        )
        continue
      field = self._named_field(name, element.value, None, context, drop_private=False)
      if field is not None:
        out.append(field)
    return self._resolve_duplicates(out, context)

  def _named_field(
    self,
    name: str,
    annotation: cst.BaseExpression,
    value: Optional[cst.BaseExpression],
    context: ExtractionContext,
    drop_private: bool = True,
  ) -> Optional[Field]:
    if drop_private and is_private(name):
      return None

    output_key = resolve_output_key(name, annotation, value, self.config.tag_key)
    if output_key is None:
      self.diagnostics.notice(
        f"field {name!r} excluded", declaration=context.declaration, field=name, path=context.path
      )
      return None

    element = self.builder.build(annotation, context.nested(name))
    if element is None:
      self._unsupported(name, context)
      return None
    return Field(name, output_key, element)

  def _embedded_field(self, arg: cst.Arg, context: ExtractionContext) -> Optional[Field]:
    if arg.keyword is not None or arg.star or is_marker_base(arg.value):
      return None

    name = embedded_name(arg.value)
    if not name:
      self.diagnostics.warning(
        f"embedded {render(arg.value)!r} skipped, no field name can be derived",
        declaration=context.declaration,
        path=context.path,
      )
      return None
    if is_private(name):
      return None

    element = self.builder.build(arg.value, context.nested(name))
    if element is None:
      self._unsupported(name, context)
      return None
    return Field(name, name, element)

  def _assigned_fields(
    self, node: cst.Assign, annotation: Optional[cst.BaseExpression], context: ExtractionContext
  ) -> List[Field]:
    if annotation is None:
      # Untyped class attributes are not fields
      return []

    if len(node.targets) == 1 and isinstance(node.targets[0].target, cst.Name):
      field = self._named_field(node.targets[0].target.value, annotation, node.value, context)
      return [field] if field is not None else []

    out: List[Field] = []
    for target in node.targets:
      for name, starred in _assigned_names(target.target):
        if is_private(name):
          continue
        if starred:
          self.diagnostics.warning(
            f"field {name!r} skipped, starred target",
            declaration=context.declaration,
            field=name,
            path=context.path,
          )
          continue
        # One build per name: sibling fields never share an Element instance.
        element = self.builder.build(annotation, context.nested(name))
        if element is None:
          self._unsupported(name, context)
          continue
        out.append(Field(name, name, element))
    return out

  def _unsupported(self, name: str, context: ExtractionContext) -> None:
    self.diagnostics.warning(
      f"field {name!r} skipped, unsupported type",
      declaration=context.declaration,
      field=name,
      path=context.path,
    )

  def _resolve_duplicates(self, fields: List[Field], context: ExtractionContext) -> List[Field]:
    last_index: Dict[str, int] = {}
    for i, field in enumerate(fields):
      if field.output_key in last_index and self.config.duplicate_keys == DuplicateKeyPolicy.ERROR:
        raise DuplicateOutputKeyError(context.path, context.declaration, field.output_key)
      last_index[field.output_key] = i

    out: List[Field] = []
    for i, field in enumerate(fields):
      if last_index[field.output_key] != i:
        self.diagnostics.warning(
          f"field {field.source_name!r} overridden by a later field with output key {field.output_key!r}",
          declaration=context.declaration,
          path=context.path,
          field=field.source_name,
        )
        continue
      out.append(field)
    return out
