"""
Orchestration Engine for Type-Model Extraction.

This module provides the `ModelExtractor`, the primary driver of an extraction
pass. The pipeline for one file is:

1.  **Loading**: parse the source with LibCST and apply the export gate.
2.  **Filtering**: select the aggregate class declarations.
3.  **Extraction**: build the field list of each declaration.
4.  **Assembly**: wrap non-empty field lists into `TypeModel` entries.

Each pass builds its own collaborators and diagnostics log; nothing is shared
between files, so independent files may be processed in parallel.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

import libcst as cst

from msgshape.compiler.frontend import (
  DeclarationFilter,
  ExtractionContext,
  FieldExtractor,
  ModelAssembler,
  SourceLoader,
)
from msgshape.compiler.ir import TypeModel
from msgshape.config import ExtractorConfig
from msgshape.core.diagnostics import DiagnosticLog


@dataclass
class ExtractionResult:
  """
  Structured result of extracting a single file.
  """

  path: str
  models: List[TypeModel] = field(default_factory=list)
  diagnostics: DiagnosticLog = field(default_factory=DiagnosticLog)

  @property
  def has_warnings(self) -> bool:
    return len(self.diagnostics.warnings) > 0


class ModelExtractor:
  """
  The main extraction unit.

  Raises `ParseError`, `NoExportsError` and `DuplicateOutputKeyError`
  synchronously; unsupported fields and empty declarations only produce
  diagnostics.
  """

  def __init__(self, config: Optional[ExtractorConfig] = None) -> None:
    self.config = config or ExtractorConfig()
    self.loader = SourceLoader()
    self.declarations = DeclarationFilter()

  def extract_file(self, path: Union[str, Path]) -> ExtractionResult:
    """
    Extracts the type-models of a file on disk.

    Args:
        path: Location of the Python source file.

    Returns:
        ExtractionResult: Models in declaration order plus diagnostics.
    """
    module = self.loader.load(path)
    return self._extract(module, str(path))

  def extract_source(self, code: str, path: str = "<string>") -> ExtractionResult:
    """
    Extracts the type-models of an in-memory buffer.

    Args:
        code: Python source code.
        path: Name used to attribute errors.

    Returns:
        ExtractionResult: Models in declaration order plus diagnostics.
    """
    module = self.loader.parse(code, path)
    return self._extract(module, path)

  def _extract(self, module: cst.Module, path: str) -> ExtractionResult:
    result = ExtractionResult(path=path, diagnostics=DiagnosticLog(path))
    fields = FieldExtractor(self.config, result.diagnostics)
    assembler = ModelAssembler(result.diagnostics)

    for decl in self.declarations.collect(module):
      name = decl.name.value
      context = ExtractionContext(path=path, declaration=name)
      model = assembler.assemble(name, fields.extract_class(decl, context))
      if model is not None:
        result.models.append(model)

    return result
