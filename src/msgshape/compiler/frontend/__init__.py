"""
Python Frontend.

Ingests Python source code into the type-model IR:
SourceLoader -> DeclarationFilter -> FieldExtractor/ElementBuilder -> ModelAssembler.
"""

from msgshape.compiler.frontend.assembler import ModelAssembler
from msgshape.compiler.frontend.context import ExtractionContext
from msgshape.compiler.frontend.declarations import DeclarationFilter
from msgshape.compiler.frontend.elements import ElementBuilder
from msgshape.compiler.frontend.fields import FieldExtractor
from msgshape.compiler.frontend.loader import SourceLoader

__all__ = [
  "DeclarationFilter",
  "ElementBuilder",
  "ExtractionContext",
  "FieldExtractor",
  "ModelAssembler",
  "SourceLoader",
]
