"""
JSON Model Dump.

A describing backend: renders extracted type-models as a JSON document so
that they can be inspected or handed to an out-of-process generator.
"""

import json
from typing import List

from msgshape.compiler.generator import ModelGenerator
from msgshape.compiler.ir import TypeModel


class JsonModelDumper(ModelGenerator):
  def __init__(self, indent: int = 2) -> None:
    self.indent = indent

  def generate(self, models: List[TypeModel]) -> str:
    return json.dumps({"models": [m.to_dict() for m in models]}, indent=self.indent)
