"""
msgshape Package.

Extracts a canonical, recursive type-model from Python class declarations.
The model describes the serializable shape of each exported class and is the
input of a serialization code generator.

Usage
-----

.. code-block:: python

    from msgshape import extract_models

    for model in extract_models("models.py"):
        print(model.name, [f.output_key for f in model.fields])

Advanced Usage
^^^^^^^^^^^^^^

.. code-block:: python

    from msgshape import ExtractorConfig, ModelExtractor

    extractor = ModelExtractor(ExtractorConfig(tag_key="wire"))
    result = extractor.extract_source("class User:\\n  name: str\\n")
    for diag in result.diagnostics:
        print(diag.severity, diag.message)
"""

from pathlib import Path
from typing import List, Optional, Union

from msgshape.compiler.ir import TypeModel
from msgshape.config import ExtractorConfig
from msgshape.core.engine import ExtractionResult, ModelExtractor
from msgshape.errors import DuplicateOutputKeyError, MsgshapeError, NoExportsError, ParseError

__version__ = "0.0.1"


def extract_models(path: Union[str, Path], config: Optional[ExtractorConfig] = None) -> List[TypeModel]:
  """
  Extracts the type-models of a source file.

  This is a convenience wrapper around `ModelExtractor` that discards diagnostics.

  Args:
      path: The Python source file.
      config (ExtractorConfig, optional): Tag key and duplicate key policy.

  Returns:
      List[TypeModel]: Models in declaration order.

  Raises:
      ParseError: If the file is not valid Python.
      NoExportsError: If the file declares nothing exported.
      DuplicateOutputKeyError: If two fields of one class share an output key
          under the default "error" policy.
  """
  return ModelExtractor(config).extract_file(path).models


__all__ = [
  "extract_models",
  "ExtractorConfig",
  "ExtractionResult",
  "ModelExtractor",
  "TypeModel",
  "MsgshapeError",
  "ParseError",
  "NoExportsError",
  "DuplicateOutputKeyError",
  "__version__",
]
