"""
Integration tests for the extraction engine.

Covers the end-to-end scenarios: plain fields, exclusion, multi-name
expansion, the export gate, embedded optionals, and determinism.
"""

import json
import textwrap

import pytest

from msgshape import extract_models
from msgshape.compiler.ir import AggregateElement, BaseElement, OptionalElement, SequenceElement
from msgshape.config import ExtractorConfig
from msgshape.core.engine import ModelExtractor
from msgshape.enums import BaseKind, DuplicateKeyPolicy, Severity
from msgshape.errors import DuplicateOutputKeyError, NoExportsError, ParseError

SAMPLE = '''
"""Sample models."""

from dataclasses import dataclass, field
from typing import Annotated, Any, Optional


@dataclass
class Header:
  version: uint16
  flags: list[bool]


@dataclass
class Message(Optional[Header]):
  id: int64
  body: list[uint8]
  attrs: dict[str, Any]
  scores: dict[str, float]
  sender: Annotated[Optional[str], {"msg": "from"}]
  token: str = field(default="", metadata={"msg": "-"})


class Secrets:
  key: Annotated[bytes, {"msg": "-"}]


def helper() -> None:
  pass
'''


def extract(code: str, **config):
  return ModelExtractor(ExtractorConfig(**config)).extract_source(textwrap.dedent(code), "models.py")


def test_scenario_plain_fields():
  result = extract(
    """
    class Person:
      Name: str
      Age: int
    """
  )
  (model,) = result.models
  assert [f.output_key for f in model.fields] == ["Name", "Age"]
  assert model.fields[0].element == BaseElement(BaseKind.STRING)
  assert model.fields[1].element == BaseElement(BaseKind.INT)


def test_scenario_excluded_field_is_absent():
  result = extract(
    """
    class Person:
      Name: str
      Password: Annotated[str, {"msg": "-"}]
    """
  )
  assert [f.source_name for f in result.models[0].fields] == ["Name"]


def test_scenario_multi_name_fields_are_not_aliased():
  result = extract(
    """
    class Pair:
      A = B = 0  # type: int
    """
  )
  a, b = result.models[0].fields
  assert (a.output_key, b.output_key) == ("A", "B")
  assert a.element == b.element == BaseElement(BaseKind.INT)
  assert a.element is not b.element


def test_scenario_no_exports():
  with pytest.raises(NoExportsError):
    extract(
      """
      class _Internal:
        value: int
      """
    )


def test_scenario_embedded_optional_reference():
  result = extract(
    """
    class Child(Optional[Parent]):
      name: str
    """
  )
  embedded = result.models[0].fields[0]
  assert embedded.source_name == "Parent"
  assert embedded.output_key == "Parent"


def test_sample_file(write_source):
  path = write_source(SAMPLE)
  result = ModelExtractor().extract_file(path)

  assert [m.name for m in result.models] == ["Header", "Message"]
  header, message = result.models
  assert header.root == OptionalElement(header.aggregate)
  assert header.fields[1].element == SequenceElement(BaseElement(BaseKind.BOOL))

  assert [(f.source_name, f.output_key) for f in message.fields] == [
    ("Header", "Header"),
    ("id", "id"),
    ("body", "body"),
    ("attrs", "attrs"),
    ("sender", "from"),
  ]
  assert message.fields[2].element == BaseElement(BaseKind.BYTES)
  assert message.fields[3].element == BaseElement(BaseKind.MAP_STR_ANY)

  messages = [(d.severity, d.message) for d in result.diagnostics]
  assert (Severity.NOTICE, "parsing Header") in messages
  assert (Severity.NOTICE, "parsing Message") in messages
  assert (Severity.WARNING, "field 'scores' skipped, unsupported type") in messages
  assert (Severity.WARNING, "Secrets has no eligible fields") in messages
  assert result.has_warnings
  assert {d.path for d in result.diagnostics} == {str(path)}


def test_every_field_excluded_yields_no_model():
  result = extract(
    """
    class Hidden:
      a: Annotated[int, {"msg": "-"}]
      b: str = field(metadata={"msg": "-"})

    class Shown:
      c: int
    """
  )
  assert [m.name for m in result.models] == ["Shown"]


def test_root_shape_for_every_model(write_source):
  result = ModelExtractor().extract_file(write_source(SAMPLE))
  for model in result.models:
    assert isinstance(model.root, OptionalElement)
    assert isinstance(model.root.of, AggregateElement)
    assert len(model.fields) > 0


def test_determinism(write_source):
  path = write_source(SAMPLE)
  runs = [json.dumps([m.to_dict() for m in extract_models(path)]) for _ in range(3)]
  assert runs[0] == runs[1] == runs[2]


def test_parse_error_aborts_file():
  with pytest.raises(ParseError):
    extract("class Broken(:\n  pass\n")


def test_duplicate_keys_error_and_last_wins():
  code = """
  class User:
    name: str
    nick: Annotated[str, {"msg": "name"}]
  """
  with pytest.raises(DuplicateOutputKeyError):
    extract(code)

  result = extract(code, duplicate_keys=DuplicateKeyPolicy.LAST_WINS)
  assert [f.source_name for f in result.models[0].fields] == ["nick"]


def test_extract_models_raises_on_duplicate_keys(write_source):
  path = write_source('class User:\n  name: str\n  nick: Annotated[str, {"msg": "name"}]\n')
  with pytest.raises(DuplicateOutputKeyError) as exc:
    extract_models(path)
  assert exc.value.key == "name"
  assert exc.value.declaration == "User"


def test_passes_share_no_state():
  extractor = ModelExtractor()
  first = extractor.extract_source("class A:\n  x: int\n")
  second = extractor.extract_source("class B:\n  y: dict[int, int]\n")
  assert len(first.diagnostics) == 1
  assert [d.severity for d in second.diagnostics] == [Severity.WARNING, Severity.WARNING]
