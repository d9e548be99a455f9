"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Source file helper writing dedented Python modules to a temp directory.
- Console capture routing Rich/logging output to an in-memory recorder.
"""

import io
import sys
import textwrap
from pathlib import Path
from typing import Callable

import pytest
from rich.console import Console

# Add src to path so we can import 'msgshape' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from msgshape.utils.console import reset_console, set_console  # noqa: E402


@pytest.fixture
def write_source(tmp_path: Path) -> Callable[..., Path]:
  """Returns a helper writing dedented source code to ``tmp_path / name``."""

  def _write(code: str, name: str = "models.py") -> Path:
    path = tmp_path / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(code), encoding="utf-8")
    return path

  return _write


@pytest.fixture
def captured_console():
  """
  Routes console and logging output to a recording console for the test.
  """
  recorder = Console(file=io.StringIO(), record=True, width=300, color_system=None)
  set_console(recorder)
  yield recorder
  reset_console()
