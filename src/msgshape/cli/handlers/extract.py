"""
Extract Command Handler.

This module implements the logic for the `msgshape extract` command.
It orchestrates:
1. Configuration loading (pyproject.toml + CLI overrides).
2. File discovery (single file or directory scan).
3. Extraction via the Engine, one independent pass per file.
4. Rendering of diagnostics and of the resulting models (table or JSON).
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from rich.markup import escape
from rich.table import Table

from msgshape.compiler.backends.json_dump import JsonModelDumper
from msgshape.compiler.ir import TypeModel, format_element
from msgshape.config import ExtractorConfig
from msgshape.core.engine import ModelExtractor
from msgshape.errors import MsgshapeError, NoExportsError
from msgshape.utils.console import console, emit_diagnostics, log_error, log_info, log_success, log_warning


def collect_sources(path: Path) -> List[Path]:
  """
  Resolves the input path to a sorted list of Python files.
  """
  if path.is_file():
    return [path]
  return sorted(path.rglob("*.py"))


def render_table(model: TypeModel) -> Table:
  table = Table(title=model.name)
  table.add_column("Field", style="bold")
  table.add_column("Key", style="cyan")
  table.add_column("Type", style="magenta")
  for f in model.fields:
    table.add_row(escape(f.source_name), escape(f.output_key), escape(format_element(f.element)))
  return table


def handle_extract(
  input_path: Path,
  output_path: Optional[Path] = None,
  json_mode: bool = False,
  overrides: Optional[Dict[str, Any]] = None,
) -> int:
  """
  Handles the 'extract' command execution.

  Args:
      input_path: Source file or directory.
      output_path: Optional file to write the JSON dump to (implies JSON).
      json_mode: If True, print the JSON dump instead of tables.
      overrides: Configuration overrides from the command line.

  Returns:
      int: Exit code (0 for success, 1 if any file failed).
  """
  if not input_path.exists():
    log_error(f"Input not found: {input_path}")
    return 1

  try:
    config = ExtractorConfig.load(
      search_path=input_path if input_path.is_dir() else input_path.parent,
      **(overrides or {}),
    )
  except (ValidationError, TypeError) as e:
    log_error(f"Invalid configuration: {escape(str(e))}")
    return 1

  extractor = ModelExtractor(config)
  models: List[TypeModel] = []
  exit_code = 0

  for source in collect_sources(input_path):
    try:
      result = extractor.extract_file(source)
    except NoExportsError as e:
      # Directory scans routinely include package markers and private helpers
      if input_path.is_dir():
        log_warning(escape(str(e)))
        continue
      log_error(escape(str(e)))
      exit_code = 1
      continue
    except MsgshapeError as e:
      log_error(escape(str(e)))
      exit_code = 1
      continue

    # Logs would interleave with the JSON document on stdout
    if config.emit_diagnostics and not (json_mode and output_path is None):
      emit_diagnostics(result.diagnostics)
    models.extend(result.models)

  if output_path or json_mode:
    payload = JsonModelDumper().generate(models)
    if output_path:
      output_path.write_text(payload + "\n", encoding="utf-8")
      log_success(f"Wrote {len(models)} model(s) to [path]{escape(str(output_path))}[/path]")
    else:
      print(payload)
  else:
    for model in models:
      console.print(render_table(model))
    log_info(f"Extracted {len(models)} model(s)")

  return exit_code
