"""
Runtime Configuration Store.

Settings are read from the ``[tool.msgshape]`` table of the nearest
``pyproject.toml`` and can be overridden from the command line.
"""

import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from rich.markup import escape

from msgshape.enums import DuplicateKeyPolicy
from msgshape.utils.console import log_warning


class ExtractorConfig(BaseModel):
  """
  Configuration container for the extraction engine.
  """

  tag_key: str = Field("msg", description="Metadata key holding the output key override (or '-' to exclude).")
  duplicate_keys: DuplicateKeyPolicy = Field(
    DuplicateKeyPolicy.ERROR,
    description="What to do when two fields of one aggregate share an output key.",
  )
  emit_diagnostics: bool = Field(True, description="If True, the CLI renders notices and warnings.")

  @field_validator("tag_key")
  @classmethod
  def validate_tag_key(cls, v: str) -> str:
    """
    Ensures the tag key is a usable metadata key.

    Args:
        v (str): The raw key.

    Returns:
        str: The stripped key.

    Raises:
        ValueError: If the key is empty or contains whitespace.
    """
    v_clean = v.strip()
    if not v_clean or any(ch.isspace() for ch in v_clean):
      raise ValueError(f"Invalid tag key: {v!r}")
    return v_clean

  @classmethod
  def load(
    cls,
    tag_key: Optional[str] = None,
    duplicate_keys: Optional[str] = None,
    emit_diagnostics: Optional[bool] = None,
    search_path: Optional[Path] = None,
  ) -> "ExtractorConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        tag_key (Optional[str]): Override for the metadata key.
        duplicate_keys (Optional[str]): Override for the duplicate key policy.
        emit_diagnostics (Optional[bool]): Override for diagnostic rendering.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        ExtractorConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config = _load_toml_settings(start_dir)

    final: Dict[str, Any] = {}
    for key, override in (
      ("tag_key", tag_key),
      ("duplicate_keys", duplicate_keys),
      ("emit_diagnostics", emit_diagnostics),
    ):
      if override is not None:
        final[key] = override
      elif key in toml_config:
        final[key] = toml_config[key]

    return cls(**final)


def _load_toml_settings(start_path: Path) -> Dict[str, Any]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Dict[str, Any]: The [tool.msgshape] table, or an empty dict.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except tomllib.TOMLDecodeError as e:
        log_warning(f"Ignoring malformed {escape(str(toml_path))}: {escape(str(e))}")
        return {}

      tool_section = data.get("tool", {})
      return tool_section.get("msgshape", {})

  return {}


def parse_cli_key_values(items: Optional[List[str]]) -> Dict[str, Any]:
  """
  Parses a list of 'key=value' strings into a dictionary.

  Booleans are inferred, everything else stays a string.

  Args:
      items (Optional[List[str]]): List of raw CLI strings directly from argparse.

  Returns:
      Dict[str, Any]: Parsed dictionary.
  """
  if not items:
    return {}

  config: Dict[str, Any] = {}
  for item in items:
    if "=" not in item:
      log_warning(f"Ignoring invalid config format: '{escape(item)}'. Expected 'key=value'.")
      continue

    key, val_str = item.split("=", 1)
    key = key.strip()
    val_str = val_str.strip()

    final_val: Any = val_str
    if val_str.lower() == "true":
      final_val = True
    elif val_str.lower() == "false":
      final_val = False

    config[key] = final_val

  return config
