"""
Main Entry Point for msgshape CLI.

This module handles argument parsing and dispatches to the command handlers
defined in `msgshape.cli.handlers`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from msgshape import __version__
from msgshape.config import parse_cli_key_values
from msgshape.cli.handlers.extract import handle_extract
from msgshape.enums import DuplicateKeyPolicy


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="msgshape: Type-model extraction for serialization generators")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: EXTRACT ---
  cmd_ext = subparsers.add_parser("extract", help="Extract type-models from a Python file or directory")
  cmd_ext.add_argument("path", type=Path, help="Input source file or directory")
  cmd_ext.add_argument("--json", action="store_true", help="Print the models as JSON instead of tables")
  cmd_ext.add_argument("--out", type=Path, default=None, help="Write the JSON dump to a file")
  cmd_ext.add_argument("--tag-key", default=None, help="Metadata key for output names (default: from toml, or 'msg')")
  cmd_ext.add_argument(
    "--duplicate-keys",
    choices=[p.value for p in DuplicateKeyPolicy],
    default=None,
    help="Policy for fields sharing an output key (default: error)",
  )
  cmd_ext.add_argument("--quiet", action="store_true", help="Do not print per-declaration diagnostics")
  cmd_ext.add_argument(
    "--config",
    nargs="*",
    help="Additional configuration in key=value format (e.g. tag_key=wire)",
  )

  args = parser.parse_args(argv)

  if args.command == "extract":
    overrides = parse_cli_key_values(args.config)
    if args.tag_key is not None:
      overrides["tag_key"] = args.tag_key
    if args.duplicate_keys is not None:
      overrides["duplicate_keys"] = args.duplicate_keys
    if args.quiet:
      overrides["emit_diagnostics"] = False
    return handle_extract(args.path, args.out, args.json, overrides)

  return 0


if __name__ == "__main__":
  sys.exit(main())
