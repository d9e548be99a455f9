"""
Entry point for module execution (``python -m msgshape``).

This module delegates execution to the CLI handler in ``msgshape.cli.__main__``.
"""

import sys
from msgshape.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
