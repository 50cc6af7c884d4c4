"""
Project-wide pytest configuration.

Adds the repository root to sys.path so tests can import the `stdio_mcp`
package without requiring `PYTHONPATH` tweaks or editable installs.
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent

str_root = str(ROOT)
if str_root not in sys.path:
    sys.path.insert(0, str_root)
